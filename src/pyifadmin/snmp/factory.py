# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

from typing import Protocol

from pyifadmin.config.system_config_settings import SystemConfigSettings as SCS
from pyifadmin.lib.exceptions import SnmpConfigError
from pyifadmin.lib.inet import Inet
from pyifadmin.lib.types import SnmpCommunity
from pyifadmin.snmp.options import SnmpSessionOptions
from pyifadmin.snmp.security import UsmCredentials
from pyifadmin.snmp.session import SnmpSetSession
from pyifadmin.snmp.snmp_v2c import Snmp_v2c
from pyifadmin.snmp.snmp_v3 import Snmp_v3

SessionCredentials = SnmpCommunity | str | UsmCredentials


class SessionFactory(Protocol):
    def __call__(self,
                 host: Inet,
                 credentials: SessionCredentials,
                 options: SnmpSessionOptions) -> SnmpSetSession: ...


class SnmpSessionFactory:
    """Chooses the session variant from the shape of the credentials."""

    @staticmethod
    def create(host: Inet,
               credentials: SessionCredentials,
               options: SnmpSessionOptions) -> SnmpSetSession:
        """
        Build the session for one job.

        Args:
            host: Target agent.
            credentials: A community string, or resolved USM credentials.
            options: Transport settings.

        Returns:
            SnmpSetSession: ``Snmp_v3`` for USM credentials, ``Snmp_v2c`` otherwise.

        Raises:
            SnmpConfigError: If the selected SNMP version is disabled in system.json.
        """
        if isinstance(credentials, UsmCredentials):
            if not SCS.snmp_v3_enable():
                raise SnmpConfigError("SNMPv3 is disabled in system configuration (SNMP.version.3.enable)")
            return Snmp_v3(host, credentials, options)

        if not SCS.snmp_enable():
            raise SnmpConfigError("SNMPv2c is disabled in system configuration (SNMP.version.2c.enable)")
        return Snmp_v2c(host, credentials, options)
