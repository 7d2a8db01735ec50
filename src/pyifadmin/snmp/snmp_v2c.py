# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

from pysnmp.hlapi.v3arch.asyncio import CommunityData

from pyifadmin.lib.exceptions import SnmpConfigError
from pyifadmin.lib.inet import Inet
from pyifadmin.lib.types import SnmpCommunity
from pyifadmin.snmp.options import SnmpSessionOptions
from pyifadmin.snmp.session import SnmpSetSession


class Snmp_v2c(SnmpSetSession):
    """
    SNMPv2c session authenticated by a community string.

    Example:
        >>> snmp = Snmp_v2c(Inet('192.168.1.1'), community='private')
        >>> await snmp.set(varbinds)
        >>> snmp.close()
    """

    def __init__(self,
                 host: Inet,
                 community: SnmpCommunity | str,
                 options: SnmpSessionOptions | None = None) -> None:
        """
        Args:
            host (Inet): Address of the SNMP agent.
            community (str): Write community string; must not be blank.
            options (SnmpSessionOptions | None): Transport settings (default from config).

        Raises:
            SnmpConfigError: If the community string is blank.
        """
        if not isinstance(community, str) or not community.strip():
            raise SnmpConfigError("SNMPv2c requires a non-empty snmp_community")
        self._community = str(community)
        super().__init__(host, options)

    def _auth_data(self) -> CommunityData:
        return CommunityData(self._community, mpModel=1)
