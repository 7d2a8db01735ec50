# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

from pysnmp.hlapi.v3arch.asyncio import SnmpEngine, UsmUserData
from pysnmp.proto.rfc1902 import OctetString

from pyifadmin.lib.inet import Inet
from pyifadmin.snmp.options import SnmpSessionOptions
from pyifadmin.snmp.security import UsmCredentials
from pyifadmin.snmp.session import SnmpSetSession


class Snmp_v3(SnmpSetSession):
    """
    SNMPv3 session using the user-based security model.

    The local engine is created with the configured engine id; the agent's
    authoritative engine id is discovered by pysnmp on the first request.

    Example:
        >>> creds = UsmCredentials.resolve('admin', 'authPriv', 'sha', 'authpass1', 'aes', 'privpass1')
        >>> async with Snmp_v3(Inet('10.0.0.1'), creds) as snmp:
        ...     await snmp.set(varbinds)
    """

    def __init__(self,
                 host: Inet,
                 credentials: UsmCredentials,
                 options: SnmpSessionOptions | None = None) -> None:
        self._credentials = credentials
        super().__init__(host, options)
        self.logger.debug("SNMPv3 session for %s: user=%s level=%s auth=%s priv=%s",
                          self._host,
                          credentials.username,
                          credentials.security_level,
                          credentials.auth_protocol,
                          credentials.priv_protocol)

    @property
    def credentials(self) -> UsmCredentials:
        return self._credentials

    def _create_engine(self) -> SnmpEngine:
        return SnmpEngine(snmpEngineID=OctetString(hexValue=self._options.engine_id))

    def _auth_data(self) -> UsmUserData:
        creds = self._credentials
        return UsmUserData(
            creds.username,
            authKey=creds.auth_key,
            privKey=creds.priv_key,
            authProtocol=creds.usm_auth_protocol,
            privProtocol=creds.usm_priv_protocol,
        )
