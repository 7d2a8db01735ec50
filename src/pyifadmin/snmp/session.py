# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from types import TracebackType

from pysnmp.error import PySnmpError
from pysnmp.hlapi.v3arch.asyncio import (
    CommunityData,
    ContextData,
    SnmpEngine,
    UdpTransportTarget,
    UsmUserData,
    set_cmd,
)
from pysnmp.proto.rfc1902 import Integer32

from pyifadmin.lib.exceptions import SnmpTransportError
from pyifadmin.lib.inet import Inet
from pyifadmin.snmp.options import SnmpSessionOptions, SnmpSetResult
from pyifadmin.snmp.varbind import AdminStatusVarbind


class SnmpSetSession(ABC):
    """
    One-shot SNMP session that writes a list of bindings in a single SET.

    Subclasses supply the authentication data and, where needed, the local
    SNMP engine. Sending, error mapping and cleanup are shared.

    Example:
        >>> async with Snmp_v2c(Inet('10.0.0.1'), community='private') as session:
        ...     result = await session.set(varbinds)
    """

    def __init__(self, host: Inet, options: SnmpSessionOptions | None = None) -> None:
        self.logger     = logging.getLogger(self.__class__.__name__)
        self._inet      = host
        self._host      = host.inet
        self._options   = options if options is not None else SnmpSessionOptions.from_system_config()
        self._snmp_engine = self._create_engine()
        self._closed    = False

    @property
    def host(self) -> str:
        return self._host

    @property
    def options(self) -> SnmpSessionOptions:
        return self._options

    @property
    def closed(self) -> bool:
        return self._closed

    @abstractmethod
    def _auth_data(self) -> CommunityData | UsmUserData:
        """Return the pysnmp authentication data for this session."""

    def _create_engine(self) -> SnmpEngine:
        return SnmpEngine()

    def _context_data(self) -> ContextData:
        return ContextData(contextName=self._options.context)

    async def set(self, varbinds: Sequence[AdminStatusVarbind]) -> SnmpSetResult:
        """
        Send every binding in one SET PDU and wait for the agent's answer.

        Notes
        -----
        Timeouts, authentication failures and agent error-status values are
        returned as a failed ``SnmpSetResult``; they are never raised.

        Args:
            varbinds: Bindings to write, in request order.

        Returns:
            SnmpSetResult: success once the agent acknowledged the SET.

        Raises:
            ValueError: If ``varbinds`` is empty.
            RuntimeError: If the session was already closed.
        """
        if self._closed:
            raise RuntimeError(f"{self.__class__.__name__} for {self._host} is closed")
        if not varbinds:
            raise ValueError("SET requires at least one varbind")

        self.logger.debug("SNMP-SET %s: %s", self._host,
                          ", ".join(f"{vb.oid}={int(vb.value)}" for vb in varbinds))

        try:
            transport = await UdpTransportTarget.create(self._inet.transport_address(self._options.port),
                                                        timeout=self._options.timeout,     # seconds
                                                        retries=self._options.retries,     # count
                                                        )

            errorIndication, errorStatus, errorIndex, _ = await set_cmd(
                self._snmp_engine,
                self._auth_data(),
                transport,
                self._context_data(),
                *[vb.to_object_type() for vb in varbinds],
            )
            self._raise_on_snmp_error(errorIndication, errorStatus, errorIndex, varbinds)

        except SnmpTransportError as e:
            self.logger.error("SNMP SET to %s failed: %s", self._host, e)
            return SnmpSetResult.failure(str(e))

        except PySnmpError as e:
            self.logger.error("SNMP engine error during SET to %s: %s", self._host, e)
            return SnmpSetResult.failure(str(e))

        self.logger.info("SNMP SET to %s acknowledged (%d varbinds)", self._host, len(varbinds))
        return SnmpSetResult.success()

    def close(self) -> None:
        """
        Close the SNMP engine dispatcher and release resources. Safe to call twice.
        """
        if self._closed:
            return
        self._closed = True
        self._snmp_engine.close_dispatcher()

    async def __aenter__(self) -> SnmpSetSession:
        return self

    async def __aexit__(self,
                        exc_type: type[BaseException] | None,
                        exc: BaseException | None,
                        tb: TracebackType | None) -> None:
        self.close()

    ###################
    # Private Methods #
    ###################

    def _raise_on_snmp_error(self,
                             errorIndication: Exception | str | None,
                             errorStatus: object | None,
                             errorIndex: Integer32 | int | None,
                             varbinds: Sequence[AdminStatusVarbind]) -> None:
        """
        Raises SnmpTransportError if any SNMP error is detected.

        Args:
            errorIndication: Engine-level error (timeout, unknown user, wrong digest ...).
            errorStatus: Agent error-status (noAccess, wrongType, notWritable ...).
            errorIndex: 1-based index of the binding the agent rejected, 0 if none.
            varbinds: The bindings that were sent, to name the rejected OID.
        """
        if errorIndication:
            raise SnmpTransportError(str(errorIndication))
        if errorStatus:
            # errorStatus objects from pysnmp typically expose prettyPrint()
            pretty = getattr(errorStatus, "prettyPrint", None)
            status_text = pretty() if callable(pretty) else str(errorStatus)
            position = int(errorIndex or 0)
            if 0 < position <= len(varbinds):
                raise SnmpTransportError(f"{status_text} at {varbinds[position - 1].oid}")
            raise SnmpTransportError(status_text)
