# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import ipaddress

from pyifadmin.lib.types import InetAddressStr


class Inet:
    """
    Address of the SNMP agent a job talks to.

    Attributes:
        inet (str): The address in compressed canonical text form.
        version (int): 4 or 6.
    """

    def __init__(self, inet: InetAddressStr | str) -> None:
        """
        Raises:
            ValueError: If ``inet`` is not an IPv4 or IPv6 address.
        """
        try:
            self._address = ipaddress.ip_address(inet)
        except ValueError:
            raise ValueError(f"Invalid IP address: {inet}") from None

    @property
    def inet(self) -> str:
        return str(self._address)

    @property
    def version(self) -> int:
        return self._address.version

    @property
    def is_ipv4(self) -> bool:
        return self._address.version == 4

    def transport_address(self, port: int) -> tuple[str, int]:
        """Return the ``(host, port)`` pair handed to the UDP transport."""
        return self.inet, port

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Inet):
            return NotImplemented
        return self._address == other._address

    def __hash__(self) -> int:
        return hash(self._address)

    def __repr__(self) -> str:
        return f"Inet({self.inet!r})"

    def __str__(self) -> str:
        return self.inet
