# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import re

from pyifadmin.lib.inet import Inet
from pyifadmin.lib.types import InetAddressStr


class InetGenerate:
    """
    Validation helpers for the device addresses found in job records.
    """

    # Dotted-quad grammar accepted for job targets; each octet 0-255.
    _IPV4_OCTET = r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)"
    IPV4_PATTERN = re.compile(rf"{_IPV4_OCTET}(?:\.{_IPV4_OCTET}){{3}}")

    @staticmethod
    def is_ipv4_strict(inet: object) -> bool:
        """
        Check a string against the strict four-octet IPv4 grammar.

        Each octet must be 0-255 written with at most three digits; a single
        leading zero ("010", "01") is tolerated. Surrounding whitespace, hex,
        CIDR suffixes and any other octet count are rejected.

        Args:
            inet: Candidate address, usually straight from the job record.

        Returns:
            bool: True if the whole string matches the grammar.

        Example:
            is_ipv4_strict('10.0.0.1')  -> True
            is_ipv4_strict('999.1.1.1') -> False
        """
        if not isinstance(inet, str):
            return False
        return InetGenerate.IPV4_PATTERN.fullmatch(inet) is not None

    @staticmethod
    def get_inet_version(inet: InetAddressStr | str) -> str:
        """
        Returns:
            str: 'IPv4' or 'IPv6'.

        Raises:
            ValueError: If ``inet`` is not an IP address.
        """
        return "IPv4" if Inet(inet).is_ipv4 else "IPv6"

    @staticmethod
    def normalize_ipv4(inet: str) -> str:
        """
        Strip leading zeros from each octet of a strictly valid IPv4 address.

        Resolvers read '010' as octal, so addresses are normalized before they
        reach the transport.

        Raises:
            ValueError: If the address does not match the strict IPv4 grammar.

        Example:
            normalize_ipv4('010.000.0.01') -> '10.0.0.1'
        """
        if not InetGenerate.is_ipv4_strict(inet):
            raise ValueError(f"Invalid IPv4 address: {inet}")
        return ".".join(str(int(octet, 10)) for octet in inet.split("."))

