# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

from pyifadmin.job.interface_range import InterfaceRange
from pyifadmin.lib.exceptions import JobValidationError
from pyifadmin.lib.inet_utils import InetGenerate
from pyifadmin.lib.types import InterfaceRangeStr, IPv4Str


class JobValidator:
    """
    Syntactic checks on job input, run before any session exists.

    Each failure raises ``JobValidationError`` whose message quotes the raw
    value so it can be reported back unchanged.
    """

    @staticmethod
    def validate_device_ip(raw: object) -> IPv4Str:
        """
        Accept a strict dotted-quad IPv4 address.

        Returns:
            IPv4Str: The address with leading zeros stripped from each octet.
        """
        if not InetGenerate.is_ipv4_strict(raw):
            raise JobValidationError(f"Supplied Device IP is not an IPv4 address. Got: '{raw}'")
        return IPv4Str(InetGenerate.normalize_ipv4(str(raw)))

    @staticmethod
    def validate_interface_ids(raw: object) -> InterfaceRange:
        """
        Accept a comma separated list of indices and ``start-end`` spans.

        Returns:
            InterfaceRange: The range, expanded once; ``.text`` is the raw string.
        """
        if not InterfaceRange.is_valid(raw):
            raise JobValidationError(f"Supplied Interface ID String has incorrect formatting. Got: '{raw}'")

        text = InterfaceRangeStr(str(raw))
        if InterfaceRange.size(text) > InterfaceRange.MAX_INDICES:
            raise JobValidationError(
                f"Supplied Interface ID String selects more than {InterfaceRange.MAX_INDICES} interfaces. "
                f"Got: '{raw}'")
        return InterfaceRange(text)

    @staticmethod
    def validate_expansion(interface_range: InterfaceRange) -> InterfaceRange:
        """Reject a range that selects no interface at all, such as ``"5-3"``."""
        if len(interface_range) == 0:
            raise JobValidationError(
                f"Supplied Interface ID String does not select any interface. Got: '{interface_range.text}'"
            )
        return interface_range
