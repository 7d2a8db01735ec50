# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import logging
import re

from pyifadmin.lib.exceptions import JobValidationError
from pyifadmin.lib.types import InterfaceIndexStr, InterfaceRangeStr


class InterfaceRange:
    """
    Cisco-like interface range, e.g. ``"1-4,6"``.

    Segments are comma separated; each is a single ifIndex or an inclusive
    ``start-end`` span. Expansion keeps segment order and does not sort or
    de-duplicate:

        "1-4,6" -> ["1", "2", "3", "4", "6"]
        "6,1-4" -> ["6", "1", "2", "3", "4"]
        "5-3"   -> []

    A range may select at most ``MAX_INDICES`` interfaces, since every index
    becomes one binding of a single SET PDU.
    """

    SEGMENT_SEP = ","
    SPAN_SEP = "-"
    PATTERN = re.compile(r"[0-9]+(?:-[0-9]+)?(?:,[0-9]+(?:-[0-9]+)?)*")
    MAX_INDICES = 1024

    _logger = logging.getLogger("InterfaceRange")

    def __init__(self, text: InterfaceRangeStr | str) -> None:
        """
        Raises:
            JobValidationError: If ``text`` does not match the range grammar or
                selects more than ``MAX_INDICES`` interfaces.
        """
        if not InterfaceRange.is_valid(text):
            raise JobValidationError(f"Invalid interface range: {text!r}")
        if InterfaceRange.size(text) > InterfaceRange.MAX_INDICES:
            raise JobValidationError(
                f"Interface range {text!r} selects more than {InterfaceRange.MAX_INDICES} interfaces")
        self._text = InterfaceRangeStr(text)
        self._indices = InterfaceRange.expand(text)

    @property
    def text(self) -> InterfaceRangeStr:
        return self._text

    @property
    def indices(self) -> list[InterfaceIndexStr]:
        return list(self._indices)

    def __len__(self) -> int:
        return len(self._indices)

    def __repr__(self) -> str:
        return f"InterfaceRange({self._text!r})"

    @staticmethod
    def is_valid(text: object) -> bool:
        """Return True if ``text`` is a string matching the range grammar."""
        if not isinstance(text, str):
            return False
        return InterfaceRange.PATTERN.fullmatch(text) is not None

    @staticmethod
    def size(text: str) -> int:
        """Number of indices ``expand(text)`` yields, computed without expanding."""
        total = 0
        for segment in text.split(InterfaceRange.SEGMENT_SEP):
            bounds = InterfaceRange._parse_segment(segment)
            if bounds is not None:
                start, end = bounds
                total += max(0, end - start + 1)
        return total

    @staticmethod
    def expand(text: str) -> list[InterfaceIndexStr]:
        """
        Expand a range string into interface indices in canonical decimal form.

        A descending span contributes nothing. A segment that cannot be parsed
        is logged and skipped.
        """
        indices: list[InterfaceIndexStr] = []
        for segment in text.split(InterfaceRange.SEGMENT_SEP):
            indices.extend(InterfaceRange._expand_segment(segment))
        return indices

    @staticmethod
    def _parse_segment(segment: str) -> tuple[int, int] | None:
        try:
            if InterfaceRange.SPAN_SEP not in segment:
                index = int(segment, 10)
                return index, index

            start_text, end_text = segment.split(InterfaceRange.SPAN_SEP)
            return int(start_text, 10), int(end_text, 10)

        except ValueError:
            return None

    @staticmethod
    def _expand_segment(segment: str) -> list[InterfaceIndexStr]:
        bounds = InterfaceRange._parse_segment(segment)
        if bounds is None:
            InterfaceRange._logger.warning("Skipping malformed interface range segment %r", segment)
            return []

        start, end = bounds
        if end < start:
            InterfaceRange._logger.debug("Descending interface span %r selects nothing", segment)

        return [InterfaceIndexStr(str(i)) for i in range(start, end + 1)]
