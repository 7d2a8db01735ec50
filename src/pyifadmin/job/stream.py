# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from typing import BinaryIO, TextIO

from pyifadmin.job.models import CompletionRecord
from pyifadmin.job.orchestrator import run_job
from pyifadmin.lib.types import JsonValue
from pyifadmin.snmp.factory import SessionFactory
from pyifadmin.snmp.options import SnmpSessionOptions


class InvalidRecord:
    """Placeholder yielded for an input line that is not valid JSON."""

    __slots__ = ("line", "error")

    def __init__(self, line: str, error: str) -> None:
        self.line = line
        self.error = error


class JsonLineStream:
    """
    Line-delimited JSON channel: one job record in, one completion record out.

    The reader may be binary (``sys.stdin.buffer``); each line is then
    decoded as UTF-8 on its own so one bad line cannot end the stream.
    """

    ENCODING = "utf-8"

    def __init__(self, reader: BinaryIO | TextIO, writer: TextIO) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._reader = reader
        self._writer = writer

    def records(self) -> Iterator[JsonValue | InvalidRecord]:
        """Yield each non-blank input line decoded, or ``InvalidRecord`` if it is not UTF-8 JSON."""
        for line in self._reader:
            if not line.strip():
                continue
            try:
                text = line.decode(self.ENCODING) if isinstance(line, bytes) else line
                yield json.loads(text.strip())
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                self.logger.error("Undecodable input line: %s", e)
                shown = line.decode(self.ENCODING, errors="replace") if isinstance(line, bytes) else line
                yield InvalidRecord(shown.strip(), str(e))

    def write(self, record: CompletionRecord) -> None:
        self._writer.write(record.as_json() + "\n")
        self._writer.flush()


async def serve(stream: JsonLineStream,
                options: SnmpSessionOptions | None = None,
                session_factory: SessionFactory | None = None) -> int:
    """
    Process records one after another until the input ends.

    Returns:
        int: Number of completion records written.
    """
    written = 0
    for record in stream.records():
        if isinstance(record, InvalidRecord):
            result = CompletionRecord.failed(f"Invalid job record: {record.error}")
        else:
            result = await run_job(record, options=options, session_factory=session_factory)
        stream.write(result)
        written += 1
    return written
