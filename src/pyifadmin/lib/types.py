# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal, NewType, TypeAlias


# Enum String Type
class StringEnum(str, Enum):
    """Py3.10-compatible StrEnum shim."""

    def __str__(self) -> str:
        return str(self.value)


# Decoded JSON
JsonScalar: TypeAlias   = str | int | float | bool | None
JsonValue: TypeAlias    = JsonScalar | list["JsonValue"] | dict[str, "JsonValue"]

# ────────────────────────────────────────────────────────────────────────────────
# Paths / filesystem
# ────────────────────────────────────────────────────────────────────────────────
PathLike    = str | Path
FileNameStr = NewType("FileNameStr", str)

# ────────────────────────────────────────────────────────────────────────────────
# SNMP identifiers
# ────────────────────────────────────────────────────────────────────────────────
OidStr              = NewType("OidStr", str)                # dotted-decimal
InterfaceIndexStr   = NewType("InterfaceIndexStr", str)     # canonical decimal ifIndex, "12"
InterfaceRangeStr   = NewType("InterfaceRangeStr", str)     # "1-4,6"
SnmpEngineIdHex     = NewType("SnmpEngineIdHex", str)       # "8000B983..."

# ────────────────────────────────────────────────────────────────────────────────
# Credentials (store as plain strings; never log)
# ────────────────────────────────────────────────────────────────────────────────
SnmpCommunity   = NewType("SnmpCommunity", str)
SnmpUserName    = NewType("SnmpUserName", str)
SnmpSecretKey   = NewType("SnmpSecretKey", str)

# Network addressing (store as plain strings; validate elsewhere)
InetAddressStr  = NewType("InetAddressStr", str)        # 192.168.0.1 | 2001:db8::1
IPv4Str         = NewType("IPv4Str", InetAddressStr)    # 192.168.0.1

# ────────────────────────────────────────────────────────────────────────────────
# Process
# ────────────────────────────────────────────────────────────────────────────────
ExitCode        = NewType("ExitCode", int)              # process exit status
CompletionCode: TypeAlias = Literal[0, 1]               # job outcome: 0 success, 1 failure

# ────────────────────────────────────────────────────────────────────────────────
# Explicit public surface
# ────────────────────────────────────────────────────────────────────────────────
__all__ = [
    "StringEnum",
    "JsonScalar", "JsonValue",
    "PathLike", "FileNameStr",
    "OidStr", "InterfaceIndexStr", "InterfaceRangeStr", "SnmpEngineIdHex",
    "SnmpCommunity", "SnmpUserName", "SnmpSecretKey",
    "InetAddressStr", "IPv4Str",
    "ExitCode", "CompletionCode",
]
