# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pyifadmin.config.system_config_settings import SystemConfigSettings as SCS
from pyifadmin.lib.types import SnmpEngineIdHex

DEFAULT_ENGINE_ID = SnmpEngineIdHex("8000B983805C5CA57BAFB2CAD716E0480B")


class SnmpSessionOptions(BaseModel):
    """
    Transport settings shared by both session variants.

    Attributes:
        port (int): Agent UDP port for requests.
        timeout (float): Per-attempt timeout in **seconds**.
        retries (int): Retransmissions after the first attempt.
        trap_port (int): Trap/inform port; reserved, a SET never uses it.
        transport (str): Transport domain; only UDP over IPv4.
        id_bits_size (int): Request-id space; pysnmp always draws 32-bit ids.
        report_oid_mismatch_errors (bool): Response OID mismatches are not reported.
        context (str): SNMP context name.
        engine_id (str): Local SNMPv3 engine id as hex.
    """
    model_config = ConfigDict(frozen=True)

    port: int                               = Field(default=161, ge=1, le=65535, description="Agent UDP port")
    timeout: float                          = Field(default=5, gt=0, description="Timeout in seconds")
    retries: int                            = Field(default=1, ge=0, description="Retry count")
    trap_port: int                          = Field(default=162, ge=1, le=65535, description="Trap port")
    transport: Literal["udp4"]              = Field(default="udp4", description="Transport domain")
    id_bits_size: Literal[32]               = Field(default=32, description="Request-id bit size")
    report_oid_mismatch_errors: bool        = Field(default=False, description="Report response OID mismatches")
    context: str                            = Field(default="", description="SNMP context name")
    engine_id: SnmpEngineIdHex              = Field(default=DEFAULT_ENGINE_ID, description="Local SNMPv3 engine id (hex)")

    @field_validator("engine_id", mode="before")
    def _validate_engine_id(cls, v: object) -> str:
        """
        Engine ids are 5..32 octets (RFC 3411); accept an optional 0x prefix.
        """
        if not isinstance(v, str):
            raise ValueError("engine_id must be a hex string")
        text = v.strip().removeprefix("0x").removeprefix("0X")
        try:
            raw = bytes.fromhex(text)
        except ValueError:
            raise ValueError(f"engine_id is not valid hex: {v!r}") from None
        if not 5 <= len(raw) <= 32:
            raise ValueError(f"engine_id must be 5..32 octets, got {len(raw)}")
        return text.upper()

    @classmethod
    def from_system_config(cls) -> SnmpSessionOptions:
        """Build options from the process-wide system configuration."""
        return cls(
            port=SCS.snmp_port(),
            timeout=SCS.snmp_timeout(),
            retries=SCS.snmp_retries(),
            trap_port=SCS.snmp_trap_port(),
            transport=SCS.snmp_transport(),
            id_bits_size=SCS.snmp_id_bits_size(),
            report_oid_mismatch_errors=SCS.snmp_report_oid_mismatch_errors(),
            context=SCS.snmp_context(),
            engine_id=SCS.snmp_v3_engine_id(),
        )


@dataclass(frozen=True, slots=True)
class SnmpSetResult:
    """Outcome of one SET request: acknowledged, or failed with the engine/agent error text."""

    ok: bool
    error: str | None = None

    @classmethod
    def success(cls) -> SnmpSetResult:
        return cls(ok=True)

    @classmethod
    def failure(cls, error: str) -> SnmpSetResult:
        return cls(ok=False, error=error)
