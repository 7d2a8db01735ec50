# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import logging
import math
import re
from typing import Any, cast

from pyifadmin.config.config_manager import ConfigManager
from pyifadmin.lib.types import FileNameStr, SnmpEngineIdHex


class SystemConfigSettings:
    """Provides dynamically reloaded system configuration via class properties."""
    _cfg        = ConfigManager()
    _logger     = logging.getLogger("SystemConfigSettings")

    _DEFAULT_SNMP_PORT: int                 = 161
    _DEFAULT_SNMP_TRAP_PORT: int            = 162
    _DEFAULT_SNMP_RETRIES: int              = 1
    _DEFAULT_SNMP_TIMEOUT: float            = 5.0
    _DEFAULT_SNMP_TRANSPORT: str            = "udp4"
    _DEFAULT_SNMP_ID_BITS_SIZE: int         = 32
    _DEFAULT_SNMP_CONTEXT: str              = ""
    _DEFAULT_SNMP_ENGINE_ID: str            = "8000B983805C5CA57BAFB2CAD716E0480B"
    _DEFAULT_LOG_LEVEL: str                 = "INFO"
    _DEFAULT_LOG_DIR: str                   = "logs"
    _DEFAULT_LOG_FILENAME: str              = "pyifadmin.log"

    _TRUE_WORDS                             = ("1", "true", "yes", "on")
    _FALSE_WORDS                            = ("0", "false", "no", "off")

    _engine_id_override: str | None         = None

    @classmethod
    def initialize(cls, config_path: str | None = None) -> None:
        """
        Bind the process-wide configuration to ``config_path``.

        Called once at startup; without a path the default resolution of
        ConfigManager applies. Clears any engine id override.
        """
        cls._cfg = ConfigManager(config_path)
        cls._engine_id_override = None
        cls._logger.debug("Configuration loaded from %s", cls._cfg.get_config_path())

    @classmethod
    def override_engine_id(cls, engine_id: str | None) -> None:
        """Replace the configured SNMPv3 engine id for the rest of the process."""
        cls._engine_id_override = engine_id

    @classmethod
    def _fallback(cls, problem: str, path: tuple[str, ...], value: object, default: object) -> Any:
        """Log an unusable configuration value and return ``default`` in its place."""
        if problem == "Missing":
            cls._logger.error("Missing configuration value for '%s'; using default %r",
                              ".".join(path), default)
        else:
            cls._logger.error("%s configuration value for '%s': %r; using default %r",
                              problem, ".".join(path), value, default)
        return default

    @classmethod
    def _get_str(cls, default: str, *path: str, allow_empty: bool = False) -> str:
        value = cls._cfg.get(*path)
        if value is None:
            return cls._fallback("Missing", path, value, default)
        if not isinstance(value, str):
            # Numbers in string slots (e.g. a numeric context name) are kept as text
            cls._logger.warning("Non-string configuration value for '%s': %r; using %r",
                                ".".join(path), value, str(value))
            return str(value)
        if value == "" and not allow_empty:
            return cls._fallback("Empty", path, value, default)
        return value

    @classmethod
    def _get_int(cls, default: int, *path: str) -> int:
        value = cls._cfg.get(*path)
        if value is None:
            return cls._fallback("Missing", path, value, default)
        if isinstance(value, bool):
            return cls._fallback("Invalid integer", path, value, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            return cls._fallback("Invalid integer", path, value, default)

    @classmethod
    def _get_float(cls, default: float, *path: str) -> float:
        value = cls._cfg.get(*path)
        if value is None:
            return cls._fallback("Missing", path, value, default)
        if isinstance(value, bool):
            return cls._fallback("Invalid number", path, value, default)
        try:
            number = float(value)
        except (TypeError, ValueError):
            return cls._fallback("Invalid number", path, value, default)
        if not math.isfinite(number):
            return cls._fallback("Invalid number", path, value, default)
        return number

    @classmethod
    def _get_bool(cls, default: bool, *path: str) -> bool:
        value = cls._cfg.get(*path)
        if isinstance(value, bool):
            return value
        if value is None:
            return cls._fallback("Missing", path, value, default)

        text = str(value).strip().lower()
        if text in cls._TRUE_WORDS:
            return True
        if text in cls._FALSE_WORDS:
            return False
        return cls._fallback("Invalid boolean", path, value, default)

    @classmethod
    def get_config_path(cls) -> str:
        return cls._cfg.get_config_path()

    # SNMP transport settings
    @classmethod
    def snmp_port(cls) -> int:
        return cls._get_int(cls._DEFAULT_SNMP_PORT, "SNMP", "port")

    @classmethod
    def snmp_trap_port(cls) -> int:
        return cls._get_int(cls._DEFAULT_SNMP_TRAP_PORT, "SNMP", "trap_port")

    @classmethod
    def snmp_timeout(cls) -> float:
        """Per-attempt timeout in seconds; fractions allowed."""
        return cls._get_float(cls._DEFAULT_SNMP_TIMEOUT, "SNMP", "timeout")

    @classmethod
    def snmp_retries(cls) -> int:
        return cls._get_int(cls._DEFAULT_SNMP_RETRIES, "SNMP", "retries")

    @classmethod
    def snmp_transport(cls) -> str:
        return cls._get_str(cls._DEFAULT_SNMP_TRANSPORT, "SNMP", "transport")

    @classmethod
    def snmp_id_bits_size(cls) -> int:
        return cls._get_int(cls._DEFAULT_SNMP_ID_BITS_SIZE, "SNMP", "id_bits_size")

    @classmethod
    def snmp_report_oid_mismatch_errors(cls) -> bool:
        return cls._get_bool(False, "SNMP", "report_oid_mismatch_errors")

    @classmethod
    def snmp_context(cls) -> str:
        return cls._get_str(cls._DEFAULT_SNMP_CONTEXT, "SNMP", "context", allow_empty=True)

    # SNMP v2c settings
    @classmethod
    def snmp_enable(cls) -> bool:
        return cls._get_bool(True, "SNMP", "version", "2c", "enable")

    # SNMP v3 settings
    @classmethod
    def snmp_v3_enable(cls) -> bool:
        return cls._get_bool(True, "SNMP", "version", "3", "enable")

    @classmethod
    def snmp_v3_engine_id(cls) -> SnmpEngineIdHex:
        if cls._engine_id_override:
            return cast(SnmpEngineIdHex, cls._engine_id_override)

        value = cls._get_str(cls._DEFAULT_SNMP_ENGINE_ID, "SNMP", "version", "3", "engine_id")
        text = value.strip().removeprefix("0x").removeprefix("0X")
        if not re.fullmatch(r"(?:[0-9a-fA-F]{2})+", text):
            cls._logger.error(
                "Invalid engine id for '%s': %r; using default '%s'",
                "SNMP.version.3.engine_id",
                value,
                cls._DEFAULT_SNMP_ENGINE_ID,
            )
            return cast(SnmpEngineIdHex, cls._DEFAULT_SNMP_ENGINE_ID)
        return cast(SnmpEngineIdHex, text.upper())

    # Logging
    @classmethod
    def log_level(cls) -> str:
        return cls._get_str(cls._DEFAULT_LOG_LEVEL, "logging", "log_level")

    @classmethod
    def log_dir(cls) -> str:
        return cls._get_str(cls._DEFAULT_LOG_DIR, "logging", "log_dir")

    @classmethod
    def log_filename(cls) -> FileNameStr:
        return cast(FileNameStr, cls._get_str(cls._DEFAULT_LOG_FILENAME, "logging", "log_filename"))

    @classmethod
    def log_rotate(cls) -> bool:
        return cls._get_bool(True, "logging", "rotate")

    @classmethod
    def log_to_console(cls) -> bool:
        return cls._get_bool(False, "logging", "to_console")
