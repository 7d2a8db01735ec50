#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pyifadmin.job.stream import JsonLineStream, serve
from pyifadmin.lib.secret.crypto_manager import SecretCryptoError, SecretCryptoManager
from pyifadmin.lib.types import ExitCode
from pyifadmin.startup.startup import StartUp

try:
    from pyifadmin import __version__ as PYIFADMIN_VERSION
except Exception:
    PYIFADMIN_VERSION = "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pyifadmin",
        description=(
            "Set IF-MIB ifAdminStatus on a range of device interfaces. "
            "Reads one JSON job per line on stdin and writes one completion record per job on stdout."
        ),
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"{PYIFADMIN_VERSION}",
        help="Show PyIfAdmin version and exit.",
    )

    parser.add_argument("--config", default=None, help="Path to system.json (default: $PYIFADMIN_CONFIG or packaged settings)")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["critical", "error", "warning", "info", "debug"],
        help="Log level (default: logging.log_level from system.json).",
    )
    parser.add_argument("--console-log", action="store_true", default=None, help="Also log to stderr")
    parser.add_argument("--engine-id", default=None, help="Override the local SNMPv3 engine id (hex)")

    secrets = parser.add_argument_group("secrets")
    secrets.add_argument("--generate-key", action="store_true",
                         help=f"Write a new secret key to {SecretCryptoManager.default_key_path()} and exit")
    secrets.add_argument("--encrypt", metavar="VALUE", default=None,
                         help="Print an ENC[v1]:... token for VALUE and exit")
    secrets.add_argument("--key-file", type=Path, default=None, help="Secret key file to use")

    return parser


def _secrets_command(args: argparse.Namespace) -> ExitCode:
    key_path = args.key_file or SecretCryptoManager.default_key_path()
    try:
        if args.generate_key:
            if key_path.exists():
                print(f"[ERROR] Key file already exists: {key_path}", file=sys.stderr)
                return ExitCode(1)
            SecretCryptoManager.write_key_file(key_path, SecretCryptoManager.generate_key_b64())
            print(f"Wrote secret key to {key_path}", file=sys.stderr)
            return ExitCode(0)

        print(SecretCryptoManager.encrypt_secret(args.encrypt, key_path=key_path))
        return ExitCode(0)

    except SecretCryptoError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return ExitCode(1)


def main(argv: list[str] | None = None) -> ExitCode:
    args = build_parser().parse_args(argv)

    if args.generate_key or args.encrypt is not None:
        return _secrets_command(args)

    StartUp.initialize(config_path=args.config,
                       log_level=args.log_level,
                       to_console=args.console_log,
                       engine_id=args.engine_id)

    # Raw bytes; the stream decodes line by line
    stream = JsonLineStream(getattr(sys.stdin, "buffer", sys.stdin), sys.stdout)
    count = asyncio.run(serve(stream))
    logging.getLogger("pyifadmin").info("Input stream closed after %d job(s)", count)
    return ExitCode(0)


if __name__ == '__main__':
    sys.exit(main())
