# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import io
import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from pyifadmin import __version__
from pyifadmin.cli import build_parser, main
from pyifadmin.config.system_config_settings import SystemConfigSettings
from pyifadmin.lib.secret.crypto_manager import SecretCryptoManager


@pytest.fixture()
def isolated_runtime(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[Path]:
    """
    Point the CLI at a throwaway system.json and restore global state afterwards.
    """
    cfg = {
        "SNMP": {"port": 161, "timeout": 1, "retries": 0, "version": {"3": {"engine_id": "8000000903AABBCCDDEE"}}},
        "logging": {"log_level": "INFO", "log_dir": str(tmp_path / "logs"),
                    "log_filename": "pyifadmin.log", "rotate": False, "to_console": False},
    }
    cfg_path = tmp_path / "system.json"
    cfg_path.write_text(json.dumps(cfg), encoding="utf-8")

    monkeypatch.setattr(SystemConfigSettings, "_cfg", SystemConfigSettings._cfg)
    monkeypatch.setattr(SystemConfigSettings, "_engine_id_override", None)

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield cfg_path
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(["--version"])

    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == __version__


def test_main_serves_stdin_and_keeps_stdout_clean(
    isolated_runtime: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    jobs = [
        {"params": {"device_ip": "bad-ip", "interface_ids": "1", "enabled": True, "snmp_community": "private"}},
        {"device_ip": "10.0.0.1", "interface_ids": "1,", "enabled": False, "snmp_community": "private"},
    ]
    monkeypatch.setattr("sys.stdin", io.StringIO("\n".join(json.dumps(j) for j in jobs) + "\n"))

    rc = main(["--config", str(isolated_runtime), "--log-level", "debug",
               "--engine-id", "800000090300AABBCCDDEEFF"])

    out_lines = capsys.readouterr().out.splitlines()
    assert rc == 0
    assert [json.loads(line)["code"] for line in out_lines] == [1, 1]
    assert SystemConfigSettings.snmp_v3_engine_id() == "800000090300AABBCCDDEEFF"

    log_file = isolated_runtime.parent / "logs" / "pyifadmin.log"
    assert "PyIfAdmin Job Runner Starting" in log_file.read_text(encoding="utf-8")


def test_main_reads_binary_stdin_and_survives_invalid_utf8(
    isolated_runtime: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    job = {"device_ip": "bad-ip", "interface_ids": "1", "enabled": True, "snmp_community": "private"}
    raw = b"\xff\xfe garbage\n" + json.dumps(job).encode("utf-8") + b"\n"
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(raw), encoding="utf-8"))

    assert main(["--config", str(isolated_runtime)]) == 0

    outputs = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert len(outputs) == 2
    assert outputs[0]["description"].startswith("Invalid job record: ")
    assert outputs[1]["description"] == "Supplied Device IP is not an IPv4 address. Got: 'bad-ip'"


def test_generate_key_and_encrypt(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    key_path = tmp_path / "keys" / "pyifadmin_secrets.key"

    assert main(["--generate-key", "--key-file", str(key_path)]) == 0
    assert key_path.is_file()
    capsys.readouterr()

    # An existing key is never overwritten
    assert main(["--generate-key", "--key-file", str(key_path)]) == 1

    assert main(["--encrypt", "private", "--key-file", str(key_path)]) == 0
    token = capsys.readouterr().out.strip()
    assert token.startswith("ENC[v1]:")
    assert SecretCryptoManager.decrypt_secret(token, key_path=key_path) == "private"


def test_encrypt_without_key_fails(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.delenv(SecretCryptoManager.DEFAULT_ENV_VAR_NAME, raising=False)

    assert main(["--encrypt", "private", "--key-file", str(tmp_path / "missing.key")]) == 1
    assert "[ERROR]" in capsys.readouterr().err
