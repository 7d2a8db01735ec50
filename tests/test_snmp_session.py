# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

from typing import Any

import pytest
from pysnmp.error import PySnmpError

import pyifadmin.snmp.session as session_module
import pyifadmin.snmp.snmp_v2c as snmp_v2c_module
import pyifadmin.snmp.snmp_v3 as snmp_v3_module
from pyifadmin.config.system_config_settings import SystemConfigSettings
from pyifadmin.lib.exceptions import SnmpConfigError
from pyifadmin.lib.inet import Inet
from pyifadmin.snmp.factory import SnmpSessionFactory
from pyifadmin.snmp.options import SnmpSessionOptions
from pyifadmin.snmp.security import UsmCredentials
from pyifadmin.snmp.session import SnmpSetSession
from pyifadmin.snmp.snmp_v2c import Snmp_v2c
from pyifadmin.snmp.snmp_v3 import Snmp_v3
from pyifadmin.snmp.varbind import build_admin_status_varbinds

OPTIONS = SnmpSessionOptions(port=1161, timeout=2, retries=3, context="ctx")


class FakeErrorStatus:
    def __init__(self, text: str) -> None:
        self._text = text

    def __bool__(self) -> bool:
        return True

    def prettyPrint(self) -> str:
        return self._text


class SetCmdRecorder:
    """Stands in for pysnmp ``set_cmd`` and remembers every call."""

    def __init__(self, response: tuple[Any, Any, Any, list[Any]]) -> None:
        self.response = response
        self.calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []

    async def __call__(self, *args: Any, **kwargs: Any) -> tuple[Any, Any, Any, list[Any]]:
        self.calls.append((args, kwargs))
        return self.response


@pytest.fixture()
def transport_calls(monkeypatch: pytest.MonkeyPatch) -> list[tuple[tuple[Any, ...], dict[str, Any]]]:
    calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []

    async def fake_create(*args: Any, **kwargs: Any) -> object:
        calls.append((args, kwargs))
        return "transport"

    monkeypatch.setattr(session_module.UdpTransportTarget, "create", fake_create)
    return calls


def _track_close(snmp: SnmpSetSession) -> list[bool]:
    closed: list[bool] = []
    snmp._snmp_engine.close_dispatcher = lambda: closed.append(True)  # type: ignore[method-assign]
    return closed


@pytest.mark.asyncio
async def test_set_sends_all_varbinds_in_one_request(
    monkeypatch: pytest.MonkeyPatch,
    transport_calls: list[tuple[tuple[Any, ...], dict[str, Any]]],
) -> None:
    set_cmd = SetCmdRecorder((None, 0, 0, []))
    monkeypatch.setattr(session_module, "set_cmd", set_cmd)

    snmp = Snmp_v2c(Inet("192.168.0.10"), community="private", options=OPTIONS)
    closed = _track_close(snmp)
    varbinds = build_admin_status_varbinds(["1", "2", "3", "4", "6"], enabled=True)

    async with snmp:
        result = await snmp.set(varbinds)

    assert result.ok is True
    assert result.error is None
    assert len(set_cmd.calls) == 1

    args, _ = set_cmd.calls[0]
    assert args[0] is snmp._snmp_engine
    assert args[2] == "transport"
    assert len(args[4:]) == len(varbinds)

    (target, ), kwargs = transport_calls[0]
    assert target == ("192.168.0.10", 1161)
    assert kwargs == {"timeout": 2, "retries": 3}

    assert closed == [True]
    assert snmp.closed is True


@pytest.mark.asyncio
async def test_set_maps_error_indication_to_failure(
    monkeypatch: pytest.MonkeyPatch,
    transport_calls: list[tuple[tuple[Any, ...], dict[str, Any]]],
) -> None:
    monkeypatch.setattr(session_module, "set_cmd",
                        SetCmdRecorder(("No SNMP response received before timeout", 0, 0, [])))

    snmp = Snmp_v2c(Inet("192.168.0.10"), community="private", options=OPTIONS)
    _track_close(snmp)

    result = await snmp.set(build_admin_status_varbinds(["1"], enabled=False))

    assert result.ok is False
    assert result.error == "No SNMP response received before timeout"


@pytest.mark.asyncio
async def test_set_names_the_rejected_oid(
    monkeypatch: pytest.MonkeyPatch,
    transport_calls: list[tuple[tuple[Any, ...], dict[str, Any]]],
) -> None:
    monkeypatch.setattr(session_module, "set_cmd",
                        SetCmdRecorder((None, FakeErrorStatus("notWritable"), 2, [])))

    snmp = Snmp_v2c(Inet("192.168.0.10"), community="private", options=OPTIONS)
    _track_close(snmp)

    result = await snmp.set(build_admin_status_varbinds(["5", "7"], enabled=True))

    assert result.ok is False
    assert result.error == "notWritable at 1.3.6.1.2.1.2.2.1.7.7"


@pytest.mark.asyncio
async def test_set_error_status_without_index(
    monkeypatch: pytest.MonkeyPatch,
    transport_calls: list[tuple[tuple[Any, ...], dict[str, Any]]],
) -> None:
    monkeypatch.setattr(session_module, "set_cmd",
                        SetCmdRecorder((None, FakeErrorStatus("genErr"), 0, [])))

    snmp = Snmp_v2c(Inet("192.168.0.10"), community="private", options=OPTIONS)
    _track_close(snmp)

    result = await snmp.set(build_admin_status_varbinds(["5"], enabled=True))

    assert result.error == "genErr"


@pytest.mark.asyncio
async def test_set_maps_engine_exception_to_failure(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def failing_create(*_args: object, **_kwargs: object) -> object:
        raise PySnmpError("Bad IPv4/UDP transport address")

    monkeypatch.setattr(session_module.UdpTransportTarget, "create", failing_create)

    snmp = Snmp_v2c(Inet("192.168.0.10"), community="private", options=OPTIONS)
    _track_close(snmp)

    result = await snmp.set(build_admin_status_varbinds(["5"], enabled=True))

    assert result.ok is False
    assert "Bad IPv4/UDP transport address" in (result.error or "")


@pytest.mark.asyncio
async def test_set_rejects_empty_and_closed_sessions() -> None:
    snmp = Snmp_v2c(Inet("192.168.0.10"), community="private", options=OPTIONS)
    closed = _track_close(snmp)

    with pytest.raises(ValueError):
        await snmp.set([])

    snmp.close()
    snmp.close()
    assert closed == [True]

    with pytest.raises(RuntimeError):
        await snmp.set(build_admin_status_varbinds(["1"], enabled=True))


def test_v2c_auth_data_uses_community(monkeypatch: pytest.MonkeyPatch) -> None:
    recorded: dict[str, Any] = {}

    def fake_community_data(community: str, **kwargs: Any) -> str:
        recorded["community"] = community
        recorded.update(kwargs)
        return "community-data"

    monkeypatch.setattr(snmp_v2c_module, "CommunityData", fake_community_data)

    snmp = Snmp_v2c(Inet("127.0.0.1"), community="private", options=OPTIONS)

    assert snmp._auth_data() == "community-data"
    assert recorded == {"community": "private", "mpModel": 1}


@pytest.mark.parametrize("community", ["", "   "])
def test_v2c_rejects_blank_community(community: str) -> None:
    with pytest.raises(SnmpConfigError):
        Snmp_v2c(Inet("127.0.0.1"), community=community, options=OPTIONS)


def test_v3_uses_local_engine_id_and_usm_protocols(monkeypatch: pytest.MonkeyPatch) -> None:
    engine_kwargs: dict[str, Any] = {}
    usm_calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []

    class FakeEngine:
        def __init__(self, **kwargs: Any) -> None:
            engine_kwargs.update(kwargs)

        def close_dispatcher(self) -> None:
            pass

    def fake_usm_user_data(*args: Any, **kwargs: Any) -> str:
        usm_calls.append((args, kwargs))
        return "usm-data"

    monkeypatch.setattr(snmp_v3_module, "SnmpEngine", FakeEngine)
    monkeypatch.setattr(snmp_v3_module, "UsmUserData", fake_usm_user_data)

    creds = UsmCredentials.resolve("admin", "authPriv", "sha", "authpass1", "aes256r", "privpass1")
    options = SnmpSessionOptions(engine_id="0x800000090300AABBCCDDEEFF")
    snmp = Snmp_v3(Inet("10.1.1.1"), creds, options=options)

    assert engine_kwargs["snmpEngineID"].asOctets() == bytes.fromhex("800000090300AABBCCDDEEFF")

    assert snmp._auth_data() == "usm-data"
    args, kwargs = usm_calls[0]
    assert args == ("admin",)
    assert kwargs["authKey"] == "authpass1"
    assert kwargs["privKey"] == "privpass1"
    assert kwargs["authProtocol"] == creds.usm_auth_protocol
    assert kwargs["privProtocol"] == creds.usm_priv_protocol
    assert snmp.credentials is creds


def test_context_data_uses_configured_context(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(session_module, "ContextData", lambda **kwargs: kwargs)

    snmp = Snmp_v2c(Inet("127.0.0.1"), community="private", options=OPTIONS)

    assert snmp._context_data() == {"contextName": "ctx"}


def test_factory_selects_variant_from_credentials() -> None:
    v2c = SnmpSessionFactory.create(Inet("127.0.0.1"), "private", OPTIONS)
    assert isinstance(v2c, Snmp_v2c)
    assert v2c.options is OPTIONS
    assert v2c.host == "127.0.0.1"

    creds = UsmCredentials.resolve("monitor", "noAuthNoPriv")
    v3 = SnmpSessionFactory.create(Inet("127.0.0.1"), creds, OPTIONS)
    assert isinstance(v3, Snmp_v3)

    for snmp in (v2c, v3):
        closed = _track_close(snmp)
        snmp.close()
        assert closed == [True]


class DisabledVersionsConfig:
    def get(self, *path: str) -> Any | None:
        return {"SNMP.version.2c.enable": False, "SNMP.version.3.enable": "off"}.get(".".join(path))


def test_factory_refuses_disabled_versions(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(SystemConfigSettings, "_cfg", DisabledVersionsConfig())

    with pytest.raises(SnmpConfigError, match="SNMPv2c is disabled"):
        SnmpSessionFactory.create(Inet("127.0.0.1"), "private", OPTIONS)

    with pytest.raises(SnmpConfigError, match="SNMPv3 is disabled"):
        SnmpSessionFactory.create(Inet("127.0.0.1"), UsmCredentials.resolve("monitor", "noAuthNoPriv"), OPTIONS)
