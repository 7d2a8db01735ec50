# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

"""
SNMPv3 user-based security settings.

Job records name the security level and algorithms with plain strings
(``authPriv``, ``sha256``, ``aes256b`` ...). This module turns them into
enum members and pysnmp USM protocol identifiers, failing loudly on
anything it does not recognize.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pysnmp.entity.config import (
    USM_AUTH_HMAC96_MD5,
    USM_AUTH_HMAC96_SHA,
    USM_AUTH_HMAC192_SHA256,
    USM_AUTH_HMAC384_SHA512,
    USM_AUTH_NONE,
    USM_PRIV_CBC56_DES,
    USM_PRIV_CFB128_AES,
    USM_PRIV_CFB256_AES,
    USM_PRIV_CFB256_AES_BLUMENTHAL,
    USM_PRIV_NONE,
)

from pyifadmin.lib.exceptions import SnmpConfigError
from pyifadmin.lib.types import SnmpSecretKey, SnmpUserName, StringEnum


class SecurityLevel(StringEnum):
    """SNMPv3 security level."""
    NO_AUTH_NO_PRIV = "noAuthNoPriv"
    AUTH_NO_PRIV    = "authNoPriv"
    AUTH_PRIV       = "authPriv"

    @property
    def requires_auth(self) -> bool:
        return self is not SecurityLevel.NO_AUTH_NO_PRIV

    @property
    def requires_priv(self) -> bool:
        return self is SecurityLevel.AUTH_PRIV


class AuthProtocol(StringEnum):
    """Authentication protocol names as they appear in job records."""
    MD5     = "md5"
    SHA     = "sha"
    SHA256  = "sha256"
    SHA512  = "sha512"

    @property
    def usm_id(self) -> tuple[int, ...]:
        return _AUTH_PROTOCOL_IDS[self]


class PrivProtocol(StringEnum):
    """
    Privacy (encryption) protocol names as they appear in job records.

    ``aes256b`` is the Blumenthal AES-256 key localization, ``aes256r`` the
    Reeder variant used by Cisco agents.
    """
    DES     = "des"
    AES     = "aes"
    AES256B = "aes256b"
    AES256R = "aes256r"

    @property
    def usm_id(self) -> tuple[int, ...]:
        return _PRIV_PROTOCOL_IDS[self]


_AUTH_PROTOCOL_IDS: dict[AuthProtocol, tuple[int, ...]] = {
    AuthProtocol.MD5:       USM_AUTH_HMAC96_MD5,
    AuthProtocol.SHA:       USM_AUTH_HMAC96_SHA,
    AuthProtocol.SHA256:    USM_AUTH_HMAC192_SHA256,
    AuthProtocol.SHA512:    USM_AUTH_HMAC384_SHA512,
}

_PRIV_PROTOCOL_IDS: dict[PrivProtocol, tuple[int, ...]] = {
    PrivProtocol.DES:       USM_PRIV_CBC56_DES,
    PrivProtocol.AES:       USM_PRIV_CFB128_AES,
    PrivProtocol.AES256B:   USM_PRIV_CFB256_AES_BLUMENTHAL,
    PrivProtocol.AES256R:   USM_PRIV_CFB256_AES,
}


def _lookup(enum_cls: type[StringEnum], field_name: str, name: object) -> StringEnum:
    if isinstance(name, str):
        wanted = name.strip().lower()
        for member in enum_cls:
            if member.value.lower() == wanted:
                return member
    choices = ", ".join(m.value for m in enum_cls)
    raise SnmpConfigError(f"Unsupported {field_name} '{name}'. Expected one of: {choices}")


def resolve_security_level(name: object) -> SecurityLevel:
    """
    Map a security level name to ``SecurityLevel``.

    Raises:
        SnmpConfigError: For anything other than noAuthNoPriv, authNoPriv or authPriv.
    """
    return SecurityLevel(_lookup(SecurityLevel, "snmp_security_level", name))


def resolve_auth_protocol(name: object) -> AuthProtocol:
    """
    Map an authentication algorithm name to ``AuthProtocol``.

    Raises:
        SnmpConfigError: For anything other than md5, sha, sha256 or sha512.
    """
    return AuthProtocol(_lookup(AuthProtocol, "snmp_auth_proto", name))


def resolve_priv_protocol(name: object) -> PrivProtocol:
    """
    Map a privacy algorithm name to ``PrivProtocol``.

    Raises:
        SnmpConfigError: For anything other than des, aes, aes256b or aes256r.
    """
    return PrivProtocol(_lookup(PrivProtocol, "snmp_priv_proto", name))


@dataclass(frozen=True, slots=True)
class UsmCredentials:
    """
    Resolved SNMPv3 user credentials.

    Protocols and keys the security level does not use are left as None.
    Keys are excluded from repr so they never reach a log line.
    """

    username: SnmpUserName
    security_level: SecurityLevel
    auth_protocol: AuthProtocol | None = None
    auth_key: SnmpSecretKey | None = field(default=None, repr=False)
    priv_protocol: PrivProtocol | None = None
    priv_key: SnmpSecretKey | None = field(default=None, repr=False)

    @property
    def usm_auth_protocol(self) -> tuple[int, ...]:
        return self.auth_protocol.usm_id if self.auth_protocol else USM_AUTH_NONE

    @property
    def usm_priv_protocol(self) -> tuple[int, ...]:
        return self.priv_protocol.usm_id if self.priv_protocol else USM_PRIV_NONE

    @classmethod
    def resolve(cls,
                username: str | None,
                security_level: str | None,
                auth_protocol: str | None = None,
                auth_key: str | None = None,
                priv_protocol: str | None = None,
                priv_key: str | None = None) -> UsmCredentials:
        """
        Resolve the raw job fields into credentials, enforcing the security level.

        Raises:
            SnmpConfigError: On an unknown name, a missing user name, or a
                missing algorithm/key that the security level requires.
        """
        if not username or not username.strip():
            raise SnmpConfigError("SNMPv3 requires a non-empty snmp_username")

        level = resolve_security_level(security_level)

        auth: AuthProtocol | None = None
        priv: PrivProtocol | None = None
        if level.requires_auth:
            auth = resolve_auth_protocol(auth_protocol)
            if not auth_key:
                raise SnmpConfigError(f"Security level {level} requires snmp_auth_key")
        if level.requires_priv:
            priv = resolve_priv_protocol(priv_protocol)
            if not priv_key:
                raise SnmpConfigError(f"Security level {level} requires snmp_priv_key")

        return cls(
            username=SnmpUserName(username),
            security_level=level,
            auth_protocol=auth,
            auth_key=SnmpSecretKey(auth_key) if auth else None,
            priv_protocol=priv,
            priv_key=SnmpSecretKey(priv_key) if priv else None,
        )
