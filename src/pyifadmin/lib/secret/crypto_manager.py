# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import base64
import binascii
import contextlib
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from cryptography.fernet import Fernet, InvalidToken

from pyifadmin.lib.exceptions import PyIfAdminError


class SecretCryptoError(PyIfAdminError):
    """
    Credential Encryption/Decryption Failure.

    Raised for a missing or malformed key, a malformed ``ENC[...]`` token, or
    a token that does not decrypt under the available key.
    """


@dataclass(frozen=True, slots=True)
class SecretToken:
    """
    Parsed ``ENC[<version>]:<payload>`` token.

    Attributes
    ----------
    version:
        Token version string (example: "v1").
    payload:
        The Fernet token carrying the encrypted credential.
    """

    version: str
    payload: str

    def __str__(self) -> str:
        return f"{SecretCryptoManager.DEFAULT_TOKEN_PREFIX}[{self.version}]:{self.payload}"


class SecretCryptoManager:
    """
    Encrypted SNMP Credentials.

    A community string or USM key in a job record (or in system.json) may be
    written as an ``ENC[v1]:...`` token instead of clear text. The Fernet key
    that opens it lives only on the host running the jobs:

    1) a key file (default: ~/.ssh/pyifadmin_secrets.key), else
    2) the PYIFADMIN_SECRET_KEY environment variable.

    Clear-text values pass through ``maybe_decrypt`` unchanged.
    """

    DEFAULT_ENV_VAR_NAME    = "PYIFADMIN_SECRET_KEY"
    DEFAULT_KEY_FILE_NAME   = "pyifadmin_secrets.key"
    DEFAULT_TOKEN_VERSION   = "v1"
    DEFAULT_TOKEN_PREFIX    = "ENC"
    SSH_DIR_NAME            = ".ssh"

    FERNET_KEY_SIZE_BYTES   = 32

    KEY_FILE_PERMISSIONS    = 0o600
    SSH_DIR_PERMISSIONS     = 0o700

    _TOKEN_RE = re.compile(r"ENC\[(?P<version>[^\]]*)\]:(?P<payload>.*)", re.DOTALL)

    _logger = logging.getLogger("SecretCryptoManager")

    @staticmethod
    def default_key_path() -> Path:
        return Path.home() / SecretCryptoManager.SSH_DIR_NAME / SecretCryptoManager.DEFAULT_KEY_FILE_NAME

    @staticmethod
    def is_encrypted(value: object) -> bool:
        """Return True when ``value`` is a string shaped like ``ENC[...]...``."""
        return isinstance(value, str) and value.strip().startswith(f"{SecretCryptoManager.DEFAULT_TOKEN_PREFIX}[")

    @staticmethod
    def build_token(payload: str, version: str = DEFAULT_TOKEN_VERSION) -> str:
        return str(SecretToken(version=version, payload=payload))

    @staticmethod
    def parse_token(token: str) -> SecretToken:
        """
        Split a token into version and payload.

        Raises
        ------
        SecretCryptoError
            If the prefix, the ``]:`` delimiter, the version or the payload is missing.
        """
        if not SecretCryptoManager.is_encrypted(token):
            raise SecretCryptoError("Encrypted token missing expected 'ENC[...]:...' prefix.")

        match = SecretCryptoManager._TOKEN_RE.fullmatch(token.strip())
        if match is None:
            raise SecretCryptoError("Encrypted token missing closing ']:' delimiter.")

        version, payload = match["version"].strip(), match["payload"].strip()
        if not version:
            raise SecretCryptoError("Encrypted token version is empty.")
        if not payload:
            raise SecretCryptoError("Encrypted token payload is empty.")

        return SecretToken(version=version, payload=payload)

    @staticmethod
    def generate_key_b64() -> str:
        return Fernet.generate_key().decode("utf-8")

    @staticmethod
    def validate_key_b64(key_b64: str) -> None:
        """
        Raises
        ------
        SecretCryptoError
            If the key is empty, not URL-safe base64, or not 32 bytes once decoded.
        """
        key_str = key_b64.strip()
        if not key_str:
            raise SecretCryptoError("Secret key is empty.")

        try:
            raw = base64.urlsafe_b64decode(key_str.encode("utf-8"))
        except (binascii.Error, ValueError) as exc:
            raise SecretCryptoError(f"Secret key is not valid base64: {exc}") from exc

        if len(raw) != SecretCryptoManager.FERNET_KEY_SIZE_BYTES:
            raise SecretCryptoError(
                f"Secret key decodes to {len(raw)} bytes, expected {SecretCryptoManager.FERNET_KEY_SIZE_BYTES}."
            )

    @staticmethod
    def write_key_file(key_path: Path, key_b64: str) -> Path:
        """
        Store a key with owner-only permissions, creating the directory if needed.

        Raises
        ------
        SecretCryptoError
            If the key is invalid.
        """
        SecretCryptoManager.validate_key_b64(key_b64)
        key_path.parent.mkdir(parents=True, exist_ok=True)

        # Permission bits are not supported everywhere (Windows, some mounts)
        with contextlib.suppress(OSError):
            os.chmod(key_path.parent, SecretCryptoManager.SSH_DIR_PERMISSIONS)

        key_path.write_text(key_b64.strip() + "\n", encoding="utf-8")

        with contextlib.suppress(OSError):
            os.chmod(key_path, SecretCryptoManager.KEY_FILE_PERMISSIONS)

        SecretCryptoManager._logger.info("Wrote secret key file %s", key_path)
        return key_path

    @staticmethod
    def load_key_bytes(key_path: Path, env_var_name: str = DEFAULT_ENV_VAR_NAME) -> bytes:
        """
        Read the key from ``key_path``, falling back to ``env_var_name``.

        Raises
        ------
        SecretCryptoError
            If neither source holds a key, or the key found is invalid.
        """
        if key_path.is_file():
            key_b64 = key_path.read_text(encoding="utf-8").strip()
        else:
            key_b64 = os.environ.get(env_var_name, "").strip()
            if not key_b64:
                raise SecretCryptoError(
                    f"Missing secret key. Provide key file '{key_path}' or set environment variable '{env_var_name}'."
                )

        SecretCryptoManager.validate_key_b64(key_b64)
        return key_b64.encode("utf-8")

    @staticmethod
    def encrypt_secret(secret: str,
                       key_path: Path | None = None,
                       env_var_name: str = DEFAULT_ENV_VAR_NAME,
                       version: str = DEFAULT_TOKEN_VERSION) -> str:
        """
        Encrypt a community string or USM key into an ``ENC[<version>]:...`` token.

        Raises
        ------
        SecretCryptoError
            If the value is blank or no valid key is available.
        """
        clear = secret.strip()
        if not clear:
            raise SecretCryptoError("Refusing to encrypt an empty credential.")

        fernet = SecretCryptoManager._fernet(key_path, env_var_name)
        return SecretCryptoManager.build_token(fernet.encrypt(clear.encode("utf-8")).decode("utf-8"), version)

    @staticmethod
    def decrypt_secret(token: str,
                       key_path: Path | None = None,
                       env_var_name: str = DEFAULT_ENV_VAR_NAME,
                       accepted_versions: tuple[str, ...] = (DEFAULT_TOKEN_VERSION,)) -> str:
        """
        Decrypt a token produced by ``encrypt_secret``.

        Raises
        ------
        SecretCryptoError
            On a malformed token, an unsupported version, a missing key, or
            a token that does not authenticate under the key.
        """
        parsed = SecretCryptoManager.parse_token(token)
        if parsed.version not in accepted_versions:
            raise SecretCryptoError(
                f"Unsupported encrypted token version '{parsed.version}'. Allowed: {', '.join(accepted_versions)}"
            )

        fernet = SecretCryptoManager._fernet(key_path, env_var_name)
        try:
            clear = fernet.decrypt(parsed.payload.encode("utf-8")).decode("utf-8").strip()
        except InvalidToken as exc:
            raise SecretCryptoError("Failed to decrypt credential: invalid token or wrong secret key.") from exc

        if not clear:
            raise SecretCryptoError("Decrypted credential is empty.")
        return clear

    @staticmethod
    def maybe_decrypt(value: str | None, key_path: Path | None = None) -> str | None:
        """
        Decrypt ``value`` when it is an ``ENC[...]`` token, otherwise return it unchanged.

        Raises
        ------
        SecretCryptoError
            If ``value`` is a token that cannot be decrypted.
        """
        if not SecretCryptoManager.is_encrypted(value):
            return value
        SecretCryptoManager._logger.debug("Decrypting credential token")
        return SecretCryptoManager.decrypt_secret(str(value), key_path=key_path)

    @staticmethod
    def _fernet(key_path: Path | None, env_var_name: str) -> Fernet:
        path = key_path if key_path is not None else SecretCryptoManager.default_key_path()
        return Fernet(SecretCryptoManager.load_key_bytes(path, env_var_name=env_var_name))
