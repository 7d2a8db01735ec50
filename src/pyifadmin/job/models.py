# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

"""
Job input and output records.

A job arrives as one JSON object, either wrapped by the job runner
(``{"id": ..., "params": {...}}``) or as the bare parameter object, and
produces exactly one ``CompletionRecord``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from pyifadmin.lib.exceptions import SnmpConfigError
from pyifadmin.lib.secret.crypto_manager import SecretCryptoManager
from pyifadmin.lib.types import CompletionCode, SnmpCommunity, StringEnum
from pyifadmin.snmp.factory import SessionCredentials
from pyifadmin.snmp.security import UsmCredentials


class CredentialMode(StringEnum):
    COMMUNITY = "community"
    USM = "usm"


class JobParams(BaseModel):
    """
    Parameters of one interface admin-status job.

    Attributes:
        device_ip (str): Target agent, strict dotted-quad IPv4 (checked by JobValidator).
        interface_ids (str): Interface range, e.g. "1-4,6" (checked by JobValidator).
        enabled (bool): True to bring interfaces up, False to shut them down.
        snmp_community (Optional[str]): Community string for SNMPv2c.
        snmp_username (Optional[str]): SNMPv3 user; selects SNMPv3 when set.
        snmp_security_level (Optional[str]): noAuthNoPriv | authNoPriv | authPriv.
        snmp_auth_proto (Optional[str]): md5 | sha | sha256 | sha512.
        snmp_auth_key (Optional[str]): Authentication passphrase.
        snmp_priv_proto (Optional[str]): des | aes | aes256b | aes256r.
        snmp_priv_key (Optional[str]): Privacy passphrase.

    Any credential may be given as an ``ENC[v1]:...`` token.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    device_ip: str | None           = Field(default=None, description="Device IPv4 address")
    interface_ids: str | None       = Field(default=None, description="Interface range, e.g. 1-4,6")
    enabled: bool                   = Field(..., description="True = up (1), False = down (2)")

    snmp_community: str | None      = Field(default=None, repr=False, description="SNMPv2c community")
    snmp_username: str | None       = Field(default=None,
                                            validation_alias=AliasChoices("snmp_username", "username"),
                                            description="SNMPv3 user name")
    snmp_security_level: str | None = Field(default=None, description="SNMPv3 security level")
    snmp_auth_proto: str | None     = Field(default=None, description="SNMPv3 auth protocol")
    snmp_auth_key: str | None       = Field(default=None, repr=False, description="SNMPv3 auth key")
    snmp_priv_proto: str | None     = Field(default=None, description="SNMPv3 privacy protocol")
    snmp_priv_key: str | None       = Field(default=None, repr=False, description="SNMPv3 privacy key")

    @field_validator("device_ip", "interface_ids", mode="before")
    def _scalar_as_text(cls, v: Any) -> Any:
        """Keep the raw value of odd scalars (numbers) so validation can quote it."""
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @property
    def credential_mode(self) -> CredentialMode:
        """
        SNMPv3 when a user name is present, SNMPv2c when only a community is.

        Raises:
            SnmpConfigError: If neither credential shape is present.
        """
        if self.snmp_username and self.snmp_username.strip():
            return CredentialMode.USM
        if self.snmp_community and self.snmp_community.strip():
            return CredentialMode.COMMUNITY
        raise SnmpConfigError("Job supplies neither snmp_community nor snmp_username")

    def credentials(self, key_path: Path | None = None) -> SessionCredentials:
        """
        Resolve the credentials for the session, decrypting ``ENC[...]`` values.

        Raises:
            SnmpConfigError: On missing or unrecognized security settings.
            SecretCryptoError: If an encrypted value cannot be decrypted.
        """
        if self.credential_mode is CredentialMode.COMMUNITY:
            community = SecretCryptoManager.maybe_decrypt(self.snmp_community, key_path=key_path)
            return SnmpCommunity(str(community))

        return UsmCredentials.resolve(
            username=self.snmp_username,
            security_level=self.snmp_security_level,
            auth_protocol=self.snmp_auth_proto,
            auth_key=SecretCryptoManager.maybe_decrypt(self.snmp_auth_key, key_path=key_path),
            priv_protocol=self.snmp_priv_proto,
            priv_key=SecretCryptoManager.maybe_decrypt(self.snmp_priv_key, key_path=key_path),
        )


class JobEnvelope(BaseModel):
    """Input record: the job runner envelope, or bare parameters."""
    model_config = ConfigDict(extra="ignore")

    id: str | None = Field(default=None, description="Job id assigned by the runner")
    params: JobParams

    @model_validator(mode="before")
    @classmethod
    def _wrap_bare_params(cls, data: Any) -> Any:
        if isinstance(data, dict) and not isinstance(data.get("params"), dict):
            return {"params": data}
        return data


class CompletionRecord(BaseModel):
    """
    The single output record of a job.

    Attributes:
        complete (int): Always 1.
        code (int): 0 on success, 1 on any failure.
        description (str): Human readable outcome.
    """
    model_config = ConfigDict(frozen=True)

    SUCCESS_DESCRIPTION: ClassVar[str] = "Command executed successfully."
    SET_ERROR_PREFIX: ClassVar[str] = "Error setting OIDs:\n"

    complete: Literal[1]    = 1
    code: CompletionCode    = Field(..., description="0 = success, 1 = failure")
    description: str        = Field(..., description="Outcome description")

    @classmethod
    def succeeded(cls) -> CompletionRecord:
        return cls(code=0, description=cls.SUCCESS_DESCRIPTION)

    @classmethod
    def failed(cls, description: str) -> CompletionRecord:
        return cls(code=1, description=description)

    @classmethod
    def set_failed(cls, error: str) -> CompletionRecord:
        return cls.failed(f"{cls.SET_ERROR_PREFIX}{error}")

    @property
    def ok(self) -> bool:
        return self.code == 0

    def as_json(self) -> str:
        """Single-line JSON suitable for the output stream."""
        return self.model_dump_json()
