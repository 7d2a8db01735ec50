# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from pydantic import ValidationError

from pyifadmin.job.interface_range import InterfaceRange
from pyifadmin.job.models import CompletionRecord, JobEnvelope, JobParams
from pyifadmin.job.validator import JobValidator
from pyifadmin.lib.exceptions import JobValidationError, SnmpConfigError
from pyifadmin.lib.inet import Inet
from pyifadmin.lib.secret.crypto_manager import SecretCryptoError
from pyifadmin.lib.types import JsonValue
from pyifadmin.snmp.factory import SessionCredentials, SessionFactory, SnmpSessionFactory
from pyifadmin.snmp.options import SnmpSessionOptions
from pyifadmin.snmp.varbind import AdminStatusVarbind, build_admin_status_varbinds


class JobState(Enum):
    VALIDATING          = "validating"
    EXPANDING           = "expanding"
    BUILDING_VARBINDS   = "building_varbinds"
    AWAITING_SET_RESULT = "awaiting_set_result"
    DONE                = "done"


class InterfaceAdminJob:
    """
    Sets ifAdminStatus on a range of interfaces of one device.

    The job walks VALIDATING -> EXPANDING -> BUILDING_VARBINDS ->
    AWAITING_SET_RESULT -> DONE, never backwards. A validation or
    configuration failure jumps straight to DONE without creating a session.
    ``run()`` returns only after the SET has been answered, timed out, or
    failed, and always returns exactly one ``CompletionRecord``.
    """

    def __init__(self,
                 params: JobParams,
                 options: SnmpSessionOptions | None = None,
                 session_factory: SessionFactory | None = None,
                 secret_key_path: Path | None = None) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._params = params
        self._options = options
        self._session_factory: SessionFactory = session_factory or SnmpSessionFactory.create
        self._secret_key_path = secret_key_path

        self._state = JobState.VALIDATING
        self._history: list[JobState] = [JobState.VALIDATING]
        self._record: CompletionRecord | None = None

    @property
    def state(self) -> JobState:
        return self._state

    @property
    def history(self) -> list[JobState]:
        return list(self._history)

    @property
    def record(self) -> CompletionRecord | None:
        return self._record

    async def run(self) -> CompletionRecord:
        """
        Execute the job once.

        Raises:
            RuntimeError: If the job has already run.
        """
        if self._record is not None:
            raise RuntimeError("InterfaceAdminJob can only run once")

        try:
            host, interface_range, credentials, options = self._validate()
        except (JobValidationError, SnmpConfigError, SecretCryptoError, ValidationError) as e:
            self.logger.error("Job rejected: %s", e)
            return self._finish(CompletionRecord.failed(str(e)))

        self._advance(JobState.EXPANDING)
        indices = interface_range.indices
        self.logger.debug("Interface range %r expanded to %s", interface_range.text, indices)

        self._advance(JobState.BUILDING_VARBINDS)
        varbinds = build_admin_status_varbinds(indices, self._params.enabled)

        self._advance(JobState.AWAITING_SET_RESULT)
        return self._finish(await self._set(host, credentials, options, varbinds))

    def _validate(self) -> tuple[Inet, InterfaceRange, SessionCredentials, SnmpSessionOptions]:
        """Check input syntax and resolve configuration before any network activity."""
        params = self._params

        device_ip = JobValidator.validate_device_ip(params.device_ip)
        interface_range = JobValidator.validate_expansion(
            JobValidator.validate_interface_ids(params.interface_ids))

        credentials = params.credentials(key_path=self._secret_key_path)
        options = self._options if self._options is not None else SnmpSessionOptions.from_system_config()

        return Inet(device_ip), interface_range, credentials, options

    async def _set(self,
                   host: Inet,
                   credentials: SessionCredentials,
                   options: SnmpSessionOptions,
                   varbinds: list[AdminStatusVarbind]) -> CompletionRecord:
        try:
            session = self._session_factory(host, credentials, options)
        except SnmpConfigError as e:
            self.logger.error("Session setup for %s failed: %s", host, e)
            return CompletionRecord.failed(str(e))
        except Exception as e:
            self.logger.exception("Could not create SNMP session for %s", host)
            return CompletionRecord.set_failed(str(e) or e.__class__.__name__)

        try:
            async with session:
                result = await session.set(varbinds)
        except Exception as e:
            self.logger.exception("Unexpected error during SET to %s", host)
            return CompletionRecord.set_failed(str(e) or e.__class__.__name__)

        if not result.ok:
            return CompletionRecord.set_failed(result.error or "unknown error")

        self.logger.info("Set ifAdminStatus=%d on %d interface(s) of %s",
                         int(varbinds[0].value), len(varbinds), host)
        return CompletionRecord.succeeded()

    def _advance(self, state: JobState) -> None:
        self._state = state
        self._history.append(state)

    def _finish(self, record: CompletionRecord) -> CompletionRecord:
        self._advance(JobState.DONE)
        self._record = record
        return record


async def run_job(record: JsonValue,
                  options: SnmpSessionOptions | None = None,
                  session_factory: SessionFactory | None = None) -> CompletionRecord:
    """
    Run one job from a decoded input record.

    A record that does not describe a job produces a failure record; this
    function does not raise.
    """
    logger = logging.getLogger("run_job")
    try:
        envelope = JobEnvelope.model_validate(record)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'] if p != 'params') or 'record'}: {err['msg']}"
            for err in e.errors()
        )
        logger.error("Invalid job record: %s", problems)
        return CompletionRecord.failed(f"Invalid job parameters: {problems}")

    logger.info("Starting job %s for device %s", envelope.id or "-", envelope.params.device_ip)
    job = InterfaceAdminJob(envelope.params, options=options, session_factory=session_factory)
    return await job.run()
