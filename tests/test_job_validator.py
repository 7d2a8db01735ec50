# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import pytest

from pyifadmin.job.interface_range import InterfaceRange
from pyifadmin.job.validator import JobValidator
from pyifadmin.lib.exceptions import JobValidationError, PyIfAdminError


def test_validate_device_ip_returns_normalized_address() -> None:
    assert JobValidator.validate_device_ip("10.0.0.1") == "10.0.0.1"
    assert JobValidator.validate_device_ip("010.000.000.001") == "10.0.0.1"


@pytest.mark.parametrize("raw", ["999.1.1.1", "10.0.0", "host.example.com", None, 12])
def test_validate_device_ip_quotes_raw_value(raw: object) -> None:
    with pytest.raises(JobValidationError) as excinfo:
        JobValidator.validate_device_ip(raw)

    assert str(excinfo.value) == f"Supplied Device IP is not an IPv4 address. Got: '{raw}'"


def test_validate_interface_ids_returns_range() -> None:
    rng = JobValidator.validate_interface_ids("1-4,6")
    assert isinstance(rng, InterfaceRange)
    assert rng.indices == ["1", "2", "3", "4", "6"]


@pytest.mark.parametrize("raw", ["1,", "a-b", "", None])
def test_validate_interface_ids_quotes_raw_value(raw: object) -> None:
    with pytest.raises(JobValidationError) as excinfo:
        JobValidator.validate_interface_ids(raw)

    assert str(excinfo.value) == f"Supplied Interface ID String has incorrect formatting. Got: '{raw}'"


def test_validate_interface_ids_rejects_oversized_selection() -> None:
    with pytest.raises(JobValidationError) as excinfo:
        JobValidator.validate_interface_ids("0-4294967295")

    assert str(excinfo.value) == (
        "Supplied Interface ID String selects more than 1024 interfaces. Got: '0-4294967295'"
    )


def test_validate_expansion_rejects_empty_selection() -> None:
    with pytest.raises(JobValidationError) as excinfo:
        JobValidator.validate_expansion(InterfaceRange("5-3"))

    assert str(excinfo.value) == "Supplied Interface ID String does not select any interface. Got: '5-3'"


def test_validation_errors_share_the_package_base() -> None:
    assert issubclass(JobValidationError, PyIfAdminError)
