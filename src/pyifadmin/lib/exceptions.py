# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations


class PyIfAdminError(Exception):
    """Base class for every error raised by PyIfAdmin."""


class JobValidationError(PyIfAdminError):
    """
    Job Input Rejected Before Any Network Activity.

    Raised for a device address or interface range that does not match its
    grammar. The message is reported verbatim in the completion record.
    """


class SnmpConfigError(PyIfAdminError):
    """
    SNMP Session Configuration Cannot Be Resolved.

    Raised for an unrecognized security level or algorithm name, for missing
    keys required by the security level, or for missing credentials.
    """


class SnmpTransportError(PyIfAdminError):
    """SNMP engine or agent reported an error for a request."""
