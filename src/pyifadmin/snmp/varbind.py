# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum

from pysnmp.hlapi.v3arch.asyncio import ObjectIdentity, ObjectType
from pysnmp.proto.rfc1902 import Integer

from pyifadmin.lib.types import InterfaceIndexStr, OidStr

# IF-MIB::ifAdminStatus
IF_ADMIN_STATUS_OID: OidStr = OidStr("1.3.6.1.2.1.2.2.1.7")


class IfAdminStatus(IntEnum):
    """
    IF-MIB ifAdminStatus values.

    Values:
        UP (1): Interface administratively enabled.
        DOWN (2): Interface administratively disabled.
        TESTING (3): Test mode; never written by this tool.
    """
    UP = 1
    DOWN = 2
    TESTING = 3

    @classmethod
    def from_enabled(cls, enabled: bool) -> IfAdminStatus:
        return cls.UP if enabled else cls.DOWN


def admin_status_oid(index: InterfaceIndexStr | int | str) -> OidStr:
    """
    Return the ifAdminStatus instance OID for an interface index.

    The index is appended as the trailing instance sub-identifier:
        admin_status_oid('3') -> '1.3.6.1.2.1.2.2.1.7.3'
    """
    return OidStr(f"{IF_ADMIN_STATUS_OID}.{index}")


@dataclass(frozen=True, slots=True)
class AdminStatusVarbind:
    """One ifAdminStatus binding for a SET request."""

    oid: OidStr
    value: IfAdminStatus

    type_name = "Integer"

    def to_object_type(self) -> ObjectType:
        """Build the pysnmp ``ObjectType`` carried in the SET PDU."""
        return ObjectType(ObjectIdentity(self.oid), Integer(int(self.value)))


def build_admin_status_varbinds(indices: Iterable[InterfaceIndexStr | str],
                                enabled: bool) -> list[AdminStatusVarbind]:
    """
    Build one binding per interface index, in input order, duplicates kept.

    Args:
        indices: Expanded interface indices.
        enabled: True for up (1), False for down (2).

    Returns:
        list[AdminStatusVarbind]: Bindings to send together in a single SET.
    """
    status = IfAdminStatus.from_enabled(enabled)
    return [AdminStatusVarbind(oid=admin_status_oid(index), value=status) for index in indices]
