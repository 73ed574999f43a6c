"""
Marketplace — role policy.

Decides whether an actor may change the role carried by a user record.
Pure functions: no I/O, and the requested field mapping is never mutated.

Rules, in order:
  1. No role field in the request          → allow
  2. Actor is an admin                     → allow
  3. Requested role equals the stored one  → allow (no-op)
  4. Otherwise deny; the reason depends on whether the actor targets itself.
"""
from __future__ import annotations

import enum
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from shared.constants import Role
from shared.models.user import CurrentUser

# Every spelling a client has used for the role field.
ROLE_FIELDS: tuple[str, ...] = ("role", "user_type", "userType")


class RoleDenialReason(str, enum.Enum):
    ROLE_MODIFICATION_FORBIDDEN = "ROLE_MODIFICATION_FORBIDDEN"  # own role
    ADMIN_REQUIRED = "ADMIN_REQUIRED"                            # someone else's role


class RoleGuardMode(str, enum.Enum):
    REJECT = "reject"   # deny the whole request
    STRIP = "strip"     # drop the role fields and apply the rest


@dataclass(frozen=True, slots=True)
class RoleDecision:
    allowed: bool
    reason: RoleDenialReason | None = None


ALLOW = RoleDecision(allowed=True)


def requested_roles(fields: Mapping[str, Any]) -> list[Any]:
    """Values of the role fields present in the request; None counts as absent."""
    return [fields[name] for name in ROLE_FIELDS if fields.get(name) is not None]


def check_role_change(
    actor: CurrentUser,
    target_id: uuid.UUID,
    target_role: Role,
    requested_fields: Mapping[str, Any],
) -> RoleDecision:
    roles = requested_roles(requested_fields)
    if not roles:
        return ALLOW
    if actor.is_admin:
        return ALLOW
    if all(_same_role(value, target_role) for value in roles):
        return ALLOW

    if target_id == actor.id:
        return RoleDecision(False, RoleDenialReason.ROLE_MODIFICATION_FORBIDDEN)
    return RoleDecision(False, RoleDenialReason.ADMIN_REQUIRED)


def strip_role_fields(actor: CurrentUser, fields: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of fields; role fields are dropped unless the actor is an admin."""
    if actor.is_admin:
        return dict(fields)
    return {key: value for key, value in fields.items() if key not in ROLE_FIELDS}


def _same_role(value: Any, stored: Role) -> bool:
    if isinstance(value, Role):
        return value is stored
    return value == stored.value
