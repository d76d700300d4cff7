"""
Authorization Policy

Two layers, always in this order:
1. Role check      - the caller's role must be in the operation's allowed set
2. Ownership check - for resource-scoped operations the resource's owning
                     profile id must equal the caller's profile id

`authorize()` is pure: it never touches the database. The caller's profile
id is looked up from the caller's user id (see the profile lookups below)
on every request and handed in through `Ownership`; nothing a client sends
is used as a profile id.

Authentication (token -> Principal) happens earlier, in core.auth.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy import select

from campus_recruit.core.errors import Forbidden, ProfileMissing
from campus_recruit.db.database import fetch_one
from campus_recruit.db.tables import company_profiles, student_profiles
from campus_recruit.schemas.schemas import UserRole


@dataclass(frozen=True)
class Principal:
    """The authenticated caller. Built by core.auth from the users table."""
    id: int
    role: UserRole
    name: str = ""
    email: str = ""


@dataclass(frozen=True)
class Ownership:
    """Who owns the resource vs. which profile the caller acts as."""
    resource_owner_id: Optional[int]
    caller_profile_id: Optional[int]
    admin_override: bool = False

    @property
    def matches(self) -> bool:
        return (
            self.caller_profile_id is not None
            and self.resource_owner_id == self.caller_profile_id
        )


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed


Allow = Decision(True)


def Deny(reason: str) -> Decision:
    return Decision(False, reason)


def authorize(
    principal: Principal,
    allowed_roles: Iterable[UserRole],
    ownership: Optional[Ownership] = None,
) -> Decision:
    """Decide whether `principal` may perform an operation."""
    allowed = set(allowed_roles)
    is_admin_override = (
        ownership is not None
        and ownership.admin_override
        and principal.role == UserRole.ADMIN
    )

    if principal.role not in allowed and not is_admin_override:
        return Deny(f"{principal.role.value} role is not allowed here")

    if ownership is None or is_admin_override:
        return Allow

    if not ownership.matches:
        return Deny("Not authorized to modify this resource")
    return Allow


def enforce(decision: Decision) -> None:
    """Raise Forbidden for a denied decision."""
    if not decision.allowed:
        raise Forbidden(decision.reason)


def require_role(principal: Principal, *roles: UserRole) -> None:
    enforce(authorize(principal, roles))


# ============================================================
# PROFILE LOOKUPS
# Always keyed by the authenticated user's id
# ============================================================

def get_student_profile(db, principal: Principal, required: bool = True) -> Optional[dict]:
    profile = fetch_one(
        db, select(student_profiles).where(student_profiles.c.user_id == principal.id)
    )
    if profile is None and required:
        raise ProfileMissing("Student profile missing")
    return profile


def get_company_profile(db, principal: Principal, required: bool = True) -> Optional[dict]:
    profile = fetch_one(
        db, select(company_profiles).where(company_profiles.c.user_id == principal.id)
    )
    if profile is None and required:
        raise ProfileMissing("Company profile missing")
    return profile
