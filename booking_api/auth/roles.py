"""Role lookup and the authorization predicate shared by the access guards."""

from enum import Enum

from sqlalchemy.orm import Session

from booking_api.models.user import User


class Role(str, Enum):
    NONE = "none"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"

    @classmethod
    def from_value(cls, value: str | None) -> "Role":
        normalized = (value or "").strip().lower()
        for role in cls:
            if role.value == normalized:
                return role
        return cls.NONE


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def resolve_role(db: Session, email: str) -> Role:
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        return Role.NONE
    return Role.from_value(user.role)


def is_authorized(
    required_role: Role | None,
    caller_email: str,
    caller_role: Role = Role.NONE,
    owner_email: str | None = None,
) -> bool:
    """Return True when the caller holds ``required_role`` and, if an owner is
    given, is that owner.

    Either check can be skipped: pass ``required_role=None`` for
    authentication-only routes and leave ``owner_email`` unset for resources
    that are not self-scoped.
    """
    caller = normalize_email(caller_email)
    if not caller:
        return False
    if required_role is not None and caller_role != required_role:
        return False
    if owner_email is not None and normalize_email(owner_email) != caller:
        return False
    return True
