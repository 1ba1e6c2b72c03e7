# Overview: Staff accounts; password hashing, authentication and staff management.

"""
Staff Authentication Service

WHY: Every ledger transaction records the staff member who committed it,
so every terminal action must be attributable to a login.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor 12)
- Minimum 8 characters with at least one letter and one digit
- Session tokens managed separately (see session_service.py)
- The last remaining staff account and the last active admin cannot be removed
"""

import re

import bcrypt

from ..extensions import db
from ..models import LedgerTransaction, StaffUser
from ..permissions import Role, parse_role
from clubpos.time_utils import utcnow


class PasswordValidationError(Exception):
    """Raised when password doesn't meet strength requirements."""
    pass


class StaffError(Exception):
    """Raised for staff management rule violations."""
    pass


class StaffNotFoundError(StaffError):
    pass


def validate_password_strength(password: str) -> None:
    if not password or len(password) < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Za-z]', password):
        raise PasswordValidationError("Password must contain at least one letter")

    if not re.search(r'\d', password):
        raise PasswordValidationError("Password must contain at least one digit")


def hash_password(password: str) -> str:
    """Hash password using bcrypt with cost factor 12 (validates strength first)."""
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns False for malformed hashes instead of raising.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def _role_value(role) -> str:
    try:
        return parse_role(role).value
    except ValueError:
        allowed = ", ".join(r.value for r in Role)
        raise StaffError(f"role must be one of: {allowed}")


def create_staff(username: str, name: str, password: str, role=Role.SALES) -> StaffUser:
    """
    Create a staff account.

    Raises StaffError on duplicate username or unknown role,
    PasswordValidationError on a weak password.
    """
    username = (username or "").strip().lower()
    name = (name or "").strip()
    if not username or not name:
        raise StaffError("username and name are required")

    existing = db.session.query(StaffUser).filter_by(username=username).first()
    if existing:
        raise StaffError(f"Username {username} already exists")

    staff = StaffUser(
        username=username,
        name=name,
        role=_role_value(role),
        password_hash=hash_password(password),
        is_active=True,
    )
    db.session.add(staff)
    db.session.commit()
    return staff


def _active_admin_count(exclude_id: int | None = None) -> int:
    q = db.session.query(StaffUser).filter(
        StaffUser.role == Role.ADMIN.value,
        StaffUser.is_active.is_(True),
    )
    if exclude_id is not None:
        q = q.filter(StaffUser.id != exclude_id)
    return q.count()


def update_staff(staff_id: int, *, name=None, role=None, password=None, is_active=None) -> StaffUser:
    staff = db.session.query(StaffUser).filter_by(id=staff_id).first()
    if not staff:
        raise StaffNotFoundError("Staff user not found")

    demoting = role is not None and _role_value(role) != Role.ADMIN.value
    deactivating = is_active is False
    if staff.role == Role.ADMIN.value and (demoting or deactivating):
        if _active_admin_count(exclude_id=staff.id) == 0:
            raise StaffError("Cannot demote or deactivate the last active admin")

    if name is not None:
        if not name.strip():
            raise StaffError("name cannot be empty")
        staff.name = name.strip()
    if role is not None:
        staff.role = _role_value(role)
    if password is not None:
        staff.password_hash = hash_password(password)
    if is_active is not None:
        staff.is_active = bool(is_active)

    db.session.commit()
    return staff


def delete_staff(staff_id: int) -> None:
    """Remove a staff account and revoke its sessions."""
    from .session_service import revoke_all_staff_sessions

    staff = db.session.query(StaffUser).filter_by(id=staff_id).first()
    if not staff:
        raise StaffNotFoundError("Staff user not found")

    if db.session.query(StaffUser).count() <= 1:
        raise StaffError("Cannot delete the last staff user")

    if staff.role == Role.ADMIN.value and _active_admin_count(exclude_id=staff.id) == 0:
        raise StaffError("Cannot delete the last active admin")

    revoke_all_staff_sessions(staff.id, reason="Staff user deleted")
    # Ledger rows reference actor_staff_id: keep the row, only deactivate it
    has_history = db.session.query(LedgerTransaction).filter_by(actor_staff_id=staff.id).first() is not None
    if has_history:
        staff.is_active = False
    else:
        db.session.delete(staff)
    db.session.commit()


def list_staff() -> list[StaffUser]:
    return db.session.query(StaffUser).order_by(StaffUser.name.asc(), StaffUser.id.asc()).all()


def authenticate(username: str, password: str) -> StaffUser | None:
    """
    Authenticate staff by username and password.

    Returns the StaffUser and stamps last_login_at, or None.
    """
    staff = db.session.query(StaffUser).filter(
        StaffUser.username == (username or "").strip().lower(),
        StaffUser.is_active.is_(True),
    ).first()

    if not staff:
        return None

    if verify_password(password, staff.password_hash):
        staff.last_login_at = utcnow()
        db.session.commit()
        return staff

    return None
