# Overview: Staff session tokens; creation, validation, revocation.

"""
Session Token Management Service

WHY: Secure session management with automatic timeout and revocation.
Tokens are cryptographically secure, hashed in database, and time-limited.

SECURITY FEATURES:
- Cryptographically secure random tokens (32 bytes)
- Tokens hashed with SHA-256 before storage (fast, one-way)
- Absolute timeout from config (CLUBPOS_SESSION_HOURS)
- 2-hour idle timeout (SESSION_IDLE_TIMEOUT)
- Revocable on logout or when the staff account goes away
"""

import hashlib
import secrets
from dataclasses import dataclass
from datetime import timedelta

from flask import current_app

from ..extensions import db
from ..models import SessionToken, StaffUser
from clubpos.time_utils import utcnow


SESSION_IDLE_TIMEOUT = timedelta(hours=2)


@dataclass
class SessionContext:
    """Authenticated staff identity for one request."""
    staff: StaffUser
    session: SessionToken


def generate_token() -> str:
    """64-character hex string (32 bytes of entropy) sent to the client, never stored."""
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    """
    Hash token for database storage using SHA-256.

    Tokens are already high-entropy (unlike passwords), so a fast hash is enough.
    """
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def _absolute_timeout() -> timedelta:
    return timedelta(hours=current_app.config.get("CLUBPOS_SESSION_HOURS", 12))


def create_session(staff_id: int) -> tuple[SessionToken, str]:
    """
    Create new session token for a staff user.

    Returns (session_record, plaintext_token).
    Client receives plaintext_token, database stores only the hash.
    """
    staff = db.session.query(StaffUser).filter_by(id=staff_id).first()
    if not staff:
        raise ValueError("Staff user not found")
    if not staff.is_active:
        raise ValueError("Staff user is not active")

    plaintext_token = generate_token()
    now = utcnow()

    session = SessionToken(
        staff_id=staff_id,
        token_hash=hash_token(plaintext_token),
        created_at=now,
        last_used_at=now,
        expires_at=now + _absolute_timeout(),
        is_revoked=False,
    )

    db.session.add(session)
    db.session.commit()

    return session, plaintext_token


def _revoke(session: SessionToken, reason: str) -> None:
    session.is_revoked = True
    session.revoked_at = utcnow()
    session.revoked_reason = reason
    db.session.commit()


def validate_session(token: str) -> SessionContext | None:
    """
    Validate session token and return SessionContext if valid.

    Returns None if the token is unknown, expired, idle too long, revoked,
    or belongs to a deactivated staff account. Updates last_used_at.
    """
    now = utcnow()

    session = db.session.query(SessionToken).filter_by(
        token_hash=hash_token(token),
        is_revoked=False
    ).first()

    if not session:
        return None

    if session.expires_at < now:
        return None

    if now - session.last_used_at > SESSION_IDLE_TIMEOUT:
        _revoke(session, "Idle timeout")
        return None

    staff = session.staff
    if not staff or not staff.is_active:
        _revoke(session, "Staff account deactivated")
        return None

    session.last_used_at = now
    db.session.commit()

    return SessionContext(staff=staff, session=session)


def revoke_session(token: str, reason: str = "Staff logout") -> bool:
    """Returns True if session was revoked, False if not found."""
    session = db.session.query(SessionToken).filter_by(
        token_hash=hash_token(token),
        is_revoked=False
    ).first()

    if not session:
        return False

    _revoke(session, reason)
    return True


def revoke_all_staff_sessions(staff_id: int, reason: str = "Revoke all sessions") -> int:
    """Returns count of sessions revoked."""
    now = utcnow()

    sessions = db.session.query(SessionToken).filter_by(
        staff_id=staff_id,
        is_revoked=False
    ).all()

    for session in sessions:
        session.is_revoked = True
        session.revoked_at = now
        session.revoked_reason = reason

    db.session.commit()
    return len(sessions)
