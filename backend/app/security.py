"""
Password hashing and JWT access tokens.

bcrypt via passlib for passwords, HS256 JWTs via python-jose for sessions.
Tokens carry the user id in `sub`; the user row is re-read on every request
so role changes and deletions take effect immediately.
"""

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Malformed hash in the database
        return False


def create_access_token(
    subject: str,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """Signed JWT for `subject`; defaults to the configured lifetime."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.jwt_expires_minutes)
    )
    to_encode: Dict[str, Any] = dict(extra_claims or {})
    to_encode.update({"sub": subject, "exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Claims of a valid token, or None when the signature or expiry fails."""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


# ── Password reset tokens ─────────────────────────────────────────────────
# A reset token is a JWT with `purpose` set; it is refused as a session
# token and bound to the current password hash, so it stops working once
# the password has changed.
PASSWORD_RESET_PURPOSE = "password_reset"
PASSWORD_RESET_EXPIRES = timedelta(hours=1)


def _hash_fingerprint(password_hash: str) -> str:
    return hashlib.sha256(password_hash.encode()).hexdigest()[:16]


def create_password_reset_token(user_id: str, password_hash: str) -> str:
    return create_access_token(
        user_id,
        expires_delta=PASSWORD_RESET_EXPIRES,
        extra_claims={"purpose": PASSWORD_RESET_PURPOSE, "fp": _hash_fingerprint(password_hash)},
    )


def decode_password_reset_token(token: str) -> Optional[Dict[str, Any]]:
    """Claims of a valid reset token, or None for anything else."""
    claims = decode_access_token(token)
    if claims is None or claims.get("purpose") != PASSWORD_RESET_PURPOSE or "sub" not in claims:
        return None
    return claims


def reset_token_matches(claims: Dict[str, Any], password_hash: str) -> bool:
    return claims.get("fp") == _hash_fingerprint(password_hash)
