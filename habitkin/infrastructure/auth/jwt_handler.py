"""Verification of the hosted auth backend's access tokens (HS256).

Sign-up, login and refresh happen at the hosted backend; this service only
checks the bearer tokens it issues. create_access_token mints a compatible
token for local development and tests.
"""
import os
from datetime import datetime, timedelta, timezone

from jose import jwt, JWTError

SECRET_KEY = os.environ.get("JWT_SECRET_KEY")

# A None key makes python-jose sign with the string "None"; refuse to start.
if not SECRET_KEY:  # pragma: no cover
    raise RuntimeError(
        "Missing JWT_SECRET_KEY environment variable. "
        "Set it to the auth backend's JWT secret in your .env file before starting."
    )

ALGORITHM = "HS256"
AUDIENCE = os.environ.get("JWT_AUDIENCE", "authenticated")
AUTHENTICATED_ROLE = "authenticated"
ACCESS_TOKEN_EXPIRE_MINUTES = 60


def create_access_token(user_id: str, email: str | None = None,
                        expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    """Create a token shaped like the auth backend's access tokens."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "aud": AUDIENCE,
        "role": AUTHENTICATED_ROLE,
        "exp": now + timedelta(minutes=expires_minutes),
        "iat": now,
    }
    if email:
        payload["email"] = email
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str) -> dict | None:
    """Decode and validate a JWT. Returns the payload dict or None."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM], audience=AUDIENCE)
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    if payload.get("role") != AUTHENTICATED_ROLE:
        return None
    return payload
