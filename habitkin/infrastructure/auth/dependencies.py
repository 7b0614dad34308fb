"""FastAPI dependencies resolving the caller from the hosted backend's bearer token."""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from habitkin.infrastructure.auth.jwt_handler import verify_token

_bearer = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer),
) -> dict:
    """Verified token claims. 401 when the token is missing, expired or not a user token."""
    if not credentials:
        raise _unauthorized("Authentication required.")
    claims = verify_token(credentials.credentials)
    if claims is None:
        raise _unauthorized("Invalid or expired token.")
    return claims


def get_current_user_id(claims: dict = Depends(get_current_user)) -> str:
    return claims["sub"]

