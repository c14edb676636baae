"""
Identity checks for bearer tokens issued by the identity provider.

Tokens are JWTs whose `sub` claim is the user id, as issued by Supabase Auth.
"""

from typing import Optional
from jose import JWTError, jwt
from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from presensi.config import settings

# HTTP Bearer token scheme; missing credentials are reported as 401 below
security = HTTPBearer(auto_error=False)


class AuthError(Exception):
    """Token could not be verified."""
    pass


def verify_token(token: str) -> dict:
    """
    Verify and decode a token.

    Raises:
        AuthError: if the token is invalid, expired or for another audience
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
        )
    except JWTError:
        raise AuthError("Could not validate credentials")


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> str:
    """
    Id of the authenticated user.

    Raises:
        HTTPException: 401 if the token is missing or invalid
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    try:
        payload = verify_token(credentials.credentials)
    except AuthError:
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception

    return str(user_id)
