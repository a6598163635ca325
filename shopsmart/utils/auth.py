"""
Authentication and authorization utilities.

Validates HS256 bearer tokens and turns their claims into a ``Principal``.
Route handlers pass that principal explicitly into every order operation.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from ..config.settings import get_settings
from ..core.principal import Principal, Role

logger = logging.getLogger(__name__)
settings = get_settings()

# Security scheme for JWT bearer tokens; missing credentials are reported as 401 below
security = HTTPBearer(auto_error=False)


def create_access_token(user_id: str, role: Role = Role.BUYER,
                        expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        user_id: Subject of the token
        role: Role claim
        expires_delta: Optional custom expiration time delta

    Returns:
        Encoded JWT token string
    """
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode = {"sub": str(user_id), "role": Role(role).value, "exp": expire}
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Principal:
    """
    FastAPI dependency to get the acting principal from the bearer token.

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
        payload = jwt.decode(credentials.credentials, settings.jwt_secret_key,
                             algorithms=[settings.jwt_algorithm])
        return Principal(id=payload.get("sub"), role=payload.get("role"))
    except (JWTError, ValidationError) as e:
        logger.warning(f"JWT validation error: {e}")
        raise credentials_exception


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    """FastAPI dependency to require the admin role."""
    if not principal.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin only")
    return principal


def require_shop(principal: Principal = Depends(get_current_principal)) -> Principal:
    """FastAPI dependency to require the shop role."""
    if not principal.is_shop:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Shop only")
    return principal
