import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import SessionLocal
from app.core.exceptions import RateLimitExceededError
from app.core.security import decode_access_token
from app.crud.user import user as user_crud
from app.middleware.rate_limit import LIMITERS, SlidingWindowRateLimiter
from app.schemas.user import UserContext, User

logger = logging.getLogger(__name__)

http_bearer = HTTPBearer(auto_error=False)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_current_user_with_context(
    request: Request,
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer)
) -> UserContext:
    token = credentials.credentials if credentials else request.cookies.get("accessToken")
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. No token provided.",
        )

    try:
        payload = decode_access_token(token)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token.",
        )

    user_id = payload.get("user_id")
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")

    user = user_crud.get(db, id=user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    try:
        return UserContext(user=User.model_validate(user), role=user.role)
    except PydanticValidationError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")

def get_rate_limiter(bucket: str) -> SlidingWindowRateLimiter:
    return LIMITERS[bucket]

def _enforce(limiter: SlidingWindowRateLimiter, key: str):
    if not settings.RATE_LIMIT_ENABLED:
        return
    if not limiter.check(key):
        logger.warning(f"Rate limit exceeded for {key}")
        raise RateLimitExceededError()

def rate_limit(bucket: str):
    """Dependency limiting an authenticated principal within ``bucket``."""
    def _check(context: UserContext = Depends(get_current_user_with_context)):
        _enforce(get_rate_limiter(bucket), f"{bucket}:user:{context.user.id}")
    return _check

def rate_limit_by_ip(bucket: str):
    """Dependency limiting a client address within ``bucket``, for public routes."""
    def _check(request: Request):
        client_ip = request.client.host if request.client else "unknown"
        _enforce(get_rate_limiter(bucket), f"{bucket}:ip:{client_ip}")
    return _check
