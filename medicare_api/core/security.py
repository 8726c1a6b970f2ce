from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from medicare_api.core.config import settings
from medicare_api.core.exceptions import AppError, UnauthenticatedError, ValidationError
import bcrypt
import logging

logger = logging.getLogger(__name__)


def validate_password(password: str) -> str:
    """Reject passwords shorter than PASSWORD_MIN_LENGTH."""
    if not password or len(password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long"
        )
    return password


def hash_password(password: str) -> str:
    """Hash a password using bcrypt with configurable rounds."""
    # bcrypt only looks at the first 72 bytes
    password_bytes = password.encode('utf-8')[:72]
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password_bytes, salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        password_bytes = plain_password.encode('utf-8')[:72]
        return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
    except ValueError as e:
        logger.error(f"Password verification error: {e}")
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode.update({
        "exp": expire,
        "iat": now,
        "iss": settings.APP_NAME,
        "aud": settings.APP_NAME
    })

    try:
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    except JWTError as e:
        logger.error(f"Token creation error: {e}")
        raise AppError("Token creation failed", str(e))


def verify_token(token: str) -> dict:
    """Verify and decode a JWT token."""
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=settings.APP_NAME,
            issuer=settings.APP_NAME
        )
    except JWTError as e:
        logger.warning(f"Token verification failed: {e}")
        raise UnauthenticatedError("Could not validate credentials", str(e))
