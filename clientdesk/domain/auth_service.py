"""Password hashing and bearer-token encoding for login."""
from datetime import datetime, timedelta, timezone

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError
from pydantic import BaseModel

from clientdesk.common.config import settings


ph = PasswordHasher()


class JWTPayload(BaseModel):
    """Claims carried by an access token."""

    sub: str  # user id, as a string per RFC 7519
    email: str
    username: str
    roles: list[str]
    exp: int
    iat: int


def hash_password(password: str) -> str:
    return ph.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Check a plaintext password; a corrupt stored hash never matches."""
    try:
        return ph.verify(hashed_password, password)
    except (VerificationError, InvalidHashError):
        return False


def needs_rehash(hashed_password: str) -> bool:
    """True when the stored hash predates the current Argon2 parameters."""
    try:
        return ph.check_needs_rehash(hashed_password)
    except InvalidHashError:
        return True


def create_access_token(
    user_id: int,
    email: str,
    username: str,
    roles: list[str],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token carrying the user's identity and roles.

    Args:
        user_id: The user's ID
        email: The user's email
        username: The user's username
        roles: The user's role labels
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expire_minutes)

    now = datetime.now(timezone.utc)
    expire = now + expires_delta

    payload = JWTPayload(
        sub=str(user_id),
        email=email,
        username=username,
        roles=roles,
        exp=int(expire.timestamp()),
        iat=int(now.timestamp()),
    )

    return jwt.encode(
        payload.model_dump(),
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str) -> JWTPayload:
    """Decode and validate a JWT access token.

    Args:
        token: The JWT token string

    Returns:
        Decoded JWTPayload

    Raises:
        jwt.ExpiredSignatureError: If token is expired
        jwt.InvalidTokenError: If token is invalid or its payload is malformed
    """
    payload_dict = jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
    )
    try:
        return JWTPayload(**payload_dict)
    except ValueError:
        raise jwt.InvalidTokenError("Invalid token payload")


def extract_user_id_from_token(token: str) -> int:
    """Extract user ID from a JWT token.

    Args:
        token: The JWT token string

    Returns:
        User ID

    Raises:
        jwt.ExpiredSignatureError: If token is expired
        jwt.InvalidTokenError: If token is invalid
    """
    payload = decode_access_token(token)

    try:
        return int(payload.sub)
    except ValueError:
        raise jwt.InvalidTokenError("Invalid token payload")
