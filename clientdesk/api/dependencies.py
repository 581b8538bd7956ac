"""Dependencies for API endpoints (authentication)."""
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.common.database import get_db
from clientdesk.common.exceptions import UnauthorizedException, InvalidTokenException
from clientdesk.usecase.auth_usecase import AuthUsecase
from clientdesk.models.user import User


async def get_current_user_from_jwt(
    authorization: Annotated[str | None, Header()] = None,
    session: AsyncSession = Depends(get_db),
) -> User:
    """Get current user from JWT token.

    Args:
        authorization: Authorization header (Bearer token)
        session: Database session

    Returns:
        User object

    Raises:
        UnauthorizedException: If token is missing or invalid
    """
    if not authorization:
        raise UnauthorizedException("Missing authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise InvalidTokenException()

    auth_usecase = AuthUsecase(session)
    return await auth_usecase.authenticate_jwt(parts[1])


# Type alias for convenience
CurrentUser = Annotated[User, Depends(get_current_user_from_jwt)]
