"""Authentication usecase for login and bearer-token checks."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession
import jwt

from clientdesk.common.config import settings
from clientdesk.common.exceptions import (
    InvalidCredentialsException,
    ServiceUnavailableException,
    UnexpectedPersistenceFailureException,
    TokenExpiredException,
    InvalidTokenException,
)
from clientdesk.domain.auth_service import (
    hash_password,
    verify_password,
    needs_rehash,
    create_access_token,
    extract_user_id_from_token,
)
from clientdesk.domain.schemas import UserLoginRequest, LoginResponse, UserSummary
from clientdesk.repository.user_repository import UserRepository
from clientdesk.repository.exceptions import (
    DatabaseConnectionException,
    DatabaseOperationException,
)
from clientdesk.models.user import User

logger = logging.getLogger(__name__)


class AuthUsecase:
    """Usecase for authentication operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)

    async def login(self, request: UserLoginRequest) -> LoginResponse:
        """Authenticate user and return a JWT plus the user summary.

        Users without roles get the default role on their first login.

        Args:
            request: User login request

        Returns:
            LoginResponse with JWT access token and user summary

        Raises:
            InvalidCredentialsException: If email is unknown or password is wrong
        """
        try:
            async with self.session.begin():
                user = await self.user_repo.get_by_email(request.email)

                # Same error for unknown email and wrong password
                if not user or not verify_password(request.password, user.password_hash):
                    logger.warning("Failed login attempt for %s", request.email)
                    raise InvalidCredentialsException()

                changes = {}
                if not user.roles:
                    changes["roles"] = [settings.default_role]
                if needs_rehash(user.password_hash):
                    changes["password_hash"] = hash_password(request.password)
                if changes:
                    user = await self.user_repo.update(user, changes)
                # Auto-commit on success
        except DatabaseConnectionException:
            raise ServiceUnavailableException()
        except DatabaseOperationException:
            raise UnexpectedPersistenceFailureException("Failed to update user on login")

        token = create_access_token(
            user_id=user.id,
            email=user.email,
            username=user.username,
            roles=user.roles,
        )

        return LoginResponse(token=token, user=UserSummary.model_validate(user))

    async def authenticate_jwt(self, jwt_token: str) -> User:
        """Authenticate user from JWT token.

        Args:
            jwt_token: JWT token string

        Returns:
            User object

        Raises:
            TokenExpiredException: If token has expired
            InvalidTokenException: If token is invalid or user not found
        """
        try:
            user_id = extract_user_id_from_token(jwt_token)
        except jwt.ExpiredSignatureError:
            raise TokenExpiredException()
        except jwt.InvalidTokenError:
            raise InvalidTokenException()

        async with self.session.begin():
            user = await self.user_repo.get_by_id(user_id)

        if not user:
            # User not found means token is invalid (user was deleted)
            raise InvalidTokenException()

        return user
