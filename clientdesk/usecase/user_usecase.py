"""User management usecase."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.common.config import settings
from clientdesk.common.exceptions import (
    NotFoundException,
    DuplicateEmailException,
    DuplicateUsernameException,
    ServiceUnavailableException,
    UnexpectedPersistenceFailureException,
)
from clientdesk.domain.auth_service import hash_password
from clientdesk.domain.schemas import (
    UserCreateRequest,
    UserUpdateRequest,
    UserSummary,
    DeletedUserResponse,
)
from clientdesk.repository.user_repository import UserRepository
from clientdesk.repository.project_file_repository import ProjectFileRepository
from clientdesk.usecase.project_file_usecase import remove_stored_file, stored_file_path
from clientdesk.repository.exceptions import (
    DuplicateRecordException,
    DatabaseConnectionException,
    DatabaseOperationException,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 100


def clamp_pagination(page: int, limit: int) -> tuple[int, int]:
    """Clamp page to >= 1 and limit to [1, MAX_PAGE_SIZE]; return (offset, limit)."""
    page = max(1, page)
    limit = max(1, min(MAX_PAGE_SIZE, limit))
    return (page - 1) * limit, limit


class UserUsecase:
    """Usecase for user CRUD."""

    def __init__(self, session: AsyncSession, upload_dir: str | None = None):
        self.session = session
        self.user_repo = UserRepository(session)
        self.file_repo = ProjectFileRepository(session)
        self.upload_dir = upload_dir or settings.upload_dir

    async def list_users(self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> list[UserSummary]:
        """List one page of users in id order.

        Args:
            page: 1-based page number (values below 1 become 1)
            limit: Page size, clamped to [1, 100]

        Returns:
            Flat list of user summaries
        """
        offset, limit = clamp_pagination(page, limit)
        async with self.session.begin():
            users = await self.user_repo.list_users(offset=offset, limit=limit)
        return [UserSummary.model_validate(user) for user in users]

    async def get_user(self, user_id: int) -> UserSummary:
        async with self.session.begin():
            user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundException("User not found")
        return UserSummary.model_validate(user)

    async def create_user(self, request: UserCreateRequest) -> UserSummary:
        """Register a new user.

        Args:
            request: User creation request (fields and email format already validated)

        Returns:
            Created user summary

        Raises:
            DuplicateEmailException: If email already exists
            DuplicateUsernameException: If username already exists
            ServiceUnavailableException: If database connection fails
            UnexpectedPersistenceFailureException: If database operation fails
        """
        roles = request.roles or [settings.default_role]

        try:
            async with self.session.begin():
                if await self.user_repo.get_by_email(request.email):
                    raise DuplicateEmailException()
                if await self.user_repo.get_by_username(request.username):
                    raise DuplicateUsernameException()

                user = await self.user_repo.create(
                    email=request.email,
                    username=request.username,
                    password_hash=hash_password(request.password),
                    roles=roles,
                )
                # Auto-commit on success
        except DuplicateRecordException as e:
            # Lost a race with a concurrent registration
            raise self._duplicate_error(e)
        except DatabaseConnectionException:
            raise ServiceUnavailableException()
        except DatabaseOperationException:
            raise UnexpectedPersistenceFailureException("Failed to create user")

        logger.info("Created user %s (id=%s)", user.username, user.id)
        return UserSummary.model_validate(user)

    async def update_user(self, user_id: int, request: UserUpdateRequest) -> UserSummary:
        """Partially update a user.

        Only fields present and non-null in the request are changed; roles
        are replaced wholesale.

        Raises:
            NotFoundException: If user does not exist
            DuplicateEmailException: If email belongs to another user
            DuplicateUsernameException: If username belongs to another user
        """
        changes = request.model_dump(exclude_none=True)

        try:
            async with self.session.begin():
                user = await self.user_repo.get_by_id(user_id)
                if not user:
                    raise NotFoundException("User not found")

                if "email" in changes:
                    owner = await self.user_repo.get_by_email(changes["email"])
                    if owner and owner.id != user.id:
                        raise DuplicateEmailException()

                if "username" in changes:
                    owner = await self.user_repo.get_by_username(changes["username"])
                    if owner and owner.id != user.id:
                        raise DuplicateUsernameException()

                if changes:
                    user = await self.user_repo.update(user, changes)
        except DuplicateRecordException as e:
            raise self._duplicate_error(e)
        except DatabaseConnectionException:
            raise ServiceUnavailableException()
        except DatabaseOperationException:
            raise UnexpectedPersistenceFailureException("Failed to update user")

        return UserSummary.model_validate(user)

    async def delete_user(self, user_id: int) -> DeletedUserResponse:
        """Delete a user and return the identity it had.

        Files the user uploaded go with them: their records are deleted in
        the same transaction, their bytes once it has committed.

        Raises:
            NotFoundException: If user does not exist
        """
        try:
            async with self.session.begin():
                user = await self.user_repo.get_by_id(user_id)
                if not user:
                    raise NotFoundException("User not found")

                deleted = DeletedUserResponse(email=user.email, username=user.username)
                uploads = await self.file_repo.list_by_user(user.id)
                paths = [stored_file_path(self.upload_dir, f) for f in uploads]
                for project_file in uploads:
                    await self.file_repo.delete(project_file)
                await self.user_repo.delete(user.id)
        except DatabaseConnectionException:
            raise ServiceUnavailableException()
        except DatabaseOperationException:
            raise UnexpectedPersistenceFailureException("Failed to delete user")

        for path in paths:
            remove_stored_file(path)

        logger.info(
            "Deleted user %s (id=%s) and %d uploaded file(s)",
            deleted.username, user_id, len(paths),
        )
        return deleted

    @staticmethod
    def _duplicate_error(error: DuplicateRecordException):
        if error.field == "username":
            return DuplicateUsernameException()
        return DuplicateEmailException()
