"""User repository for database operations."""
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, OperationalError, DBAPIError

from clientdesk.models.user import User
from .exceptions import (
    DuplicateRecordException,
    DatabaseConnectionException,
    DatabaseOperationException,
)


class UserRepository:
    """Repository for User model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _flush(self, email: str | None = None, username: str | None = None) -> None:
        """Flush pending changes, translating driver errors.

        Raises:
            DuplicateRecordException: If username or email already exists
            DatabaseConnectionException: If database connection fails
            DatabaseOperationException: If database operation fails
        """
        try:
            await self.session.flush()
        except IntegrityError as e:
            error_msg = str(e.orig).lower()
            if "unique" in error_msg or "duplicate" in error_msg:
                if "username" in error_msg:
                    raise DuplicateRecordException(
                        f"Username '{username}' already exists", field="username"
                    )
                elif "email" in error_msg:
                    raise DuplicateRecordException(
                        f"Email '{email}' already exists", field="email"
                    )
                raise DuplicateRecordException("User already exists")
            raise DatabaseOperationException("Failed to save user", detail=str(e.orig))
        except OperationalError as e:
            raise DatabaseConnectionException(detail=str(e.orig))
        except DBAPIError as e:
            raise DatabaseOperationException(detail=str(e.orig))

    async def create(
        self, email: str, username: str, password_hash: str, roles: list[str]
    ) -> User:
        """Create a new user.

        Args:
            email: Email address
            username: Username
            password_hash: Hashed password
            roles: Role labels

        Returns:
            Created User object

        Raises:
            DuplicateRecordException: If username or email already exists
            DatabaseConnectionException: If database connection fails
            DatabaseOperationException: If database operation fails
        """
        user = User(
            email=email,
            username=username,
            password_hash=password_hash,
            roles=list(roles),
        )
        self.session.add(user)
        await self._flush(email=email, username=username)
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: int) -> User | None:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User object if found, None otherwise
        """
        result = await self.session.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> User | None:
        """Get user by username.

        Args:
            username: Username

        Returns:
            User object if found, None otherwise
        """
        result = await self.session.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email.

        Args:
            email: Email address

        Returns:
            User object if found, None otherwise
        """
        result = await self.session.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def list_users(self, offset: int, limit: int) -> list[User]:
        """List users in id order.

        Args:
            offset: Number of users to skip
            limit: Maximum number of users to return

        Returns:
            List of User objects
        """
        result = await self.session.execute(
            select(User).order_by(User.id).offset(offset).limit(limit)
        )
        return list(result.scalars().all())

    async def update(self, user: User, fields: dict[str, Any]) -> User:
        """Apply field changes to a user.

        Args:
            user: User to modify
            fields: Column name to new value

        Returns:
            Updated User object

        Raises:
            DuplicateRecordException: If the new username or email already exists
        """
        for name, value in fields.items():
            setattr(user, name, value)
        await self._flush(email=fields.get("email"), username=fields.get("username"))
        await self.session.refresh(user)
        return user

    async def delete(self, user_id: int) -> bool:
        """Delete a user.

        Args:
            user_id: User ID

        Returns:
            True if deleted, False if not found
        """
        user = await self.get_by_id(user_id)
        if user:
            await self.session.delete(user)
            await self._flush()
            return True
        return False
