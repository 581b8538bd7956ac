"""Project file repository for database operations."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, OperationalError, DBAPIError
from sqlalchemy.orm import selectinload

from clientdesk.models.project_file import ProjectFile
from .exceptions import (
    DatabaseConnectionException,
    DatabaseOperationException,
)


class ProjectFileRepository:
    """Repository for ProjectFile model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        project_id: int,
        user_id: int,
        file_name: str,
        original_name: str,
    ) -> ProjectFile:
        """Create a new project file record.

        Args:
            project_id: Owning project ID
            user_id: Uploader ID
            file_name: Generated name on disk
            original_name: Name supplied by the uploader

        Returns:
            Created ProjectFile object

        Raises:
            DatabaseConnectionException: If database connection fails
            DatabaseOperationException: If database operation fails
        """
        project_file = ProjectFile(
            project_id=project_id,
            user_id=user_id,
            file_name=file_name,
            original_name=original_name,
        )
        self.session.add(project_file)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise DatabaseOperationException("Failed to save file", detail=str(e.orig))
        except OperationalError as e:
            raise DatabaseConnectionException(detail=str(e.orig))
        except DBAPIError as e:
            raise DatabaseOperationException(detail=str(e.orig))
        await self.session.refresh(project_file)
        return project_file

    async def get_by_id(self, file_id: int) -> ProjectFile | None:
        """Get project file by ID.

        Args:
            file_id: ProjectFile ID

        Returns:
            ProjectFile object if found, None otherwise
        """
        result = await self.session.execute(
            select(ProjectFile).where(ProjectFile.id == file_id)
        )
        return result.scalar_one_or_none()

    async def list_by_project(self, project_id: int) -> list[ProjectFile]:
        """Get all files of a project with their uploader loaded.

        Args:
            project_id: Project ID

        Returns:
            List of ProjectFile objects ordered by ID
        """
        result = await self.session.execute(
            select(ProjectFile)
            .options(selectinload(ProjectFile.user))
            .where(ProjectFile.project_id == project_id)
            .order_by(ProjectFile.id)
        )
        return list(result.scalars().all())

    async def rename(self, project_file: ProjectFile, original_name: str) -> ProjectFile:
        project_file.original_name = original_name
        await self.session.flush()
        return project_file

    async def list_by_user(self, user_id: int) -> list[ProjectFile]:
        """Get every file uploaded by a user, across projects."""
        result = await self.session.execute(
            select(ProjectFile)
            .where(ProjectFile.user_id == user_id)
            .order_by(ProjectFile.id)
        )
        return list(result.scalars().all())

    async def delete(self, project_file: ProjectFile) -> None:
        """Delete a file record.

        Raises:
            DatabaseConnectionException: If database connection fails
            DatabaseOperationException: If database operation fails
        """
        await self.session.delete(project_file)
        try:
            await self.session.flush()
        except OperationalError as e:
            raise DatabaseConnectionException(detail=str(e.orig))
        except DBAPIError as e:
            raise DatabaseOperationException("Failed to delete file", detail=str(e.orig))
