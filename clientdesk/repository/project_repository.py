"""Project (repo) repository for database operations."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.models.repo import Repo


class ProjectRepository:
    """Read-only access to projects."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, project_id: int) -> Repo | None:
        """Get project by ID.

        Args:
            project_id: Project ID

        Returns:
            Repo object if found, None otherwise
        """
        result = await self.session.execute(
            select(Repo).where(Repo.id == project_id)
        )
        return result.scalar_one_or_none()
