"""Repository layer for database operations."""
from clientdesk.repository.user_repository import UserRepository
from clientdesk.repository.client_repository import ClientRepository
from clientdesk.repository.project_repository import ProjectRepository
from clientdesk.repository.project_file_repository import ProjectFileRepository

__all__ = [
    "UserRepository",
    "ClientRepository",
    "ProjectRepository",
    "ProjectFileRepository",
]
