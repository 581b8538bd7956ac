"""Database models."""
from clientdesk.models.user import User
from clientdesk.models.client import Client
from clientdesk.models.repo import Repo
from clientdesk.models.project_file import ProjectFile

__all__ = [
    "User",
    "Client",
    "Repo",
    "ProjectFile",
]
