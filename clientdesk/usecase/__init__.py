"""Usecase layer for application services."""
from clientdesk.usecase.auth_usecase import AuthUsecase
from clientdesk.usecase.user_usecase import UserUsecase
from clientdesk.usecase.client_usecase import ClientUsecase
from clientdesk.usecase.project_file_usecase import ProjectFileUsecase

__all__ = [
    "AuthUsecase",
    "UserUsecase",
    "ClientUsecase",
    "ProjectFileUsecase",
]
