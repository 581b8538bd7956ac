"""Project file usecase for upload, download and archive operations."""
import logging
import os
import re
import tempfile
import zipfile
from collections.abc import Iterator
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.common.config import settings
from clientdesk.common.exceptions import (
    NotFoundException,
    ProjectNotFoundException,
    NoFileProvidedException,
    InvalidNameException,
    ServiceUnavailableException,
    UnexpectedPersistenceFailureException,
)
from clientdesk.common.id_utils import generate_stored_name, safe_basename
from clientdesk.domain.schemas import (
    FileUploaderResponse,
    ProjectFileResponse,
    ProjectFileUploadResponse,
)
from clientdesk.models.project_file import ProjectFile
from clientdesk.repository.project_repository import ProjectRepository
from clientdesk.repository.project_file_repository import ProjectFileRepository
from clientdesk.repository.exceptions import (
    DatabaseConnectionException,
    DatabaseOperationException,
)

logger = logging.getLogger(__name__)

ZIP_CHUNK_SIZE = 64 * 1024
UPLOADED_AT_FORMAT = "%Y-%m-%d %H:%M"


@dataclass
class FileDownload:
    """A stored file located on disk, with the name to offer the client."""

    path: str
    filename: str


@dataclass
class ZipArchive:
    """A temporary archive; the caller owns the file at ``path``."""

    path: str
    filename: str


def archive_name(projectname: str) -> str:
    """Derive the download name of a project's archive."""
    return re.sub(r"[^a-zA-Z0-9_\-]", "_", projectname) + "_ficheros.zip"


def stored_file_path(upload_dir: str, project_file: ProjectFile) -> str:
    """Location of a file's bytes: ``<upload_dir>/<project_id>/<file_name>``."""
    return os.path.join(upload_dir, str(project_file.project_id), project_file.file_name)


def remove_stored_file(path: str) -> None:
    """Delete a stored file's bytes; already-missing bytes are only logged."""
    try:
        os.remove(path)
    except FileNotFoundError:
        logger.warning("File %s was already gone from disk", path)


def discard_file(path: str) -> None:
    """Remove a scratch file, logging instead of raising."""
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove temporary file %s: %s", path, e)


def stream_and_discard(path: str, chunk_size: int = ZIP_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield a file's bytes, then delete it even if streaming stops early."""
    try:
        with open(path, "rb") as f:
            while chunk := f.read(chunk_size):
                yield chunk
    finally:
        discard_file(path)


class ProjectFileUsecase:
    """Usecase for project file operations."""

    def __init__(self, session: AsyncSession, upload_dir: str | None = None):
        self.session = session
        self.project_repo = ProjectRepository(session)
        self.file_repo = ProjectFileRepository(session)
        self.upload_dir = upload_dir or settings.upload_dir

    def _project_dir(self, project_id: int) -> str:
        return os.path.join(self.upload_dir, str(project_id))

    def _stored_path(self, project_file: ProjectFile) -> str:
        return stored_file_path(self.upload_dir, project_file)

    async def _get_project_file(self, project_id: int, file_id: int) -> ProjectFile:
        """Load a file record, treating a file of another project as missing."""
        project_file = await self.file_repo.get_by_id(file_id)
        if not project_file or project_file.project_id != project_id:
            raise NotFoundException("File not found")
        return project_file

    async def upload_file(
        self,
        project_id: int,
        user_id: int,
        filename: str | None,
        file_content: bytes | None,
    ) -> ProjectFileUploadResponse:
        """Store an uploaded file in the project's directory and record it.

        Args:
            project_id: Project ID
            user_id: Uploader ID
            filename: Name supplied by the client, None if no file was sent
            file_content: File bytes, None if no file was sent

        Returns:
            Metadata of the stored file

        Raises:
            ProjectNotFoundException: If project does not exist
            NoFileProvidedException: If the request carried no file
        """
        file_path = None
        try:
            async with self.session.begin():
                project = await self.project_repo.get_by_id(project_id)
                if not project:
                    raise ProjectNotFoundException()
                if not filename or file_content is None:
                    raise NoFileProvidedException()

                original_name = safe_basename(filename)
                stored_name = generate_stored_name(original_name)

                project_dir = self._project_dir(project_id)
                os.makedirs(project_dir, exist_ok=True)
                file_path = os.path.join(project_dir, stored_name)
                with open(file_path, "wb") as f:
                    f.write(file_content)

                project_file = await self.file_repo.create(
                    project_id=project_id,
                    user_id=user_id,
                    file_name=stored_name,
                    original_name=original_name,
                )
                # Auto-commit on success
        except Exception as e:
            # Do not leave bytes behind without a metadata row
            if file_path and os.path.exists(file_path):
                os.remove(file_path)
            if isinstance(e, DatabaseConnectionException):
                raise ServiceUnavailableException()
            if isinstance(e, DatabaseOperationException):
                raise UnexpectedPersistenceFailureException("Failed to save file")
            raise

        logger.info(
            "Stored %s for project %s as %s (%d bytes)",
            original_name, project_id, stored_name, len(file_content),
        )
        return ProjectFileUploadResponse(
            id=project_file.id,
            original_name=project_file.original_name,
            file_name=project_file.file_name,
            uploaded_at=project_file.uploaded_at,
        )

    async def list_files(self, project_id: int) -> list[ProjectFileResponse]:
        """List a project's files with their uploader.

        Raises:
            ProjectNotFoundException: If project does not exist
        """
        async with self.session.begin():
            project = await self.project_repo.get_by_id(project_id)
            if not project:
                raise ProjectNotFoundException()
            files = await self.file_repo.list_by_project(project_id)

        return [
            ProjectFileResponse(
                id=f.id,
                original_name=f.original_name,
                file_name=f.file_name,
                uploaded_at=f.uploaded_at.strftime(UPLOADED_AT_FORMAT),
                user=FileUploaderResponse(id=f.user.id, username=f.user.username),
            )
            for f in files
        ]

    async def get_download(self, project_id: int, file_id: int) -> FileDownload:
        """Locate a single file for download.

        Raises:
            NotFoundException: If the record is missing, belongs to another
                project, or its bytes are gone from storage
        """
        async with self.session.begin():
            project_file = await self._get_project_file(project_id, file_id)

        path = self._stored_path(project_file)
        if not os.path.isfile(path):
            logger.warning("File %s of project %s is missing on disk", path, project_id)
            raise NotFoundException("File not found")

        return FileDownload(path=path, filename=project_file.original_name)

    async def build_zip(self, project_id: int) -> ZipArchive:
        """Pack every file of a project that still exists on disk into a temp archive.

        Entries are named by original name; when two files share one, the
        later upload wins. The caller must remove the archive, normally via
        ``stream_and_discard``.

        Raises:
            ProjectNotFoundException: If project does not exist
            NotFoundException: If the project has no files
        """
        async with self.session.begin():
            project = await self.project_repo.get_by_id(project_id)
            if not project:
                raise ProjectNotFoundException()
            files = await self.file_repo.list_by_project(project_id)

        if not files:
            raise NotFoundException("This project has no files")

        entries: dict[str, str] = {}
        for project_file in files:
            path = self._stored_path(project_file)
            if os.path.isfile(path):
                entries[project_file.original_name] = path
            else:
                logger.warning("Skipping %s in archive: missing on disk", path)

        fd, zip_path = tempfile.mkstemp(prefix="project_files_", suffix=".zip")
        os.close(fd)
        try:
            with zipfile.ZipFile(zip_path, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
                for arcname, path in entries.items():
                    zf.write(path, arcname=arcname)
        except BaseException:
            discard_file(zip_path)
            raise

        return ZipArchive(path=zip_path, filename=archive_name(project.projectname))

    async def rename_file(self, project_id: int, file_id: int, new_name: str | None) -> ProjectFileUploadResponse:
        """Change the display name of a file; the stored bytes keep their name.

        Raises:
            NotFoundException: If the file is missing or belongs to another project
            InvalidNameException: If the new name is empty after trimming
        """
        async with self.session.begin():
            project_file = await self._get_project_file(project_id, file_id)
            if new_name is None or not new_name.strip():
                raise InvalidNameException()
            project_file = await self.file_repo.rename(project_file, new_name.strip())

        return ProjectFileUploadResponse(
            id=project_file.id,
            original_name=project_file.original_name,
            file_name=project_file.file_name,
            uploaded_at=project_file.uploaded_at,
        )

    async def delete_file(self, project_id: int, file_id: int) -> None:
        """Remove a file's record and then its bytes (if still present).

        The bytes are only removed once the record deletion has committed.

        Raises:
            NotFoundException: If the file is missing or belongs to another project
        """
        try:
            async with self.session.begin():
                project_file = await self._get_project_file(project_id, file_id)
                path = self._stored_path(project_file)
                await self.file_repo.delete(project_file)
        except DatabaseConnectionException:
            raise ServiceUnavailableException()
        except DatabaseOperationException:
            raise UnexpectedPersistenceFailureException("Failed to delete file")

        remove_stored_file(path)
        logger.info("Deleted file %s from project %s", file_id, project_id)
