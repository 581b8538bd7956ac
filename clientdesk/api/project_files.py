"""Project file management API endpoints."""
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse, StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.background import BackgroundTask

from clientdesk.common.database import get_db
from clientdesk.common.responses import success_response
from clientdesk.domain.schemas import ProjectFileRenameRequest
from clientdesk.usecase.project_file_usecase import (
    ProjectFileUsecase,
    discard_file,
    stream_and_discard,
)
from .dependencies import CurrentUser

router = APIRouter()


@router.get("/projects/{project_id}/files/download-zip")
async def download_zip(project_id: int, session: AsyncSession = Depends(get_db)):
    """Download every stored file of a project as one ZIP archive.

    The temporary archive is deleted once streaming ends, and again by a
    background task in case the body was never iterated.
    """
    usecase = ProjectFileUsecase(session)
    archive = await usecase.build_zip(project_id)
    return StreamingResponse(
        stream_and_discard(archive.path),
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{archive.filename}"'},
        background=BackgroundTask(discard_file, archive.path),
    )


@router.post("/projects/{project_id}/files", response_model=dict)
async def upload_file(
    project_id: int,
    current_user: CurrentUser,
    file: UploadFile | None = File(default=None),
    session: AsyncSession = Depends(get_db),
):
    """Upload a file to a project.

    Args:
        project_id: Project ID
        current_user: Current authenticated user (recorded as uploader)
        file: File to upload (multipart field "file")
        session: Database session

    Returns:
        Success response with the stored file metadata
    """
    filename = file.filename if file else None
    content = await file.read() if file else None

    usecase = ProjectFileUsecase(session)
    result = await usecase.upload_file(
        project_id=project_id,
        user_id=current_user.id,
        filename=filename,
        file_content=content,
    )
    return success_response(result.model_dump(mode="json", by_alias=True), message="File uploaded")


@router.get("/projects/{project_id}/files", response_model=dict)
async def list_files(
    project_id: int,
    current_user: CurrentUser,
    session: AsyncSession = Depends(get_db),
):
    usecase = ProjectFileUsecase(session)
    files = await usecase.list_files(project_id)
    return success_response([f.model_dump(by_alias=True) for f in files])


@router.get("/projects/{project_id}/files/{file_id}/download")
async def download_file(
    project_id: int,
    file_id: int,
    current_user: CurrentUser,
    session: AsyncSession = Depends(get_db),
):
    """Download one file under its original name."""
    usecase = ProjectFileUsecase(session)
    download = await usecase.get_download(project_id, file_id)
    return FileResponse(download.path, filename=download.filename)


@router.put("/projects/{project_id}/files/{file_id}/rename", response_model=dict)
async def rename_file(
    project_id: int,
    file_id: int,
    current_user: CurrentUser,
    rename_request: ProjectFileRenameRequest | None = None,
    session: AsyncSession = Depends(get_db),
):
    """Change the display name of a file.

    Body: {"originalName": "<new name>"}
    """
    new_name = rename_request.original_name if rename_request else None
    usecase = ProjectFileUsecase(session)
    result = await usecase.rename_file(project_id, file_id, new_name)
    return success_response(result.model_dump(mode="json", by_alias=True), message="File renamed")


@router.delete("/projects/{project_id}/files/{file_id}", response_model=dict)
async def delete_file(
    project_id: int,
    file_id: int,
    current_user: CurrentUser,
    session: AsyncSession = Depends(get_db),
):
    usecase = ProjectFileUsecase(session)
    await usecase.delete_file(project_id, file_id)
    return success_response({"id": file_id}, message="File deleted")
