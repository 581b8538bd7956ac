"""Client management API endpoints."""
from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.common.config import settings
from clientdesk.common.database import get_db
from clientdesk.common.exceptions import NoFileProvidedException
from clientdesk.common.responses import success_response
from clientdesk.domain.schemas import ClientCreateRequest, ClientUpdateRequest
from clientdesk.usecase.client_usecase import ClientUsecase
from .dependencies import CurrentUser

router = APIRouter()


@router.get("/clients", response_model=dict)
async def list_clients(session: AsyncSession = Depends(get_db)):
    usecase = ClientUsecase(session)
    clients = await usecase.list_clients()
    return success_response([client.model_dump() for client in clients])


# Declared before /clients/{id} so "export" is not parsed as an id
@router.get("/clients/export")
async def export_clients(session: AsyncSession = Depends(get_db)):
    """Download every client as a CSV attachment.

    Returns:
        Streamed CSV document
    """
    usecase = ClientUsecase(session)
    lines = await usecase.export_csv()
    return StreamingResponse(
        lines,
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{settings.csv_export_filename}"'
        },
    )


@router.post("/clients/import", response_model=dict)
async def import_clients(
    current_user: CurrentUser,
    file: UploadFile | None = File(default=None),
    session: AsyncSession = Depends(get_db),
):
    """Create clients from an uploaded CSV file.

    Args:
        current_user: Current authenticated user
        file: CSV document (multipart field "file")
        session: Database session

    Returns:
        Success response with imported and skipped row counts
    """
    if file is None:
        raise NoFileProvidedException()

    content = await file.read()

    usecase = ClientUsecase(session)
    result = await usecase.import_csv(content)
    return success_response(result.model_dump(), message="Import finished")


@router.get("/clients/{id}", response_model=dict)
async def get_client(id: int, session: AsyncSession = Depends(get_db)):
    usecase = ClientUsecase(session)
    client = await usecase.get_client(id)
    return success_response(client.model_dump())


@router.post("/createclient", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_client(
    client_request: ClientCreateRequest,
    current_user: CurrentUser,
    session: AsyncSession = Depends(get_db),
):
    """Create a client.

    Args:
        client_request: Name and CIF, plus optional email, phone and web
        current_user: Current authenticated user
        session: Database session

    Returns:
        Success response with the created client
    """
    usecase = ClientUsecase(session)
    client = await usecase.create_client(client_request)
    return success_response(client.model_dump(), message="Client created")


@router.put("/updateclient/{id}", response_model=dict)
async def update_client(
    id: int,
    client_request: ClientUpdateRequest,
    current_user: CurrentUser,
    session: AsyncSession = Depends(get_db),
):
    """Partially update a client.

    A name or CIF already used by a different client is rejected with 409.
    """
    usecase = ClientUsecase(session)
    client = await usecase.update_client(id, client_request)
    return success_response(client.model_dump(), message="Client updated")


@router.delete("/deleteclient/{id}", response_model=dict)
async def delete_client(
    id: int,
    current_user: CurrentUser,
    session: AsyncSession = Depends(get_db),
):
    usecase = ClientUsecase(session)
    await usecase.delete_client(id)
    return success_response({"id": id}, message="Client deleted")
