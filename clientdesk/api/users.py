"""User management API endpoints."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.common.database import get_db
from clientdesk.common.responses import success_response
from clientdesk.domain.schemas import UserCreateRequest, UserUpdateRequest
from clientdesk.usecase.user_usecase import UserUsecase, DEFAULT_PAGE_SIZE

router = APIRouter()


@router.get("/users", response_model=dict)
async def list_users(
    page: int = Query(default=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE),
    session: AsyncSession = Depends(get_db),
):
    """List users page by page.

    Out-of-range page and limit values are clamped rather than rejected.
    """
    usecase = UserUsecase(session)
    users = await usecase.list_users(page=page, limit=limit)
    return success_response([user.model_dump() for user in users])


@router.get("/users/{id}", response_model=dict)
async def get_user(id: int, session: AsyncSession = Depends(get_db)):
    usecase = UserUsecase(session)
    user = await usecase.get_user(id)
    return success_response(user.model_dump())


@router.post("/newusers", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_request: UserCreateRequest,
    session: AsyncSession = Depends(get_db),
):
    """Create a user.

    Args:
        user_request: Email, username, password and optional roles
        session: Database session

    Returns:
        Success response with the created user
    """
    usecase = UserUsecase(session)
    user = await usecase.create_user(user_request)
    return success_response(user.model_dump(), message="User created")


@router.put("/updateusers/{id}", response_model=dict)
async def update_user(
    id: int,
    user_request: UserUpdateRequest,
    session: AsyncSession = Depends(get_db),
):
    """Partially update a user's email, username or roles."""
    usecase = UserUsecase(session)
    user = await usecase.update_user(id, user_request)
    return success_response(user.model_dump(), message="User updated")


@router.delete("/deleteusers/{id}", response_model=dict)
async def delete_user(id: int, session: AsyncSession = Depends(get_db)):
    usecase = UserUsecase(session)
    deleted = await usecase.delete_user(id)
    return success_response(deleted.model_dump(), message="User deleted")
