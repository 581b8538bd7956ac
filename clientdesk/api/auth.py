"""Authentication API endpoints."""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.common.database import get_db
from clientdesk.common.responses import success_response
from clientdesk.common.rate_limit import limiter, RATE_LIMIT
from clientdesk.domain.schemas import UserLoginRequest
from clientdesk.usecase.auth_usecase import AuthUsecase

router = APIRouter()


@router.post("/login", response_model=dict)
@limiter.limit(RATE_LIMIT)
async def login(
    request: Request,
    login_request: UserLoginRequest,
    session: AsyncSession = Depends(get_db),
):
    """Login with email and password and get a JWT access token.

    Args:
        request: FastAPI Request object (for rate limiting)
        login_request: User login request
        session: Database session

    Returns:
        Success response with token and user summary
    """
    usecase = AuthUsecase(session)
    result = await usecase.login(login_request)
    return success_response(result.model_dump(), message="Login successful")


@router.get("/logout", response_model=dict)
async def logout():
    """Log out.

    Tokens are stateless, so there is nothing to invalidate server-side;
    the client discards its token.
    """
    return success_response(None, message="Logged out")
