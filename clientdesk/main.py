import logging
import os
import time
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from clientdesk.common.config import settings
from clientdesk.common.database import init_db, close_db
from clientdesk.common.exceptions import (
    AppException,
    UnauthorizedException,
    MissingFieldsException,
    InvalidEmailFormatException,
    ValidationException,
)
from clientdesk.common.responses import error_response
from clientdesk.common.rate_limit import limiter


# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.debug else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    await init_db()
    os.makedirs(settings.upload_dir, exist_ok=True)
    logger.info("Storing uploaded files under %s", os.path.abspath(settings.upload_dir))

    yield

    # Shutdown
    await close_db()


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)


def custom_rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Custom handler for rate limit exceeded errors.

    Calculates actual retry-after time from rate limit window statistics.
    """
    limiter_instance = request.app.state.limiter

    # Set by the @limiter.limit() decorator
    view_rate_limit = getattr(request.state, "view_rate_limit", None)

    if view_rate_limit:
        window_stats = limiter_instance.limiter.get_window_stats(
            view_rate_limit[0], *view_rate_limit[1]
        )
        # window_stats[0] is the absolute reset timestamp
        reset_in = 1 + window_stats[0]
        retry_after = max(1, int(reset_in - time.time()))
    else:
        retry_after = 60

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=error_response(
            error="RateLimit",
            message="Too Many Requests",
            data={"retry_after": retry_after},
        ),
        headers={"Retry-After": str(retry_after)},
    )


# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, custom_rate_limit_handler)

# Add SlowAPI middleware to enable rate limiting
app.add_middleware(SlowAPIMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def render_app_exception(exc: AppException) -> JSONResponse:
    # All authentication failures look the same to the caller
    if isinstance(exc, UnauthorizedException):
        error_type = "Unauthorized"
    else:
        error_type = exc.__class__.__name__.replace("Exception", "")

    response_data = error_response(
        error=error_type,
        message=exc.message
    )

    if getattr(exc, 'fields', None):
        response_data["data"] = {"fields": exc.fields}

    return JSONResponse(
        status_code=exc.status_code,
        content=response_data,
    )


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """Handle custom application exceptions."""
    return render_app_exception(exc)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Translate request-shape errors into the application error taxonomy.

    Absent or null required fields become MissingFields, a malformed email
    becomes InvalidEmailFormat, anything else is a generic Validation error.
    """
    missing = []
    bad_email = False
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        field = ".".join(loc[1:]) if len(loc) > 1 else loc[0] if loc else "body"
        if error.get("type") == "missing" or error.get("input", ...) is None:
            missing.append(field)
        elif loc and loc[-1] == "email":
            bad_email = True

    if missing:
        return render_app_exception(MissingFieldsException(missing))
    if bad_email:
        return render_app_exception(InvalidEmailFormatException())

    first = exc.errors()[0] if exc.errors() else {}
    return render_app_exception(ValidationException(first.get("msg", "Validation Error")))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(
            error="InternalServerError",
            message=str(exc) if settings.debug else "An error occurred"
        ),
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running"
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


# Import and include routers
from clientdesk.api import auth, users, clients, project_files

app.include_router(auth.router, prefix="/api", tags=["auth"])
app.include_router(users.router, prefix="/api", tags=["users"])
app.include_router(clients.router, prefix="/api", tags=["clients"])
app.include_router(project_files.router, prefix="/api", tags=["project files"])
