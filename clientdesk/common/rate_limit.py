"""Per-client request throttling."""
from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import settings

RATE_LIMIT = f"{settings.rate_limit_per_minute}/minute"

# One counter per remote address across all endpoints; login also carries
# its own decorator so it stays throttled if application limits change
limiter = Limiter(
    key_func=get_remote_address,
    application_limits=[RATE_LIMIT],
    headers_enabled=False,
)
