"""HTTP middleware and logging setup."""

from .logging_config import setup_logging
from .logging_mw import LoggingMiddleware
from .rate_limit_mw import RateLimitMiddleware
from .security_mw import SecurityHeadersMiddleware

__all__ = [
    "setup_logging",
    "LoggingMiddleware",
    "RateLimitMiddleware",
    "SecurityHeadersMiddleware",
]
