"""Remote content API access.

This package wraps the light-novel series API and the WordPress posts API
behind a small typed client.
"""

from .client import ContentAPIError, LightNovelClient
from .rate_limiter import RateLimiter

__all__ = ["ContentAPIError", "LightNovelClient", "RateLimiter"]
