"""Same-origin relay between the dashboard and the upstream API."""

from .app import build_upstream_url, create_app, forward_request
from .config import CORS_HEADERS, RelaySettings

__all__ = [
    "CORS_HEADERS",
    "RelaySettings",
    "build_upstream_url",
    "create_app",
    "forward_request",
]
