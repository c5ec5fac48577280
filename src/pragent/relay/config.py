"""Relay configuration."""

import os

from pydantic import BaseModel, Field

DEFAULT_UPSTREAM_URL = "https://apis.scraponwheels.com/ecom/"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, PATCH, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

PREFLIGHT_MAX_AGE = "86400"


class RelaySettings(BaseModel):
    """Settings for the relay process.

    ``stream_path_markers`` keeps the legacy rule that any path containing
    the chat-message route is piped through, even when the upstream forgets
    to label its response as an event stream.
    """

    upstream_url: str = Field(default=DEFAULT_UPSTREAM_URL)
    timeout: float | None = Field(default=120.0, description="Upstream timeout in seconds")
    stream_path_markers: tuple[str, ...] = ("chatbot/message",)
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "RelaySettings":
        """Build settings from PRAGENT_* environment variables."""
        timeout = os.getenv("PRAGENT_RELAY_TIMEOUT", "120")
        return cls(
            upstream_url=os.getenv("PRAGENT_UPSTREAM_URL", DEFAULT_UPSTREAM_URL),
            timeout=float(timeout) if timeout.strip() else None,
            host=os.getenv("PRAGENT_RELAY_HOST", "0.0.0.0"),
            port=int(os.getenv("PRAGENT_RELAY_PORT", "8000")),
        )
