"""
Common Response Models
======================

Bodies returned by every asset tracker service outside its own domain
routes: error envelopes and health checks.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


def _now() -> datetime:
    return datetime.now(UTC)


class ErrorResponse(BaseModel):
    """
    Error envelope.

    ``details`` carries field-level validation errors when an upstream
    service reports them, in whatever shape it used.
    """

    success: bool = False
    error: str
    message: str | None = None
    details: Any = None
    timestamp: datetime = Field(default_factory=_now)


class HealthResponse(BaseModel):
    """Health check body; one entry in ``components`` per dependency."""

    status: str = "healthy"
    service: str
    version: str
    timestamp: datetime = Field(default_factory=_now)
    components: dict[str, dict[str, Any]] = Field(default_factory=dict)
