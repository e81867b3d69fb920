"""ServiceResult and ServiceError — the contract between services and the CLI.

INVARIANT: All service-layer methods return ServiceResult. Expected
failures (decode errors, validation defects) are results, not exceptions.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

VALIDATION_FAILED = "VALIDATION_FAILED"
INVALID_DTMI = "INVALID_DTMI"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"validate"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal findings (unused events, plugin failures).
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing spans when verbose).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
