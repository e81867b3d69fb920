"""htcdl — validation and analysis engine for HTC digital-twin models."""

from __future__ import annotations

__version__ = "0.3.0"

from htcdl.domain.analysis import analyze, find_unused
from htcdl.validation.orchestrator import validate

__all__ = ["__version__", "analyze", "find_unused", "validate"]
