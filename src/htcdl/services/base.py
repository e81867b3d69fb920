"""BaseService — shared foundation for htcdl services.

Every service receives the resolved settings and, optionally, a
caller-owned :class:`PluginManager`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from htcdl.infrastructure.codec import ModelDecodeError, load_model
from htcdl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from htcdl.config.settings import HtcSettings
    from htcdl.domain.model import Model
    from htcdl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes."""

    def __init__(self, settings: HtcSettings, plugins: PluginManager | None = None) -> None:
        self._settings = settings
        self._plugins = plugins

    def _load(self, path: Path, op: str) -> Model | ServiceResult:
        """Decode the model at *path*, or a failed result describing why not."""
        try:
            return load_model(path)
        except ModelDecodeError as exc:
            logger.debug("Decoding %s failed: %s", path, exc.code)
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code=exc.code, message=exc.message, detail=exc.detail),
            )

    def _dispatch_event(self, hook_name: str, payload: dict[str, Any], warnings: list[str]) -> None:
        """Dispatch a lifecycle hook. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is None:
            return
        try:
            self._plugins.dispatch(hook_name, **payload)
        except Exception:
            logger.debug("Hook dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Hook dispatch failed for {hook_name}")
