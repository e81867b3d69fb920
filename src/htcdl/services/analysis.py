"""AnalysisService — statistics, unused elements, and canonical re-encoding."""

from __future__ import annotations

from typing import TYPE_CHECKING

from htcdl.domain.analysis import analyze, find_unused
from htcdl.infrastructure.codec import encode_model
from htcdl.services.base import BaseService
from htcdl.services.result import ServiceResult
from htcdl.services.telemetry import traced

if TYPE_CHECKING:
    from pathlib import Path


class AnalysisService(BaseService):
    """Read-only reports over a decoded model. Does not validate."""

    @traced
    def statistics(self, path: Path) -> ServiceResult:
        loaded = self._load(path, "analyze")
        if isinstance(loaded, ServiceResult):
            return loaded
        stats = analyze(loaded)
        return ServiceResult(
            ok=True,
            op="analyze",
            data={"id": loaded.id, **stats.model_dump()},
        )

    @traced
    def unused(self, path: Path) -> ServiceResult:
        loaded = self._load(path, "unused")
        if isinstance(loaded, ServiceResult):
            return loaded
        unused = find_unused(loaded)
        return ServiceResult(
            ok=True,
            op="unused",
            data={
                "id": loaded.id,
                "unused_events": unused.unused_events,
                "unused_schemas": unused.unused_schemas,
                "count": len(unused.unused_events) + len(unused.unused_schemas),
            },
        )

    @traced
    def dump(self, path: Path) -> ServiceResult:
        """Re-encode the model in canonical wire form."""
        loaded = self._load(path, "dump")
        if isinstance(loaded, ServiceResult):
            return loaded
        return ServiceResult(
            ok=True,
            op="dump",
            data={"id": loaded.id, "document": encode_model(loaded)},
        )
