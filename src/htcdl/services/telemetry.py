"""Timing spans for service calls, shown under ``meta["telemetry"]`` with --verbose.

A validation run produces a tree like::

    ValidationService.validate_file        3.1 ms
      decode                               0.9 ms
      checks                               1.8 ms  defects=2
        structure                          0.4 ms  defects=1
        references                         0.6 ms  defects=1
        reachability                       0.5 ms  defects=0

Spans live in a ContextVar. With telemetry off every helper here is a
single ContextVar read and nothing is recorded.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from htcdl.services.result import ServiceResult

log = structlog.get_logger("htcdl.telemetry")

_enabled: ContextVar[bool] = ContextVar("_enabled", default=False)
_active: ContextVar[Span | None] = ContextVar("_active", default=None)


@dataclass
class Span:
    name: str
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None
    annotations: dict[str, Any] = field(default_factory=dict)
    children: list[Span] = field(default_factory=list)

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def close(self) -> None:
        self.finished = time.perf_counter()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


def telemetry_enabled() -> bool:
    return _enabled.get()


def enable_telemetry() -> None:
    """Record spans in this context (AppContext calls it for --verbose)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def current_span() -> Span | None:
    """The innermost open span, or None when nothing is being recorded."""
    return _active.get() if _enabled.get() else None


def annotate(**values: Any) -> None:
    """Attach *values* to the innermost open span; a no-op when none is open."""
    span = current_span()
    if span is not None:
        span.annotations.update(values)


@contextmanager
def trace_span(name: str, **annotations: Any) -> Iterator[Span | None]:
    """Open a child of the current span for the duration of the block.

    Yields None when telemetry is off or no service call is being traced.
    """
    parent = current_span()
    if parent is None:
        yield None
        return

    span = Span(name=name, annotations=dict(annotations))
    parent.children.append(span)
    token = _active.set(span)
    try:
        yield span
    finally:
        span.close()
        _active.reset(token)


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Make a service method the root span of its own tree.

    When the method returns a ServiceResult, the finished tree is copied into
    ``meta["telemetry"]``.
    """

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Span(name=func.__qualname__)
        token = _active.set(root)
        try:
            result = func(*args, **kwargs)
        finally:
            root.close()
            _active.reset(token)

        if not isinstance(result, ServiceResult):
            return result
        log.debug(
            "span.complete",
            span_name=root.name,
            op=result.op,
            ok=result.ok,
            duration_ms=round(root.duration_ms, 2),
        )
        meta = {**(result.meta or {}), "telemetry": root.to_dict()}
        return result.model_copy(update={"meta": meta})  # type: ignore[return-value]

    return wrapper
