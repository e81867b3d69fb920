"""Classification enums used by model records.

Wire values are the exact strings found in ``.htcdl.json`` documents.
"""

from __future__ import annotations

from enum import StrEnum


class IntentType(StrEnum):
    """What a command is for."""

    CONTROL = "control"
    QUERY = "query"
    MONITOR = "monitor"


class ExecutionMode(StrEnum):
    """Whether a command completes inline or reports completion later."""

    SYNC = "sync"
    ASYNC = "async"


class EmissionType(StrEnum):
    """How often a telemetry stream is emitted."""

    PERIODIC = "periodic"
    ON_CHANGE = "onChange"
    ON_DEMAND = "onDemand"


INTERFACE_TYPE = "Interface"
