"""Digital Twin Model Identifier (DTMI) grammar.

Grammar::

    dtmi ":" segment (":" segment)* ";" major ("." minor)*

A segment starts with a letter and continues with letters, digits or
underscores. The major version has no leading zero and is never zero.

INVARIANT: Checking never raises. Malformed input is an ordinary negative
result carrying a reason.
"""

from __future__ import annotations

import re
from typing import Any

HTC_CONTEXT = "dtmi:htc:context;1"
DTMI_SCHEME = "dtmi"

DTMI_PATTERN = re.compile(
    r"^dtmi:[A-Za-z][A-Za-z0-9_]*(?::[A-Za-z][A-Za-z0-9_]*)*;[1-9][0-9]*(?:\.[0-9]+)*$"
)

_SEGMENT_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9_]*")
_MAJOR_PATTERN = re.compile(r"[1-9][0-9]*")
_MINOR_PATTERN = re.compile(r"[0-9]+")


def check_dtmi(value: Any) -> str | None:
    """Return ``None`` if *value* is a valid DTMI, else the reason it is not."""
    if not isinstance(value, str):
        return f"expected a string, got {type(value).__name__}"
    if DTMI_PATTERN.fullmatch(value):
        return None
    return _explain(value)


def is_valid_dtmi(value: Any) -> bool:
    """Check whether *value* matches the DTMI grammar."""
    return check_dtmi(value) is None


def _explain(value: str) -> str:
    prefix = f"{DTMI_SCHEME}:"
    if not value.startswith(prefix):
        return f"must start with '{prefix}'"

    path, sep, version = value[len(prefix) :].partition(";")
    if not sep:
        return "missing ';' version separator"
    if not path:
        return "missing path segments"

    for segment in path.split(":"):
        if not segment:
            return "empty path segment"
        if not _SEGMENT_PATTERN.fullmatch(segment):
            return f"segment '{segment}' must start with a letter and contain only letters, digits or '_'"

    if not version:
        return "missing version"
    major, *minors = version.split(".")
    if not _MAJOR_PATTERN.fullmatch(major):
        return f"major version '{major}' must be a positive integer without leading zeros"
    for minor in minors:
        if not _MINOR_PATTERN.fullmatch(minor):
            return f"version component '{minor}' must be numeric"

    # Anything the decomposition accepts but the pattern rejects (e.g. a trailing newline).
    return "DTMI format is invalid"
