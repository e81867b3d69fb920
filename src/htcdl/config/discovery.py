"""Locating and reading ``htcdl.toml``.

Lookup order for the config file:

1. an explicit path (``--config``)
2. ``$HTCDL_CONFIG``
3. the first ``htcdl.toml`` in the start directory or any of its parents

A file that exists but does not parse, or whose sections do not validate,
is a :class:`ConfigError`; a missing file just means code defaults.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from htcdl.config.models import HtcConfig

CONFIG_FILENAME = "htcdl.toml"
CONFIG_ENV_VAR = "HTCDL_CONFIG"


class ConfigError(click.ClickException):
    """An ``htcdl.toml`` file that cannot be used."""


def resolve_config(explicit: str | Path | None = None, start: Path | None = None) -> Path | None:
    """The config file to load, or None. An explicit path that is not a file is ignored."""
    if explicit:
        path = Path(explicit)
        return path if path.is_file() else None
    return find_config(start)


def find_config(start: Path | None = None) -> Path | None:
    """``$HTCDL_CONFIG`` if set, else walk up from *start* (default: cwd)."""
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        path = Path(from_env)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> HtcConfig:
    """Validated config from *path* (discovered from *cwd* when omitted).

    Sections the file leaves out keep their defaults; use
    ``model_dump(exclude_unset=True)`` to recover only what the file set.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return HtcConfig()

    try:
        data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    try:
        return HtcConfig.model_validate(data)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors(include_url=False)
        )
        raise ConfigError(f"Invalid settings in {path}: {problems}") from exc
