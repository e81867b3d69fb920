"""HtcSettings — one frozen object built from every configuration layer.

Highest priority first:

1. keyword arguments from the CLI (``--json``, ``--no-plugins``, ``--context``...)
2. ``HTCDL_*`` environment variables, ``__`` between section and key
   (``HTCDL_VALIDATION__CHECK_REACHABILITY=false``)
3. the ``htcdl.toml`` chosen by :func:`~htcdl.config.discovery.resolve_config`
4. defaults from :mod:`htcdl.config.models`
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from htcdl.config.discovery import load_config, resolve_config
from htcdl.config.models import PluginsConfig, ValidationConfig

# The TOML path is chosen before construction and read back by
# settings_customise_sources, which pydantic-settings calls as a classmethod.
_toml_path: ContextVar[Path | None] = ContextVar("_toml_path", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Only the keys the file actually sets, already validated by HtcConfig."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = (
            load_config(toml_path).model_dump(exclude_unset=True) if toml_path else {}
        )

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


class HtcSettings(BaseSettings):
    """Resolved settings for one CLI invocation.

    Attributes:
        config_path: The TOML file that was loaded, or None.
        json_output: Print results as JSON.
        quiet: Print only the essentials of each result.
        verbose: Debug logging plus timing spans in ``meta``.
        log_json: Log JSON lines instead of console text.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "HTCDL_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, TomlSettingsSource(settings_cls, _toml_path.get()))

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **overrides: Any,
    ) -> HtcSettings:
        """Build settings for a CLI run.

        *overrides* are field values from global flags; section overrides
        are partial dicts (``plugins={"enabled": False}``) merged over the
        lower layers key by key.
        """
        toml_path = resolve_config(config_path, start)
        token = _toml_path.set(toml_path)
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _toml_path.reset(token)
