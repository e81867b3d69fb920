"""Sections of ``htcdl.toml``, with every default baked in here.

The file only needs the keys it overrides::

    [validation]
    expected_context = "dtmi:acme:context;1"
    check_reachability = false

    [plugins]
    enabled = false
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from htcdl.domain.ids import HTC_CONTEXT


class ValidationConfig(BaseModel):
    """[validation] — switches for the built-in checks and for warnings."""

    model_config = {"frozen": True}

    expected_context: str = HTC_CONTEXT
    check_action_events: bool = True
    check_reachability: bool = True
    warn_unused: bool = True


class PluginsConfig(BaseModel):
    """[plugins]"""

    model_config = {"frozen": True}

    enabled: bool = True


class HtcConfig(BaseModel):
    model_config = {"frozen": True}

    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
