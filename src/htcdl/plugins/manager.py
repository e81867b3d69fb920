"""Finding and calling htcdl plugins.

Plugins come from the ``htcdl.plugins`` entry-point group or are handed to
:meth:`PluginManager.register_plugin` by the caller. Each manager owns its
own pluggy registry; nothing is shared across managers.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any

import pluggy

from htcdl.plugins.hookspecs import HtcdlHookSpec

if TYPE_CHECKING:
    from htcdl.validation.orchestrator import Check

PROJECT_NAME = "htcdl"
ENTRY_POINT_GROUP = "htcdl.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """A pluggy registry loaded with the htcdl hook specifications."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(HtcdlHookSpec)
        self._loaded: bool = False

    @property
    def is_loaded(self) -> bool:
        """True once :meth:`discover_and_load` has run."""
        return self._loaded

    def discover_and_load(self) -> list[str]:
        """Register installed plugins and return every registered name.

        A broken distribution is logged and skipped; validation still runs.
        """
        try:
            self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        except Exception:
            logger.warning("Loading %s entry points failed", ENTRY_POINT_GROUP, exc_info=True)
        self._instantiate_classes()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        name = name or type(plugin).__name__
        self._pm.register(plugin, name=name)
        logger.debug("Registered plugin: %s", name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def list_plugin_names(self) -> list[str]:
        return [self._name(p) for p in self._pm.get_plugins()]

    def collect_checks(self) -> list[Check]:
        """Every extra check returned by a ``register_checks`` implementation.

        Implementations are asked one at a time so that a plugin which raises
        costs only its own checks. Non-callables are dropped with a warning.
        """
        checks: list[Check] = []
        for impl in self._pm.hook.register_checks.get_hookimpls():
            try:
                contributed = impl.function()
            except Exception:
                logger.warning("Plugin %s failed to register checks", impl.plugin_name, exc_info=True)
                continue
            for check in contributed or ():
                if callable(check):
                    checks.append(check)
                else:
                    logger.warning("Plugin %s returned a non-callable check: %r", impl.plugin_name, check)
        return checks

    def dispatch(self, hook_name: str, **payload: Any) -> None:
        """Call *hook_name* on every plugin. Plugin exceptions propagate."""
        getattr(self._pm.hook, hook_name)(**payload)

    def _name(self, plugin: object) -> str:
        return self._pm.get_name(plugin) or type(plugin).__name__

    def _instantiate_classes(self) -> None:
        """Swap plugin classes registered by entry points for instances.

        Hooks on a registered class would be called without ``self``.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Could not instantiate plugin %s", name, exc_info=True)
                continue
            self._pm.register(instance, name=name)
