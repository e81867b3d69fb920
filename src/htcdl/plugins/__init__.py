"""Extension layer — plugin system via pluggy.

INVARIANT: Plugin failures are warnings, never errors.
"""

from htcdl.plugins.hookspecs import hookimpl
from htcdl.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
