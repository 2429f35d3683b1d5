"""Extension layer — lifecycle hooks via pluggy.

Discovery: entry_points (pip-installed) in the ``marketctl.plugins`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from marketctl.plugins.hookspecs import hookimpl
from marketctl.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
