"""
girlink - dependency and symbol resolution for GObject-Introspection documents.

Finds the GIR modules a generation run needs, settles version conflicts and
maps type references to version-qualified symbols.
"""

from ._version import get_version
from .core import ir
from .core.errors import ConfigError, ConflictResolutionError, GirlinkError, ParseError, PromptError

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "GirlinkError",
    "ParseError",
    "ConfigError",
    "ConflictResolutionError",
    "PromptError",
]
