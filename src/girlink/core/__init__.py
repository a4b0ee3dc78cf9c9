"""Core girlink functionality: IR, parser, locator, registry, conflict resolution, symbols."""

from . import ir
from .config import GenerateConfig, YamlConfigStore, load_config
from .conflicts import ConflictResolver, ConflictState, GroupConflict, Prompter, Question
from .errors import (
    ConfigError,
    ConflictResolutionError,
    GirlinkError,
    ParseError,
    PromptError,
)
from .grouping import group_modules
from .locator import find_modules
from .module_loader import ModuleLoader, ModulesResult, ResolvedModulesResult
from .registry import ModuleRegistry
from .session import ResolutionSession
from .symtable import ModuleSymbols, SymbolTable

__all__ = [
    "ir",
    "GirlinkError",
    "ParseError",
    "ConfigError",
    "ConflictResolutionError",
    "PromptError",
    "GenerateConfig",
    "YamlConfigStore",
    "load_config",
    "find_modules",
    "ModuleRegistry",
    "group_modules",
    "ConflictResolver",
    "ConflictState",
    "GroupConflict",
    "Prompter",
    "Question",
    "ModuleLoader",
    "ModulesResult",
    "ResolvedModulesResult",
    "ResolutionSession",
    "SymbolTable",
    "ModuleSymbols",
]
