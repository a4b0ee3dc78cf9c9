"""
Module loader for girlink.

Reads GIR modules from the file system, follows their dependencies and
optionally resolves version conflicts (e.g. Gtk-3.0 next to Gtk-4.0).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .config import GenerateConfig
from .conflicts import ConfigStore, ConflictResolver, Prompter
from .errors import ConfigError
from .grouping import group_modules
from .ir import ModuleGroup, ResolvedModule
from .locator import find_modules
from .registry import ModuleRegistry

logger = logging.getLogger(__name__)


@dataclass
class ModulesResult:
    grouped: dict[str, ModuleGroup] = field(default_factory=dict)
    loaded: list[ResolvedModule] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


@dataclass
class ResolvedModulesResult:
    """
    Modules taking part in a run.

    Attributes:
        keep: Modules to generate for
        grouped: ``keep`` grouped by namespace
        ignore: Package names left out
        failed: Names without a GIR document
        inconsistencies: (kept module, discarded dependency) pairs
    """

    keep: list[ResolvedModule] = field(default_factory=list)
    grouped: dict[str, ModuleGroup] = field(default_factory=dict)
    ignore: list[str] = field(default_factory=list)
    failed: set[str] = field(default_factory=set)
    inconsistencies: list[tuple[str, str]] = field(default_factory=list)


class ModuleLoader:
    """Entry point for discovering, loading and filtering GIR modules."""

    def __init__(self, config: GenerateConfig, registry: ModuleRegistry | None = None):
        self.config = config
        self.registry = registry or ModuleRegistry(config.gir_directories)

    def find_modules(self, modules: Iterable[str], ignore: Iterable[str] = ()) -> list[str]:
        """Find package names for ``modules``; wildcards like ``Gtk*`` or ``*`` are allowed."""
        return find_modules(modules, self.config.gir_directories, ignore)

    def get_modules(self, modules: Iterable[str], ignore: Iterable[str] = ()) -> ModulesResult:
        """Load matching modules and their dependencies without asking anything."""
        ignore = list(ignore)
        found = self.find_modules(modules, ignore)
        result = self.registry.load(found, ignore)
        return ModulesResult(
            grouped=group_modules(result.loaded),
            loaded=result.loaded,
            failed=sorted(result.failed),
        )

    def get_modules_resolved(
        self,
        modules: Iterable[str],
        ignore: Iterable[str] = (),
        skip_conflict_prompt: bool = True,
        prompter: Prompter | None = None,
        store: ConfigStore | None = None,
    ) -> ResolvedModulesResult:
        """
        Load matching modules and drop the ones the user does not want.

        With ``skip_conflict_prompt`` every loaded module is kept, conflicting
        versions included. Otherwise each conflict is resolved through
        ``prompter``, and discarding a version can discard its dependents too.

        Raises:
            ConfigError: If prompting is requested without a prompter
        """
        ignore = list(ignore)
        if not skip_conflict_prompt and prompter is None:
            raise ConfigError("Resolving version conflicts interactively requires a prompter")

        found = self.find_modules(modules, ignore)
        result = self.registry.load(found, ignore)

        inconsistencies: list[tuple[str, str]] = []
        if skip_conflict_prompt:
            keep = result.loaded
        else:
            assert prompter is not None
            resolved = ConflictResolver(prompter, store).resolve(
                group_modules(result.loaded), ignore
            )
            keep = resolved.keep
            ignore = resolved.ignore
            inconsistencies = resolved.inconsistencies

        return ResolvedModulesResult(
            keep=keep,
            grouped=group_modules(keep),
            ignore=ignore,
            failed=result.failed,
            inconsistencies=inconsistencies,
        )
