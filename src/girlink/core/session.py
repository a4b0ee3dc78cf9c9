"""
Resolution session: one girlink run and the symbols it produced.
"""

from __future__ import annotations

import logging

from .config import GenerateConfig
from .conflicts import ConfigStore, Prompter
from .ir import ResolvedModule
from .module_loader import ModuleLoader, ResolvedModulesResult
from .symtable import ModuleSymbols, SymbolTable

logger = logging.getLogger(__name__)


class ResolutionSession:
    """
    Owns the loader, the result and the symbol table of a single run.

    Sessions never share symbols, so repeated runs in one process start
    from an empty table.
    """

    def __init__(
        self,
        config: GenerateConfig,
        loader: ModuleLoader | None = None,
        symbols: SymbolTable | None = None,
    ):
        self.config = config
        self.loader = loader or ModuleLoader(config)
        self.symbols = symbols if symbols is not None else SymbolTable()
        self.result: ResolvedModulesResult | None = None

    def resolve(
        self,
        prompter: Prompter | None = None,
        store: ConfigStore | None = None,
    ) -> ResolvedModulesResult:
        """Discover, load and filter the configured modules, then index their symbols."""
        self.result = self.loader.get_modules_resolved(
            self.config.modules,
            self.config.ignore,
            skip_conflict_prompt=self.config.ignore_version_conflicts or prompter is None,
            prompter=prompter,
            store=store,
        )
        for module in self.result.keep:
            count = self.symbols.register_module(module)
            logger.debug(f"Registered {count} symbols of {module.package_name}")
        return self.result

    def module(self, package_name: str) -> ResolvedModule | None:
        if self.result is None:
            return None
        return next((m for m in self.result.keep if m.package_name == package_name), None)

    def symbols_for(self, package_name: str) -> ModuleSymbols | None:
        """Symbol lookups as seen from a kept module, None if it is not part of the run."""
        module = self.module(package_name)
        if module is None:
            return None
        return self.symbols.scope_for(module)
