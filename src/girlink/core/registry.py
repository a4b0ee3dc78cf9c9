"""
Module registry for girlink.

Loads GIR modules and, pass by pass, the modules they transitively depend on
until a pass finds nothing new.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .ir import Dependency, GirModule, ResolvedModule, ResolveType
from .locator import GIR_SUFFIX, find_file_in_dirs
from .parser import parse_gir_file

logger = logging.getLogger(__name__)

DocumentParser = Callable[[Path], GirModule]


@dataclass(frozen=True)
class LoadPass:
    """
    Snapshot after one loading pass.

    Attributes:
        seed: Names the pass was asked to load
        loaded: All modules loaded so far, in load order
        failed: Names without a document
        aliased: Names whose document declares a different package
        discovered: Whether this pass loaded at least one new module
    """

    seed: tuple[str, ...] = ()
    loaded: tuple[ResolvedModule, ...] = ()
    failed: frozenset[str] = frozenset()
    aliased: frozenset[str] = frozenset()
    discovered: bool = False

    @property
    def loaded_names(self) -> set[str]:
        return {m.package_name for m in self.loaded}


@dataclass
class LoadResult:
    loaded: list[ResolvedModule] = field(default_factory=list)
    failed: set[str] = field(default_factory=set)


class ModuleRegistry:
    """Reads modules from the search directories and tracks their dependency edges."""

    def __init__(self, directories: Iterable[Path], parse: DocumentParser = parse_gir_file):
        self.directories = [Path(d) for d in directories]
        self.parse = parse
        # depending package name -> declared dependencies
        self.dependency_map: dict[str, list[Dependency]] = {}

    def load_document(self, package_name: str) -> GirModule | None:
        """Locate and parse the document for ``package_name``, None if there is none."""
        path = find_file_in_dirs(self.directories, package_name + GIR_SUFFIX)
        if path is None:
            return None
        module = self.parse(path)
        self.dependency_map[module.package_name] = [
            Dependency.from_package_name(dep) for dep in module.dependencies
        ]
        return module

    def transitive_dependencies(self, package_name: str) -> frozenset[str]:
        """
        Collect every package ``package_name`` depends on, directly or not.

        The walk never revisits a name, so cycles terminate, and the root
        itself is never part of the result.
        """
        visited: set[str] = {package_name}
        result: list[str] = []

        def walk(name: str) -> None:
            for dep in self.dependency_map.get(name, []):
                if dep.package_name in visited:
                    continue
                visited.add(dep.package_name)
                result.append(dep.package_name)
                walk(dep.package_name)

        walk(package_name)
        return frozenset(result)

    def load_pass(
        self,
        seed: Iterable[str],
        previous: LoadPass | None = None,
        resolved_by: ResolveType = ResolveType.EXPLICIT,
    ) -> LoadPass:
        """
        Load every name in ``seed`` that was not loaded, found missing or found aliased.

        Returns a new snapshot; ``previous`` is left untouched.
        """
        previous = previous or LoadPass()
        seed = tuple(seed)
        loaded = list(previous.loaded)
        loaded_names = previous.loaded_names
        failed = set(previous.failed)
        aliased = set(previous.aliased)
        discovered = False

        for package_name in seed:
            if package_name in loaded_names or package_name in failed or package_name in aliased:
                continue
            module = self.load_document(package_name)
            if module is None:
                logger.warning(f"No GIR file found for '{package_name}'!")
                failed.add(package_name)
                continue
            if module.package_name != package_name:
                logger.warning(
                    f"GIR file for '{package_name}' declares '{module.package_name}'"
                )
                aliased.add(package_name)
            if module.package_name in loaded_names:
                continue
            loaded.append(ResolvedModule(module=module, resolved_by=resolved_by))
            loaded_names.add(module.package_name)
            discovered = True

        return LoadPass(
            seed=seed,
            loaded=tuple(loaded),
            failed=frozenset(failed),
            aliased=frozenset(aliased),
            discovered=discovered,
        )

    def with_closures(self, snapshot: LoadPass) -> LoadPass:
        """Return ``snapshot`` with every module's transitive closure recomputed."""
        loaded = tuple(
            m.with_transitive_dependencies(self.transitive_dependencies(m.package_name))
            for m in snapshot.loaded
        )
        return LoadPass(
            seed=snapshot.seed,
            loaded=loaded,
            failed=snapshot.failed,
            aliased=snapshot.aliased,
            discovered=snapshot.discovered,
        )

    def load(self, requested: Iterable[str], ignore: Iterable[str] = ()) -> LoadResult:
        """
        Load the requested modules and all of their transitive dependencies.

        Missing documents are not fatal; they end up in ``failed``. A
        transitive dependency listed in ``ignore`` is still loaded, but a
        warning suggests ignoring its dependent as well.

        Args:
            requested: Package names requested by the user
            ignore: Package names the user wants to leave out

        Returns:
            LoadResult with loaded modules and missing names
        """
        ignored = set(ignore)
        warned: set[tuple[str, str]] = set()

        snapshot = self.load_pass(requested, resolved_by=ResolveType.EXPLICIT)
        while snapshot.discovered:
            snapshot = self.with_closures(snapshot)

            seed: dict[str, None] = {}
            for module in snapshot.loaded:
                for dep in sorted(module.transitive_dependencies):
                    if dep in ignored and (dep, module.package_name) not in warned:
                        warned.add((dep, module.package_name))
                        logger.warning(
                            f'Load dependency "{dep}" which is in the ignore list, '
                            f'if this should really be ignored also ignore "{module.package_name}"'
                        )
                    seed.setdefault(dep, None)

            snapshot = self.load_pass(seed, snapshot, ResolveType.TRANSITIVE)

        return LoadResult(loaded=list(snapshot.loaded), failed=set(snapshot.failed))
