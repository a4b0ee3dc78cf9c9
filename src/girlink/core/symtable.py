"""
Version-qualified symbol table for girlink.

Every key carries the package version, e.g. ``Gtk-3.0.Gtk.Window``, so that
Gtk-3.0 and Gtk-4.0 types never collide. A table belongs to one resolution
session; separate runs use separate tables.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from .ir import GirElement, ResolvedModule

logger = logging.getLogger(__name__)


def module_dependencies(module: ResolvedModule) -> list[str]:
    """Direct dependencies first, then the remaining transitive ones in sorted order."""
    direct = list(dict.fromkeys(module.dependencies))
    rest = sorted(set(module.transitive_dependencies) - set(direct))
    return direct + rest


@dataclass
class SymbolTable:
    """
    Symbol table mapping version-qualified keys to GIR elements.

    Tracks which module registered each key to help error reporting.
    """

    items: dict[str, GirElement] = field(default_factory=dict)
    symbol_sources: dict[str, str] = field(default_factory=dict)

    def resolve_key(
        self,
        dependencies: Sequence[str],
        reference: str,
        owner_package_name: str,
        owner_namespace: str,
    ) -> str | None:
        """
        Compute the key for ``reference`` as seen from the owner module.

        Args:
            dependencies: Package names the owner depends on
            reference: Bare or qualified type name, e.g. ``Window`` or ``Gdk.Window``
            owner_package_name: E.g. ``Gtk-3.0``
            owner_namespace: E.g. ``Gtk``

        Returns:
            E.g. ``Gtk-3.0.Gtk.Window``, or None if the namespace of a qualified
            reference is not among the dependencies
        """
        if reference.startswith(owner_package_name + "."):
            return reference

        if reference.startswith(owner_namespace + "."):
            return f"{owner_package_name}.{reference}"

        if "." not in reference:
            return f"{owner_package_name}.{owner_namespace}.{reference}"

        namespace = reference.split(".", 1)[0]
        package_name = next(
            (dep for dep in dependencies if dep.startswith(namespace + "-")),
            None,
        )
        if package_name is None:
            logger.warning(
                f"Could not find package name for namespace '{namespace}' of '{reference}' "
                f"in '{owner_package_name}'"
            )
            return None
        return f"{package_name}.{reference}"

    def get(
        self,
        dependencies: Sequence[str],
        reference: str,
        owner_package_name: str,
        owner_namespace: str,
    ) -> GirElement | None:
        key = self.resolve_key(dependencies, reference, owner_package_name, owner_namespace)
        if key is None:
            return None
        return self.items.get(key)

    def get_by_key(self, key: str) -> GirElement | None:
        return self.items.get(key)

    def set(
        self,
        dependencies: Sequence[str],
        reference: str,
        element: GirElement,
        owner_package_name: str,
        owner_namespace: str,
    ) -> None:
        """Store ``element`` under the key of ``reference``; no-op if there is none."""
        key = self.resolve_key(dependencies, reference, owner_package_name, owner_namespace)
        if key is None:
            return
        self.items[key] = element
        self.symbol_sources[key] = owner_package_name

    def scope(
        self, package_name: str, namespace: str, dependencies: Sequence[str] = ()
    ) -> ModuleSymbols:
        """Bind the table to one module."""
        return ModuleSymbols(
            table=self,
            package_name=package_name,
            namespace=namespace,
            dependencies=list(dependencies),
        )

    def scope_for(self, module: ResolvedModule) -> ModuleSymbols:
        return self.scope(module.package_name, module.namespace, module_dependencies(module))

    def register_module(self, module: ResolvedModule) -> int:
        """Add every top-level element of ``module``; returns how many were added."""
        symbols = self.scope_for(module)
        for element in module.module.elements:
            symbols.set(element.name, element)
        return len(module.module.elements)

    def keys(self) -> list[str]:
        return list(self.items)

    def __contains__(self, key: object) -> bool:
        return key in self.items

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[str]:
        return iter(self.items)


@dataclass
class ModuleSymbols:
    """
    The symbol table as seen from one module.

    ``dependencies`` may be passed per call to override the module's own list.
    """

    table: SymbolTable
    package_name: str
    namespace: str
    dependencies: list[str] = field(default_factory=list)

    def _deps(self, dependencies: Sequence[str] | None) -> Sequence[str]:
        return self.dependencies if dependencies is None else dependencies

    def key(self, reference: str, dependencies: Sequence[str] | None = None) -> str | None:
        return self.table.resolve_key(
            self._deps(dependencies), reference, self.package_name, self.namespace
        )

    def get(self, reference: str, dependencies: Sequence[str] | None = None) -> GirElement | None:
        return self.table.get(
            self._deps(dependencies), reference, self.package_name, self.namespace
        )

    def set(
        self, reference: str, element: GirElement, dependencies: Sequence[str] | None = None
    ) -> None:
        self.table.set(
            self._deps(dependencies), reference, element, self.package_name, self.namespace
        )
