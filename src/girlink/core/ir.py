"""
Intermediate representation types for girlink.

GIR documents arrive parsed as ``GirModule`` records. The registry wraps each
one in a ``ResolvedModule`` snapshot that carries how it was pulled into the
run and its transitive dependency closure.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


def split_module_name(package_name: str) -> tuple[str, str]:
    """
    Split a package name into namespace and version.

    Example:
        >>> split_module_name("Gtk-3.0")
        ('Gtk', '3.0')
    """
    namespace, _, version = package_name.partition("-")
    return namespace, version


class ResolveType(StrEnum):
    """Why a module takes part in the run."""

    EXPLICIT = "explicit"  # requested by the user
    TRANSITIVE = "transitive"  # required by another module


class Dependency(BaseModel):
    """A declared dependency edge, e.g. ``GLib-2.0``."""

    namespace: str
    version: str
    package_name: str

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_package_name(cls, package_name: str) -> Dependency:
        namespace, version = split_module_name(package_name)
        return cls(namespace=namespace, version=version, package_name=package_name)


class GirElement(BaseModel):
    """
    A top-level element of a GIR namespace.

    Attributes:
        kind: Element tag (class, interface, record, enumeration, ...)
        name: Name inside the namespace, e.g. ``Window``
        c_type: C type or symbol name if declared
        parent: Parent class reference for classes, e.g. ``Gtk.Bin``
        implements: Interface references for classes
    """

    kind: str
    name: str
    c_type: str | None = None
    parent: str | None = None
    implements: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class GirModule(BaseModel):
    """
    A parsed GIR document.

    Attributes:
        namespace: Namespace identifier, e.g. ``Gtk``
        version: Namespace version, e.g. ``3.0``
        dependencies: Declared dependency package names in document order
        elements: Top-level elements of the namespace
        path: File the module was parsed from
    """

    namespace: str
    version: str
    dependencies: list[str] = Field(default_factory=list)
    elements: list[GirElement] = Field(default_factory=list)
    path: Path | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def package_name(self) -> str:
        return f"{self.namespace}-{self.version}"


@dataclass(frozen=True)
class ResolvedModule:
    """
    A loaded module plus its resolution origin.

    Equality and hashing use the package name only, which is unique within a
    run. Instances are snapshots: recomputing the transitive closure produces
    a new instance.
    """

    module: GirModule = field(compare=False)
    resolved_by: ResolveType = field(default=ResolveType.EXPLICIT, compare=False)
    transitive_dependencies: frozenset[str] = field(default_factory=frozenset, compare=False)
    package_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "package_name", self.module.package_name)

    @property
    def namespace(self) -> str:
        return self.module.namespace

    @property
    def dependencies(self) -> list[str]:
        return self.module.dependencies

    def with_transitive_dependencies(self, names: frozenset[str]) -> ResolvedModule:
        return replace(self, transitive_dependencies=names)


@dataclass
class ModuleGroup:
    """All loaded versions of one namespace, e.g. ``Gtk-3.0`` and ``Gtk-4.0``."""

    namespace: str
    modules: list[ResolvedModule] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.namespace.lower()

    @property
    def has_conflict(self) -> bool:
        return len(self.modules) >= 2

    @property
    def package_names(self) -> list[str]:
        return [m.package_name for m in self.modules]
