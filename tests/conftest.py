"""Shared pytest fixtures for girlink tests."""

from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from girlink.core.conflicts import Question
from girlink.core.ir import GirElement, GirModule, ResolvedModule, ResolveType

GIR_TEMPLATE = """<?xml version="1.0"?>
<repository version="1.2"
            xmlns="http://www.gtk.org/introspection/core/1.0"
            xmlns:c="http://www.gtk.org/introspection/c/1.0"
            xmlns:glib="http://www.gtk.org/introspection/glib/1.0">
{includes}
  <namespace name="{namespace}" version="{version}" c:identifier-prefixes="{namespace}">
{body}
  </namespace>
</repository>
"""


def make_gir(
    namespace: str,
    version: str,
    includes: Iterable[str] = (),
    body: str = "",
) -> str:
    """Render a minimal GIR document."""
    include_lines = []
    for package_name in includes:
        name, _, dep_version = package_name.partition("-")
        include_lines.append(f'  <include name="{name}" version="{dep_version}"/>')
    return GIR_TEMPLATE.format(
        namespace=namespace,
        version=version,
        includes="\n".join(include_lines),
        body=body,
    )


@pytest.fixture
def gir_dir(tmp_path: Path) -> Path:
    """Empty directory for .gir files."""
    directory = tmp_path / "gir-1.0"
    directory.mkdir()
    return directory


@pytest.fixture
def write_gir(gir_dir: Path) -> Callable[..., Path]:
    """Write ``<Namespace>-<Version>.gir`` into ``gir_dir``."""

    def _write(
        package_name: str,
        includes: Iterable[str] = (),
        body: str = "",
        directory: Path | None = None,
    ) -> Path:
        namespace, _, version = package_name.partition("-")
        path = (directory or gir_dir) / f"{package_name}.gir"
        path.write_text(make_gir(namespace, version, includes, body), encoding="utf-8")
        return path

    return _write


def make_module(
    package_name: str,
    dependencies: Iterable[str] = (),
    elements: Iterable[GirElement] = (),
    resolved_by: ResolveType = ResolveType.EXPLICIT,
    transitive: Iterable[str] | None = None,
) -> ResolvedModule:
    """Build a ResolvedModule without touching the file system."""
    namespace, _, version = package_name.partition("-")
    deps = list(dependencies)
    return ResolvedModule(
        module=GirModule(
            namespace=namespace,
            version=version,
            dependencies=deps,
            elements=list(elements),
        ),
        resolved_by=resolved_by,
        transitive_dependencies=frozenset(deps if transitive is None else transitive),
    )


class ScriptedPrompter:
    """Prompter answering from a fixed script and recording every question."""

    def __init__(self, answers: Iterable[str | None] = ()):
        self.answers = list(answers)
        self.questions: list[Question] = []
        self.messages: list[str] = []

    def ask(self, question: Question) -> str | None:
        self.questions.append(question)
        if not self.answers:
            raise AssertionError(f"Unexpected question: {question.message}")
        return self.answers.pop(0)

    def notify(self, message: str) -> None:
        self.messages.append(message)


class MemoryConfigStore:
    """ConfigStore keeping the ignore list in memory."""

    def __init__(self, path: Path = Path(".girlink.yml")):
        self._path = path
        self.ignored: list[str] = []

    @property
    def config_path(self) -> Path:
        return self._path

    def add_to_ignore(self, names: Iterable[str]) -> None:
        self.ignored.extend(n for n in names if n not in self.ignored)


@pytest.fixture
def module_factory() -> Callable[..., ResolvedModule]:
    """Factory for in-memory ResolvedModules."""
    return make_module


@pytest.fixture
def scripted_prompter() -> Callable[..., ScriptedPrompter]:
    """Factory for prompters answering from a script."""
    return ScriptedPrompter


@pytest.fixture
def config_store(tmp_path: Path) -> MemoryConfigStore:
    return MemoryConfigStore(tmp_path / ".girlink.yml")
