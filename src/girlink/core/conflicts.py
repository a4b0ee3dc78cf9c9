"""
Interactive resolution of version conflicts.

When several versions of one namespace are loaded (e.g. Gtk-3.0 and Gtk-4.0)
the user picks which ones to keep. Discarding a version can orphan modules
that depend on it; the user then decides whether those are discarded too.

Each conflicted group runs a small state machine::

    selecting --<version>--> confirming_cascade --Yes/No--> committed
        ^                            |
        +---------- Go back ---------+
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Protocol

from .errors import ConflictResolutionError, PromptError
from .ir import ModuleGroup, ResolvedModule

logger = logging.getLogger(__name__)

ALL = "All"
YES = "Yes"
NO = "No"
GO_BACK = "Go back"

# Stands for any version choice in the transition table
VERSION_CHOICE = "<version>"


class ConflictState(StrEnum):
    SELECTING = "selecting"
    CONFIRMING_CASCADE = "confirming_cascade"
    COMMITTED = "committed"


TRANSITIONS: dict[tuple[ConflictState, str], ConflictState] = {
    (ConflictState.SELECTING, VERSION_CHOICE): ConflictState.CONFIRMING_CASCADE,
    (ConflictState.CONFIRMING_CASCADE, YES): ConflictState.COMMITTED,
    (ConflictState.CONFIRMING_CASCADE, NO): ConflictState.COMMITTED,
    (ConflictState.CONFIRMING_CASCADE, GO_BACK): ConflictState.SELECTING,
}


@dataclass(frozen=True)
class Question:
    """A single-choice question handed to the prompter."""

    name: str
    message: str
    choices: tuple[str, ...]


class Prompter(Protocol):
    """Performs the actual user interaction."""

    def ask(self, question: Question) -> str | None:
        """Return exactly one of ``question.choices``, or None if nothing was chosen."""
        ...

    def notify(self, message: str) -> None:
        """Show an informational message."""
        ...


class ConfigStore(Protocol):
    """Persists package names to ignore in future runs."""

    @property
    def config_path(self) -> Path: ...

    def add_to_ignore(self, names: Iterable[str]) -> None: ...


@dataclass(frozen=True)
class VersionAnswer:
    selected: tuple[str, ...]
    unselected: tuple[str, ...]


@dataclass
class ConflictResult:
    """
    Outcome of conflict resolution.

    Attributes:
        keep: Modules taking part in the run, in discovery order
        ignore: Discarded package names, including the ones passed in
        inconsistencies: (kept module, discarded dependency) pairs left
            behind when the user chose not to discard dependents
    """

    keep: list[ResolvedModule] = field(default_factory=list)
    ignore: list[str] = field(default_factory=list)
    inconsistencies: list[tuple[str, str]] = field(default_factory=list)


def find_modules_depending_on(
    groups: Mapping[str, ModuleGroup],
    package_names: Iterable[str],
    ignore: Iterable[str] = (),
) -> list[ResolvedModule]:
    """
    Find loaded modules that declare a direct dependency on any of ``package_names``.

    Modules in ``ignore`` and the named packages themselves are left out.
    """
    targets = set(package_names)
    skipped = set(ignore) | targets
    dependents: list[ResolvedModule] = []
    for group in groups.values():
        for module in group.modules:
            if module.package_name in skipped or module in dependents:
                continue
            if any(dep in targets for dep in module.dependencies):
                dependents.append(module)
    return dependents


class GroupConflict:
    """State machine for one conflicted group."""

    def __init__(
        self,
        group: ModuleGroup,
        groups: Mapping[str, ModuleGroup],
        ignore: Iterable[str] = (),
    ):
        self.group = group
        self.groups = groups
        self.ignore = list(ignore)
        self.state = ConflictState.SELECTING
        self.selection: VersionAnswer | None = None
        self.reverse_dependents: list[ResolvedModule] = []
        self.cascade = False

    def question(self) -> Question:
        """Question to ask in the current state."""
        if self.state is ConflictState.SELECTING:
            return Question(
                name=self.group.namespace,
                message=(
                    f"Multiple versions of '{self.group.namespace}' found, "
                    "which one do you want to use?"
                ),
                choices=(ALL, *self.group.package_names),
            )
        if self.state is ConflictState.CONFIRMING_CASCADE:
            if self.reverse_dependents:
                listing = "\n".join(f"- {m.package_name}" for m in self.reverse_dependents)
                return Question(
                    name="continue",
                    message=(
                        "The following modules have the ignored modules as dependencies:\n"
                        f"{listing}\nDo you want to ignore them too?"
                    ),
                    choices=(YES, NO, GO_BACK),
                )
            return Question(
                name="continue",
                message="No dependencies found on the ignored modules, do you want to continue?",
                choices=(YES, GO_BACK),
            )
        raise ConflictResolutionError(f"Conflict for '{self.group.namespace}' is already resolved")

    def answer(self, choice: str | None) -> ConflictState:
        """Apply the prompter's answer and return the new state."""
        question = self.question()
        if not choice or choice not in question.choices:
            raise PromptError(f"No valid answer for '{question.name}': {choice!r}")

        if self.state is ConflictState.SELECTING:
            next_state = TRANSITIONS[(self.state, VERSION_CHOICE)]
            self.selection = self._version_answer(choice, question.choices)
            self.reverse_dependents = find_modules_depending_on(
                self.groups, self.selection.unselected, self.ignore
            )
        else:
            next_state = TRANSITIONS[(self.state, choice)]
            if next_state is ConflictState.SELECTING:
                self.selection = None
                self.reverse_dependents = []
            else:
                self.cascade = choice == YES and bool(self.reverse_dependents)

        logger.debug(f"{self.group.namespace}: {self.state} --{choice}--> {next_state}")
        self.state = next_state
        return next_state

    def outcome(self) -> tuple[list[ResolvedModule], list[str]]:
        """Modules to keep and package names to ignore once committed."""
        if self.state is not ConflictState.COMMITTED or self.selection is None:
            raise ConflictResolutionError(f"Conflict for '{self.group.namespace}' is not resolved")

        keep = [m for m in self.group.modules if m.package_name in self.selection.selected]
        if not keep:
            raise ConflictResolutionError("Module not found!")

        ignore: list[str] = []
        if self.cascade:
            ignore.extend(m.package_name for m in self.reverse_dependents)
        ignore.extend(
            name for name in self.group.package_names if name not in self.selection.selected
        )
        return keep, ignore

    @staticmethod
    def _version_answer(selected: str, choices: tuple[str, ...]) -> VersionAnswer:
        versions = tuple(c for c in choices if c != ALL)
        if selected == ALL:
            return VersionAnswer(selected=versions, unselected=())
        return VersionAnswer(
            selected=(selected,),
            unselected=tuple(v for v in versions if v != selected),
        )


class ConflictResolver:
    """Runs the conflict protocol for every group, asking through a prompter."""

    def __init__(self, prompter: Prompter, store: ConfigStore | None = None):
        self.prompter = prompter
        self.store = store

    def resolve_group(self, conflict: GroupConflict) -> tuple[list[ResolvedModule], list[str]]:
        while conflict.state is not ConflictState.COMMITTED:
            conflict.answer(self.prompter.ask(conflict.question()))
        return conflict.outcome()

    def resolve(
        self,
        groups: Mapping[str, ModuleGroup],
        ignore: Iterable[str] = (),
    ) -> ConflictResult:
        """
        Decide which modules to keep.

        Args:
            groups: Loaded modules grouped by namespace
            ignore: Package names already ignored

        Returns:
            ConflictResult with the kept modules and the full ignore list

        Raises:
            PromptError: If the prompter gives no valid answer
            ConflictResolutionError: If an answer matches no group member
        """
        ignored = list(dict.fromkeys(ignore))
        already_ignored = set(ignored)
        keep: list[ResolvedModule] = []

        for group in groups.values():
            members = [m for m in group.modules if m.package_name not in ignored]
            if not members:
                continue
            current = ModuleGroup(namespace=group.namespace, modules=members)

            if not current.has_conflict:
                keep.extend(members)
                continue

            group_keep, group_ignore = self.resolve_group(GroupConflict(current, groups, ignored))
            keep.extend(group_keep)
            for name in group_ignore:
                if name not in ignored:
                    ignored.append(name)

        # dependents discarded by a later group may already have been kept
        keep = [m for m in keep if m.package_name not in ignored]
        inconsistencies = self._find_inconsistencies(keep, ignored)

        if ignored:
            listing = "\n".join(f"- {name}" for name in ignored)
            self.prompter.notify(f"The following modules will be ignored:\n{listing}")
        # only ask when this run discarded something new
        if any(name not in already_ignored for name in ignored):
            self._ask_add_to_config(ignored)

        return ConflictResult(keep=keep, ignore=ignored, inconsistencies=inconsistencies)

    def _find_inconsistencies(
        self, keep: list[ResolvedModule], ignored: list[str]
    ) -> list[tuple[str, str]]:
        found: list[tuple[str, str]] = []
        for module in keep:
            for dep in module.dependencies:
                if dep in ignored:
                    logger.warning(
                        f'"{module.package_name}" is kept but its dependency "{dep}" is ignored, '
                        f"types from {dep} will be unresolved"
                    )
                    found.append((module.package_name, dep))
        return found

    def _ask_add_to_config(self, ignored: list[str]) -> None:
        if self.store is None:
            return
        question = Question(
            name="addToIgnore",
            message=(
                "Do you want to add the ignored modules to your config so that you "
                f"don't need to select them again next time?\n  Config path: '{self.store.config_path}'"
            ),
            choices=(NO, YES),
        )
        choice = self.prompter.ask(question)
        if choice not in question.choices:
            raise PromptError(f"No valid answer for '{question.name}': {choice!r}")
        if choice == YES:
            self.store.add_to_ignore(ignored)
            logger.info(f"Added ignored modules to '{self.store.config_path}'")
