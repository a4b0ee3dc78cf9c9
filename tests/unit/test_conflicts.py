"""Tests for interactive version conflict resolution."""

import pytest

from girlink.core.conflicts import (
    ALL,
    GO_BACK,
    NO,
    TRANSITIONS,
    VERSION_CHOICE,
    YES,
    ConflictResolver,
    ConflictState,
    GroupConflict,
    find_modules_depending_on,
)
from girlink.core.errors import ConflictResolutionError, PromptError
from girlink.core.grouping import group_modules


@pytest.fixture
def gtk_groups(module_factory):
    """Gtk-3.0 and Gtk-4.0, plus Foo-1.0 which needs Gtk-4.0."""
    return group_modules(
        [
            module_factory("Gtk-3.0", ["GLib-2.0"]),
            module_factory("Gtk-4.0", ["GLib-2.0"]),
            module_factory("Foo-1.0", ["Gtk-4.0"]),
            module_factory("GLib-2.0"),
        ]
    )


class TestTransitionTable:
    def test_table(self):
        assert TRANSITIONS == {
            (ConflictState.SELECTING, VERSION_CHOICE): ConflictState.CONFIRMING_CASCADE,
            (ConflictState.CONFIRMING_CASCADE, YES): ConflictState.COMMITTED,
            (ConflictState.CONFIRMING_CASCADE, NO): ConflictState.COMMITTED,
            (ConflictState.CONFIRMING_CASCADE, GO_BACK): ConflictState.SELECTING,
        }


class TestGroupConflict:
    def test_version_question(self, gtk_groups):
        conflict = GroupConflict(gtk_groups["gtk"], gtk_groups)

        question = conflict.question()

        assert question.name == "Gtk"
        assert question.choices == (ALL, "Gtk-3.0", "Gtk-4.0")
        assert "Multiple versions of 'Gtk'" in question.message

    def test_selecting_version_with_dependents_asks_cascade(self, gtk_groups):
        conflict = GroupConflict(gtk_groups["gtk"], gtk_groups)

        state = conflict.answer("Gtk-3.0")

        assert state is ConflictState.CONFIRMING_CASCADE
        assert conflict.selection.selected == ("Gtk-3.0",)
        assert conflict.selection.unselected == ("Gtk-4.0",)
        assert [m.package_name for m in conflict.reverse_dependents] == ["Foo-1.0"]
        question = conflict.question()
        assert question.choices == (YES, NO, GO_BACK)
        assert "- Foo-1.0" in question.message

    def test_selecting_version_without_dependents_asks_continue(self, gtk_groups):
        conflict = GroupConflict(gtk_groups["gtk"], gtk_groups)

        conflict.answer("Gtk-4.0")

        assert conflict.reverse_dependents == []
        assert conflict.question().choices == (YES, GO_BACK)

    def test_all_selects_every_member(self, module_factory):
        groups = group_modules(
            [module_factory("Gtk-2.0"), module_factory("Gtk-3.0"), module_factory("Gtk-4.0")]
        )
        conflict = GroupConflict(groups["gtk"], groups)

        conflict.answer(ALL)
        conflict.answer(YES)

        keep, ignore = conflict.outcome()
        assert [m.package_name for m in keep] == ["Gtk-2.0", "Gtk-3.0", "Gtk-4.0"]
        assert ignore == []

    def test_go_back_restores_selecting_state(self, gtk_groups):
        conflict = GroupConflict(gtk_groups["gtk"], gtk_groups)
        conflict.answer("Gtk-3.0")

        state = conflict.answer(GO_BACK)

        assert state is ConflictState.SELECTING
        assert conflict.selection is None
        assert conflict.reverse_dependents == []
        assert conflict.cascade is False
        assert conflict.question().choices == (ALL, "Gtk-3.0", "Gtk-4.0")
        with pytest.raises(ConflictResolutionError):
            conflict.outcome()

    def test_yes_cascades_to_dependents(self, gtk_groups):
        conflict = GroupConflict(gtk_groups["gtk"], gtk_groups)
        conflict.answer("Gtk-3.0")

        assert conflict.answer(YES) is ConflictState.COMMITTED

        keep, ignore = conflict.outcome()
        assert [m.package_name for m in keep] == ["Gtk-3.0"]
        assert ignore == ["Foo-1.0", "Gtk-4.0"]

    def test_no_keeps_dependents(self, gtk_groups):
        conflict = GroupConflict(gtk_groups["gtk"], gtk_groups)
        conflict.answer("Gtk-3.0")
        conflict.answer(NO)

        _, ignore = conflict.outcome()
        assert ignore == ["Gtk-4.0"]

    @pytest.mark.parametrize("answer", [None, "", "Gtk-5.0"])
    def test_invalid_version_answer(self, gtk_groups, answer):
        conflict = GroupConflict(gtk_groups["gtk"], gtk_groups)

        with pytest.raises(PromptError):
            conflict.answer(answer)
        assert conflict.state is ConflictState.SELECTING

    def test_invalid_cascade_answer(self, gtk_groups):
        conflict = GroupConflict(gtk_groups["gtk"], gtk_groups)
        conflict.answer("Gtk-4.0")

        # No is only offered when there are dependents
        with pytest.raises(PromptError):
            conflict.answer(NO)

    def test_selection_outside_members_is_fatal(self, gtk_groups):
        conflict = GroupConflict(gtk_groups["gtk"], gtk_groups)
        conflict.answer("Gtk-4.0")
        conflict.answer(YES)
        conflict.group.modules = [m for m in conflict.group.modules if m.package_name != "Gtk-4.0"]

        with pytest.raises(ConflictResolutionError, match="Module not found"):
            conflict.outcome()

    def test_question_after_commit_is_an_error(self, gtk_groups):
        conflict = GroupConflict(gtk_groups["gtk"], gtk_groups)
        conflict.answer("Gtk-4.0")
        conflict.answer(YES)

        with pytest.raises(ConflictResolutionError):
            conflict.question()

    def test_already_ignored_dependents_are_skipped(self, gtk_groups):
        conflict = GroupConflict(gtk_groups["gtk"], gtk_groups, ignore=["Foo-1.0"])

        conflict.answer("Gtk-3.0")

        assert conflict.reverse_dependents == []


def test_find_modules_depending_on(gtk_groups):
    dependents = find_modules_depending_on(gtk_groups, ["GLib-2.0"])

    assert [m.package_name for m in dependents] == ["Gtk-3.0", "Gtk-4.0"]
    assert find_modules_depending_on(gtk_groups, ["GLib-2.0"], ignore=["Gtk-3.0"])[0].package_name == "Gtk-4.0"
    assert find_modules_depending_on(gtk_groups, ["Foo-1.0"]) == []


class TestConflictResolver:
    def test_no_conflicts_no_prompts(self, module_factory, scripted_prompter, config_store):
        modules = [module_factory("Gtk-3.0", ["GLib-2.0"]), module_factory("GLib-2.0")]
        prompter = scripted_prompter()

        result = ConflictResolver(prompter, config_store).resolve(group_modules(modules))

        assert result.keep == modules
        assert result.ignore == []
        assert prompter.questions == []
        assert prompter.messages == []

    def test_cascade_yes(self, gtk_groups, scripted_prompter, config_store):
        prompter = scripted_prompter(["Gtk-3.0", YES, NO])

        result = ConflictResolver(prompter, config_store).resolve(gtk_groups)

        assert [m.package_name for m in result.keep] == ["Gtk-3.0", "GLib-2.0"]
        assert result.ignore == ["Foo-1.0", "Gtk-4.0"]
        assert result.inconsistencies == []
        assert len(prompter.messages) == 1
        assert "- Foo-1.0\n- Gtk-4.0" in prompter.messages[0]
        assert prompter.questions[-1].name == "addToIgnore"
        assert config_store.ignored == []

    def test_cascade_no_records_inconsistency(self, gtk_groups, scripted_prompter, config_store):
        prompter = scripted_prompter(["Gtk-3.0", NO, NO])

        result = ConflictResolver(prompter, config_store).resolve(gtk_groups)

        assert [m.package_name for m in result.keep] == ["Gtk-3.0", "Foo-1.0", "GLib-2.0"]
        assert result.ignore == ["Gtk-4.0"]
        assert result.inconsistencies == [("Foo-1.0", "Gtk-4.0")]

    def test_go_back_then_choose_again(self, gtk_groups, scripted_prompter, config_store):
        prompter = scripted_prompter(["Gtk-3.0", GO_BACK, "Gtk-4.0", YES, NO])

        result = ConflictResolver(prompter, config_store).resolve(gtk_groups)

        assert [m.package_name for m in result.keep] == ["Gtk-4.0", "Foo-1.0", "GLib-2.0"]
        assert result.ignore == ["Gtk-3.0"]
        version_questions = [q for q in prompter.questions if q.name == "Gtk"]
        assert len(version_questions) == 2

    def test_all_keeps_every_version(self, gtk_groups, scripted_prompter, config_store):
        prompter = scripted_prompter([ALL, YES])

        result = ConflictResolver(prompter, config_store).resolve(gtk_groups)

        assert [m.package_name for m in result.keep] == ["Gtk-3.0", "Gtk-4.0", "Foo-1.0", "GLib-2.0"]
        assert result.ignore == []
        assert prompter.messages == []

    def test_persist_ignore_list(self, gtk_groups, scripted_prompter, config_store):
        prompter = scripted_prompter(["Gtk-3.0", YES, YES])

        ConflictResolver(prompter, config_store).resolve(gtk_groups)

        assert config_store.ignored == ["Foo-1.0", "Gtk-4.0"]
        assert str(config_store.config_path) in prompter.questions[-1].message

    def test_without_store_no_persist_question(self, gtk_groups, scripted_prompter):
        prompter = scripted_prompter(["Gtk-3.0", YES])

        result = ConflictResolver(prompter).resolve(gtk_groups)

        assert result.ignore == ["Foo-1.0", "Gtk-4.0"]
        assert len(prompter.messages) == 1

    def test_preignored_version_removes_conflict(self, gtk_groups, scripted_prompter, config_store):
        prompter = scripted_prompter()

        result = ConflictResolver(prompter, config_store).resolve(gtk_groups, ignore=["Gtk-3.0"])

        assert [m.package_name for m in result.keep] == ["Gtk-4.0", "Foo-1.0", "GLib-2.0"]
        assert result.ignore == ["Gtk-3.0"]
        assert prompter.questions == []
        assert prompter.messages == ["The following modules will be ignored:\n- Gtk-3.0"]

    def test_cascade_removes_module_kept_earlier(self, module_factory, scripted_prompter):
        groups = group_modules(
            [
                module_factory("Foo-1.0", ["Gtk-4.0"]),
                module_factory("Gtk-3.0"),
                module_factory("Gtk-4.0"),
            ]
        )
        prompter = scripted_prompter(["Gtk-3.0", YES])

        result = ConflictResolver(prompter).resolve(groups)

        assert [m.package_name for m in result.keep] == ["Gtk-3.0"]
        assert result.ignore == ["Foo-1.0", "Gtk-4.0"]

    def test_missing_answer_aborts(self, gtk_groups, scripted_prompter):
        with pytest.raises(PromptError):
            ConflictResolver(scripted_prompter([None])).resolve(gtk_groups)

    def test_invalid_persist_answer_aborts(self, gtk_groups, scripted_prompter, config_store):
        prompter = scripted_prompter(["Gtk-3.0", YES, None])

        with pytest.raises(PromptError):
            ConflictResolver(prompter, config_store).resolve(gtk_groups)
