"""Tests for the navigator runtime: key presses, fetch completions, execute."""

from __future__ import annotations

import unittest

from lazylauncher.catalog.source import CatalogError
from lazylauncher.catalog.types import Candidate, ExecuteResult, PaneIndex
from lazylauncher.input.keys import DOWN, ENTER, LEFT, RIGHT, TAB, UP, KeyEvent
from lazylauncher.runtime.background import BackgroundResult
from lazylauncher.runtime.navigator import STATUS_MESSAGE_SECONDS, ExecutePolicy, Navigator
from lazylauncher.runtime.query_cache import CHILDREN, QueryKey
from lazylauncher.runtime.window import WindowSize

DIRECT = PaneIndex.DIRECT
ACTION = PaneIndex.ACTION
INDIRECT = PaneIndex.INDIRECT


class ManualRunner:
    """Job runner that only runs jobs when the test says so."""

    def __init__(self) -> None:
        self.jobs: list[tuple[object, object]] = []
        self._done: list[BackgroundResult] = []

    def submit(self, tag, job) -> None:
        self.jobs.append((tag, job))

    def complete(self, index: int = 0) -> None:
        tag, job = self.jobs.pop(index)
        try:
            value = job()
        except Exception as exc:
            self._done.append(BackgroundResult(tag=tag, error=exc))
        else:
            self._done.append(BackgroundResult(tag=tag, value=value))

    def complete_all(self) -> None:
        while self.jobs:
            self.complete()

    def drain(self) -> list[BackgroundResult]:
        out = self._done
        self._done = []
        return out


class RecordingWindow:
    def __init__(self) -> None:
        self.sizes: list[WindowSize] = []
        self.hide_calls = 0

    def resize(self, size: WindowSize) -> None:
        self.sizes.append(size)

    def hide(self) -> None:
        self.hide_calls += 1


class FakeSource:
    """In-memory catalog: a small tree plus three actions."""

    def __init__(self) -> None:
        self.children: dict[str | None, list[Candidate]] = {
            None: [
                Candidate(id="folder-1", name="Projects", has_children=True),
                Candidate(id="file-1", name="notes.txt"),
                Candidate(id="file-2", name="scripts.sh"),
            ],
            "folder-1": [
                Candidate(id="folder-1/a", name="alpha.txt"),
                Candidate(id="folder-1/sub", name="sub", has_children=True),
            ],
            "folder-1/sub": [Candidate(id="folder-1/sub/z", name="zeta.txt")],
        }
        self.parents = {"folder-1/sub": "folder-1", "folder-1": None}
        self.actions = [
            Candidate(id="open", name="Open"),
            Candidate(id="move-to", name="Move To", indirect_type_count=1),
            Candidate(id="move-to-trash", name="Move to Trash"),
        ]
        self.item_actions: dict[str, list[Candidate]] = {}
        self.targets = [
            Candidate(id="desk", name="Desktop", has_children=True),
            Candidate(id="docs", name="Documents", has_children=True),
        ]
        self.executed: list[tuple[str, str, str | None]] = []
        self.execute_result: ExecuteResult | Exception = ExecuteResult.success()

    def list_children(self, parent_id):
        return list(self.children.get(parent_id, []))

    def list_actions(self, item_id):
        return list(self.item_actions.get(item_id, self.actions))

    def list_indirects(self, item_id, action_id):
        return list(self.targets) if action_id == "move-to" else []

    def get_parent(self, candidate_id):
        if candidate_id not in self.parents:
            raise CatalogError(f"no parent for {candidate_id}")
        return self.parents[candidate_id]

    def execute(self, direct_id, action_id, indirect_id):
        self.executed.append((direct_id, action_id, indirect_id))
        if isinstance(self.execute_result, Exception):
            raise self.execute_result
        return self.execute_result

    def icon_url(self, candidate_id, kind):
        return f"{kind}:{candidate_id}"


def key(name: str, **mods: bool) -> KeyEvent:
    return KeyEvent(name, **mods)


class NavigatorTestCase(unittest.TestCase):
    policy = ExecutePolicy()

    def setUp(self) -> None:
        self.source = FakeSource()
        self.window = RecordingWindow()
        self.fetches = ManualRunner()
        self.calls = ManualRunner()
        self.now = 100.0
        self.nav = Navigator(
            self.source,
            self.window,
            policy=self.policy,
            fetch_runner=self.fetches,
            call_runner=self.calls,
            clock=lambda: self.now,
        )
        self.flush_fetches()

    def flush_fetches(self) -> None:
        while self.fetches.jobs:
            self.fetches.complete_all()
            self.nav.poll()

    def finish_calls(self) -> None:
        self.calls.complete_all()
        self.nav.poll()
        self.flush_fetches()

    def press(self, name: str, **mods: bool) -> bool:
        return self.nav.handle_key(key(name, **mods))

    def choose_move_to(self) -> None:
        self.press(TAB)
        self.press(DOWN)
        self.flush_fetches()

    @property
    def state(self):
        return self.nav.state


class NavigatorStartupTests(NavigatorTestCase):
    def test_first_item_and_first_action_are_selected(self) -> None:
        self.assertEqual(self.state.direct_child_id, "folder-1")
        self.assertEqual(self.state.action_child_id, "open")
        self.assertIsNone(self.state.indirect_child_id)
        self.assertEqual(self.nav.visible_panes(), [DIRECT, ACTION])

    def test_window_grows_with_the_active_list(self) -> None:
        self.assertEqual(self.window.sizes[0], WindowSize(352, 240))
        self.assertEqual(self.window.sizes[-1], WindowSize(352, 368))

    def test_query_reports_loading_until_fetch_resolves(self) -> None:
        nav = Navigator(
            self.source,
            RecordingWindow(),
            fetch_runner=ManualRunner(),
            call_runner=ManualRunner(),
        )
        result = nav.query(DIRECT)
        self.assertIsNone(result.data)
        self.assertTrue(result.is_fetching)
        self.assertIsNone(nav.query(ACTION))


class NavigatorKeyTests(NavigatorTestCase):
    def test_typing_filters_and_selects_best_match(self) -> None:
        self.assertTrue(self.press("s"))

        self.assertEqual(self.state.panes[DIRECT].filter_text, "s")
        self.assertEqual(self.state.direct_child_id, "file-2")

    def test_uppercase_letters_filter_in_lowercase(self) -> None:
        self.press("N", shift=True)

        self.assertEqual(self.state.panes[DIRECT].filter_text, "n")
        self.assertEqual(self.state.direct_child_id, "file-1")

    def test_typing_inside_a_folder_returns_to_root_first(self) -> None:
        self.press(RIGHT)
        self.flush_fetches()
        self.assertEqual(self.state.panes[DIRECT].parent_id, "folder-1")

        self.press("n")
        self.flush_fetches()

        direct = self.state.panes[DIRECT]
        self.assertIsNone(direct.parent_id)
        self.assertEqual(direct.filter_text, "n")
        self.assertEqual(self.state.direct_child_id, "file-1")

    def test_backspace_clears_whole_filter(self) -> None:
        self.press("s")
        self.press("c")

        self.press("BACKSPACE")

        self.assertEqual(self.state.panes[DIRECT].filter_text, "")

    def test_modified_keys_are_not_consumed(self) -> None:
        self.assertFalse(self.press("s", ctrl=True))
        self.assertFalse(self.press(DOWN, alt=True))
        self.assertEqual(self.state.panes[DIRECT].filter_text, "")

    def test_arrows_wrap_within_filtered_list(self) -> None:
        self.press(UP)
        self.assertEqual(self.state.direct_child_id, "file-2")

        self.press(DOWN)
        self.assertEqual(self.state.direct_child_id, "folder-1")

    def test_tab_wraps_over_visible_panes(self) -> None:
        self.press(TAB)
        self.assertEqual(self.state.active_pane, ACTION)
        self.press(TAB)
        self.assertEqual(self.state.active_pane, DIRECT)
        self.press(TAB, shift=True)
        self.assertEqual(self.state.active_pane, ACTION)

    def test_tab_reaches_indirect_when_visible(self) -> None:
        self.choose_move_to()

        self.press(TAB)

        self.assertEqual(self.state.active_pane, INDIRECT)

    def test_arrow_right_on_leaf_changes_nothing(self) -> None:
        self.press(DOWN)
        before = self.state.snapshot()

        self.assertTrue(self.press(RIGHT))

        self.assertEqual(self.state, before)


class NavigatorDrillTests(NavigatorTestCase):
    def test_drill_in_and_out_through_known_ancestry(self) -> None:
        self.press(RIGHT)
        self.assertEqual(self.state.panes[DIRECT].parent_id, "folder-1")
        self.flush_fetches()
        self.assertEqual(self.state.direct_child_id, "folder-1/a")

        self.press(LEFT)

        self.assertIsNone(self.state.panes[DIRECT].parent_id)
        self.assertEqual(self.calls.jobs, [])
        self.assertEqual(self.state.direct_child_id, "folder-1")

    def test_drill_out_without_ancestry_asks_the_source(self) -> None:
        self.nav.open_parent(DIRECT, "folder-1/sub")
        self.flush_fetches()

        self.press(LEFT)
        self.assertEqual(len(self.calls.jobs), 1)
        self.press(LEFT)
        self.assertEqual(len(self.calls.jobs), 1)

        self.finish_calls()

        self.assertEqual(self.state.panes[DIRECT].parent_id, "folder-1")
        self.assertEqual(self.state.direct_child_id, "folder-1/a")

    def test_parent_lookup_for_abandoned_folder_is_discarded(self) -> None:
        self.nav.open_parent(DIRECT, "folder-1/sub")
        self.press(LEFT)

        self.nav.open_parent(DIRECT, None)
        self.finish_calls()

        self.assertIsNone(self.state.panes[DIRECT].parent_id)

    def test_failed_parent_lookup_sets_status(self) -> None:
        self.nav.open_parent(DIRECT, "lost")
        self.press(LEFT)

        self.finish_calls()

        self.assertEqual(self.state.panes[DIRECT].parent_id, "lost")
        self.assertTrue(self.nav.status_message.startswith("Cannot go up:"))

    def test_left_at_root_is_consumed_without_effect(self) -> None:
        self.assertTrue(self.press(LEFT))
        self.assertEqual(self.calls.jobs, [])

    def test_late_fetch_for_previous_folder_is_not_applied(self) -> None:
        self.press(RIGHT)
        self.assertEqual(len(self.fetches.jobs), 1)

        self.press(LEFT)
        self.flush_fetches()

        self.assertIsNone(self.state.panes[DIRECT].parent_id)
        self.assertEqual(self.state.direct_child_id, "folder-1")
        folder_key = QueryKey(DIRECT, CHILDREN, ("folder-1",))
        self.assertEqual(len(self.nav.cache.peek(folder_key)), 2)


class NavigatorExecuteTests(NavigatorTestCase):
    def test_enter_runs_selected_action_and_hides_window(self) -> None:
        self.assertTrue(self.press(ENTER))
        self.assertTrue(self.nav.execute_pending)

        self.finish_calls()

        self.assertEqual(self.source.executed, [("folder-1", "open", None)])
        self.assertEqual(self.window.hide_calls, 1)
        self.assertFalse(self.nav.execute_pending)
        self.assertEqual(self.state.direct_child_id, "folder-1")

    def test_enter_waits_for_indirect_selection(self) -> None:
        self.press(TAB)
        self.press(DOWN)
        self.assertIsNone(self.state.indirect_child_id)

        self.assertTrue(self.press(ENTER))
        self.assertEqual(self.calls.jobs, [])

        self.flush_fetches()
        self.assertEqual(self.state.indirect_child_id, "desk")
        self.press(ENTER)
        self.finish_calls()

        self.assertEqual(self.source.executed, [("folder-1", "move-to", "desk")])

    def test_enter_waits_for_actions_of_newly_selected_item(self) -> None:
        self.source.item_actions["file-1"] = [Candidate(id="edit", name="Edit")]

        self.press(DOWN)
        self.assertIsNone(self.state.action_child_id)
        self.assertTrue(self.press(ENTER))
        self.assertEqual(self.calls.jobs, [])

        self.flush_fetches()
        self.assertEqual(self.state.action_child_id, "edit")
        self.press(ENTER)
        self.finish_calls()

        self.assertEqual(self.source.executed, [("file-1", "edit", None)])

    def test_refresh_during_first_load_still_delivers_data(self) -> None:
        self.press(RIGHT)
        self.assertEqual(len(self.fetches.jobs), 1)

        self.nav.refresh()
        self.fetches.complete()
        self.nav.poll()

        self.assertTrue(self.nav.query(DIRECT).is_fetching)
        self.flush_fetches()
        self.assertEqual(self.state.direct_child_id, "folder-1/a")

    def test_only_one_execute_in_flight(self) -> None:
        self.press(ENTER)
        self.press(ENTER)

        self.assertEqual(len(self.calls.jobs), 1)

    def test_failure_keeps_window_and_reports(self) -> None:
        self.source.execute_result = ExecuteResult.failure("boom")

        self.press(ENTER)
        self.finish_calls()

        self.assertEqual(self.window.hide_calls, 0)
        self.assertEqual(self.nav.status_message, "Execute failed: boom")

    def test_raised_error_counts_as_failure(self) -> None:
        self.source.execute_result = CatalogError("gone")

        self.press(ENTER)
        self.finish_calls()

        self.assertEqual(self.window.hide_calls, 0)
        self.assertEqual(self.nav.status_message, "Execute failed: gone")

    def test_status_message_expires(self) -> None:
        self.nav.set_status_message("hello")
        self.now += STATUS_MESSAGE_SECONDS - 0.1
        self.nav.poll()
        self.assertEqual(self.nav.status_message, "hello")

        self.now += 0.2
        self.assertTrue(self.nav.poll())
        self.assertEqual(self.nav.status_message, "")


class NavigatorResetPolicyTests(NavigatorTestCase):
    policy = ExecutePolicy(reset_after_execute=True, hide_on_failure=True)

    def test_success_resets_navigation(self) -> None:
        self.choose_move_to()
        self.press("d")
        self.press(ENTER)

        self.finish_calls()

        self.assertEqual(self.window.hide_calls, 1)
        self.assertEqual(self.state.active_pane, DIRECT)
        self.assertEqual(self.state.direct_child_id, "folder-1")
        self.assertEqual(self.state.action_child_id, "open")
        self.assertIsNone(self.state.indirect_child_id)
        self.assertTrue(all(pane.filter_text == "" for pane in self.state.panes))

    def test_failure_hides_when_configured(self) -> None:
        self.source.execute_result = ExecuteResult.failure("nope")

        self.press(ENTER)
        self.finish_calls()

        self.assertEqual(self.window.hide_calls, 1)
        self.assertEqual(self.state.direct_child_id, "folder-1")


class NavigatorWindowAndRefreshTests(NavigatorTestCase):
    def test_third_pane_widens_window(self) -> None:
        self.choose_move_to()

        self.assertEqual(self.window.sizes[-1], WindowSize(520, 368))

        self.press(TAB)
        self.assertEqual(self.window.sizes[-1], WindowSize(520, 304))

    def test_unchanged_size_is_not_resent(self) -> None:
        count = len(self.window.sizes)

        self.press(DOWN)
        self.press(DOWN)

        self.assertEqual(len(self.window.sizes), count)

    def test_refresh_refetches_shown_lists_and_keeps_data(self) -> None:
        self.source.children[None] = self.source.children[None][1:]

        self.nav.refresh()

        self.assertEqual(len(self.fetches.jobs), 2)
        self.assertEqual(len(self.nav.query(DIRECT).data), 3)
        self.flush_fetches()
        self.assertEqual(self.state.direct_child_id, "file-1")

    def test_reset_restores_initial_navigation(self) -> None:
        self.press(RIGHT)
        self.flush_fetches()
        self.press(TAB)

        self.nav.reset()

        self.assertEqual(self.state.active_pane, DIRECT)
        self.assertIsNone(self.state.panes[DIRECT].parent_id)
        self.assertEqual(self.state.direct_child_id, "folder-1")


if __name__ == "__main__":
    unittest.main()
