"""Tests for the interactive selection state machine and its view."""

import dataclasses
from datetime import datetime, timezone

import pytest

from faro.factory import SectionLabels
from faro.tui.picker import (
    CHECKED,
    CURSOR,
    FOOTER,
    GOODBYE,
    PROMPT,
    UNCHECKED,
    Event,
    PickerState,
    ViewOptions,
    initial_state,
    key_to_event,
    render_view,
    selected_modules,
    transition,
    view_text,
)

LABELS = SectionLabels("Direct", "Indirect", "Transitive")


@pytest.fixture
def two_modules(make_module):
    return initial_state([make_module("a")], [make_module("b")], [])


def _run(state, *events):
    for event in events:
        state = transition(state, event)
    return state


class TestKeymap:
    """Key names to events."""

    @pytest.mark.parametrize(
        "key,event",
        [
            ("up", Event.MOVE_UP),
            ("k", Event.MOVE_UP),
            ("down", Event.MOVE_DOWN),
            ("j", Event.MOVE_DOWN),
            (" ", Event.TOGGLE),
            ("space", Event.TOGGLE),
            ("enter", Event.COMMIT),
            ("q", Event.ABORT),
            ("ctrl+c", Event.ABORT),
        ],
    )
    def test_mapping(self, key, event):
        assert key_to_event(key) is event

    def test_unknown_key(self):
        assert key_to_event("x") is None


class TestTransitions:
    """Browsing transitions."""

    def test_initial_offsets(self, make_module):
        state = initial_state([make_module("a")], [make_module("b"), make_module("c")], [make_module("d")])
        assert (state.direct_end, state.indirect_end) == (1, 3)
        assert [m.name for m in state.choices] == ["a", "b", "c", "d"]
        assert state.cursor == 0 and not state.selected and not state.quitting

    def test_move_is_clamped(self, two_modules):
        assert _run(two_modules, Event.MOVE_UP).cursor == 0
        assert _run(two_modules, Event.MOVE_DOWN, Event.MOVE_DOWN, Event.MOVE_DOWN).cursor == 1

    def test_toggle_flips_membership(self, two_modules):
        state = _run(two_modules, Event.TOGGLE)
        assert state.selected == {0}
        assert _run(state, Event.TOGGLE).selected == frozenset()

    def test_toggle_out_of_range_is_noop(self, two_modules):
        forced = dataclasses.replace(two_modules, cursor=999)
        after = transition(forced, Event.TOGGLE)
        assert after == forced
        assert after.selected == frozenset()

    def test_toggle_negative_cursor_is_noop(self, two_modules):
        forced = dataclasses.replace(two_modules, cursor=-1)
        assert transition(forced, Event.TOGGLE) == forced

    def test_commit_keeps_selection(self, two_modules):
        state = _run(two_modules, Event.MOVE_DOWN, Event.TOGGLE, Event.COMMIT)
        assert state.quitting and not state.aborted
        assert [m.name for m in selected_modules(state)] == ["b"]

    def test_abort_discards_selection(self, two_modules):
        state = _run(two_modules, Event.TOGGLE, Event.ABORT)
        assert state.quitting and state.aborted
        assert selected_modules(state) == []

    def test_quitting_is_terminal(self, two_modules):
        done = _run(two_modules, Event.COMMIT)
        for event in Event:
            assert transition(done, event) is done

    def test_empty_choices(self):
        state = initial_state([], [], [])
        state = _run(state, Event.MOVE_DOWN, Event.TOGGLE)
        assert state.cursor == 0
        assert state.selected == frozenset()

    def test_state_is_not_mutated(self, two_modules):
        transition(two_modules, Event.TOGGLE)
        assert two_modules.selected == frozenset()


class TestSelectionRevalidation:
    """Commit re-validates indices against the choices."""

    def test_stale_index_dropped(self, two_modules):
        state = dataclasses.replace(two_modules, selected=frozenset({0, 999}), quitting=True)
        chosen = selected_modules(state)
        assert [m.name for m in chosen] == ["a"]

    def test_ascending_order(self, make_module):
        state = initial_state([make_module("a"), make_module("b"), make_module("c")], [], [])
        state = dataclasses.replace(state, selected=frozenset({2, 0}))
        assert [m.name for m in selected_modules(state)] == ["a", "c"]


class TestGroupedInitialState:
    """Grouped pickers sort each section."""

    def test_sections_sorted_by_delta_then_name(self, make_module):
        state = initial_state(
            [make_module("z", "1.0.0", "1.0.1"), make_module("y", "1.0.0", "2.0.0")],
            [make_module("b", "1.0.0", "1.1.0"), make_module("a", "1.0.0", "1.1.0")],
            [],
            grouped=True,
        )
        assert [m.name for m in state.choices] == ["y", "z", "a", "b"]
        assert state.direct_end == 2


class TestRenderView:
    """Pure projection of the state into lines."""

    def test_sections_and_rows(self, make_module):
        state = initial_state([make_module("a")], [make_module("bb")], [make_module("c")])
        state = transition(state, Event.TOGGLE)
        lines = render_view(state, ViewOptions(labels=LABELS))
        texts = [line.text for line in lines]
        assert texts[0] == PROMPT
        assert texts.index("Direct") < texts.index("Indirect") < texts.index("Transitive")
        assert texts[-1] == FOOTER
        rows = [line for line in lines if line.kind in ("row", "cursor-row")]
        assert rows[0].kind == "cursor-row"
        assert rows[0].text.startswith(f"{CURSOR}{CHECKED} a ")
        assert rows[1].text.startswith(f"  {UNCHECKED} bb")
        assert "1.0.0  →  1.1.0" in rows[0].text

    def test_no_transitive_heading_without_transitive(self, two_modules):
        texts = [line.text for line in render_view(two_modules, ViewOptions(labels=LABELS))]
        assert "Transitive" not in texts

    def test_empty_direct_section_has_no_heading(self, make_module):
        state = initial_state([], [make_module("b")], [])
        texts = [line.text for line in render_view(state, ViewOptions(labels=LABELS))]
        assert "Direct" not in texts
        assert "Indirect" in texts

    def test_group_subheadings(self, make_module):
        state = initial_state(
            [make_module("a", "1.0.0", "2.0.0"), make_module("b", "1.0.0", "1.0.1")], [], [], grouped=True
        )
        subheadings = [line.text for line in render_view(state, ViewOptions(labels=LABELS, group=True))
                       if line.kind == "subheading"]
        assert [s.split()[0] for s in subheadings] == ["Major", "Patch"]

    def test_time_column(self, make_module):
        module = make_module("a", update_time="2026-01-10T00:00:00Z")
        state = initial_state([module], [], [])
        now = datetime(2026, 1, 17, tzinfo=timezone.utc)
        text = view_text(render_view(state, ViewOptions(labels=LABELS, time=True, now=now)))
        assert "7 days ago" in text

    def test_aborted_view(self, two_modules):
        state = transition(two_modules, Event.ABORT)
        assert view_text(render_view(state)) == f"{GOODBYE}\n"

    def test_projection_is_deterministic(self, two_modules):
        state = PickerState(two_modules.choices, 1, 2, cursor=1, selected=frozenset({1}))
        assert render_view(state) == render_view(state)
