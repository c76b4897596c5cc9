"""Selection state machine for the interactive picker.

The state is immutable; ``transition`` returns a new state for each event and
``render_view`` projects a state into display lines. Neither touches the
terminal, so the curses front end in ``faro.tui.terminal`` is the only I/O.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import FrozenSet, List, NamedTuple, Optional, Sequence, Tuple

from faro.classify import sort_grouped
from faro.common.timeutil import publish_age
from faro.factory import SectionLabels
from faro.models import Module, max_name_length
from faro.render import format_update
from faro.versioning import group_label

PROMPT = "Which packages would you like to update?"
FOOTER = "Press <space> to select, <enter> to update, <q> to quit."
GOODBYE = "Bye!"
CURSOR = "❯ "
NO_CURSOR = "  "
CHECKED = "◉"
UNCHECKED = "◯"


class Event(Enum):
    MOVE_UP = "move-up"
    MOVE_DOWN = "move-down"
    TOGGLE = "toggle"
    COMMIT = "commit"
    ABORT = "abort"


KEYMAP = {
    "up": Event.MOVE_UP,
    "k": Event.MOVE_UP,
    "down": Event.MOVE_DOWN,
    "j": Event.MOVE_DOWN,
    " ": Event.TOGGLE,
    "space": Event.TOGGLE,
    "enter": Event.COMMIT,
    "q": Event.ABORT,
    "ctrl+c": Event.ABORT,
}


def key_to_event(key: str) -> Optional[Event]:
    """Map a key name to its event; unknown keys map to None."""
    return KEYMAP.get(key)


@dataclass(frozen=True)
class PickerState:
    """Everything the picker knows.

    ``choices`` is Direct ++ Indirect ++ Transitive; ``direct_end`` and
    ``indirect_end`` are the offsets where the latter two sections begin.
    """

    choices: Tuple[Module, ...] = ()
    direct_end: int = 0
    indirect_end: int = 0
    cursor: int = 0
    selected: FrozenSet[int] = field(default_factory=frozenset)
    quitting: bool = False
    aborted: bool = False


def initial_state(
    direct: Sequence[Module],
    indirect: Sequence[Module],
    transitive: Sequence[Module],
    grouped: bool = False,
) -> PickerState:
    if grouped:
        direct, indirect, transitive = sort_grouped(direct), sort_grouped(indirect), sort_grouped(transitive)
    choices = (*direct, *indirect, *transitive)
    return PickerState(
        choices=choices,
        direct_end=len(direct),
        indirect_end=len(direct) + len(indirect),
    )


def transition(state: PickerState, event: Event) -> PickerState:
    """Apply ``event`` to ``state``. A quitting state never changes."""
    if state.quitting:
        return state
    if event is Event.MOVE_UP:
        return dataclasses.replace(state, cursor=max(0, state.cursor - 1))
    if event is Event.MOVE_DOWN:
        return dataclasses.replace(state, cursor=max(0, min(len(state.choices) - 1, state.cursor + 1)))
    if event is Event.TOGGLE:
        if not 0 <= state.cursor < len(state.choices):
            return state
        return dataclasses.replace(state, selected=state.selected ^ {state.cursor})
    if event is Event.COMMIT:
        return dataclasses.replace(state, quitting=True)
    if event is Event.ABORT:
        return dataclasses.replace(state, quitting=True, aborted=True, selected=frozenset())
    return state


def selected_modules(state: PickerState) -> List[Module]:
    """Selected modules in ascending index order; out-of-range indices are dropped."""
    if state.aborted:
        return []
    count = len(state.choices)
    return [state.choices[i] for i in sorted(state.selected) if 0 <= i < count]


class ViewLine(NamedTuple):
    """One display line and the kind of content it holds."""

    kind: str  # prompt, heading, subheading, row, cursor-row, blank, footer
    text: str


@dataclass(frozen=True)
class ViewOptions:
    labels: SectionLabels = SectionLabels()
    group: bool = False
    time: bool = False
    now: Optional[datetime] = None


def _section_heading(state: PickerState, index: int, labels: SectionLabels) -> Optional[str]:
    has_transitive = state.indirect_end < len(state.choices)
    if index == 0 and state.direct_end > 0:
        return labels.direct
    if index == state.direct_end and state.direct_end < state.indirect_end:
        return labels.indirect
    if index == state.indirect_end and has_transitive:
        return labels.transitive
    return None


def render_view(state: PickerState, options: ViewOptions = ViewOptions()) -> List[ViewLine]:
    """Project ``state`` into display lines."""
    if state.quitting and state.aborted:
        return [ViewLine("footer", GOODBYE)]

    lines = [ViewLine("prompt", PROMPT), ViewLine("blank", "")]
    width = max_name_length(state.choices)
    prev_group = None
    for i, module in enumerate(state.choices):
        heading = _section_heading(state, i, options.labels)
        if heading is not None:
            if i > 0:
                lines.append(ViewLine("blank", ""))
            lines.append(ViewLine("heading", heading))
            prev_group = None
        if options.group:
            label = group_label(module)
            if label != prev_group:
                lines.append(ViewLine("blank", ""))
                lines.append(ViewLine("subheading", label))
                prev_group = label

        marker = CURSOR if i == state.cursor else NO_CURSOR
        box = CHECKED if i in state.selected else UNCHECKED
        row = f"{marker}{box} {format_update(module, width).plain}"
        if options.time and options.now is not None and module.update is not None:
            age = publish_age(module.update.time, options.now)
            if age:
                row += f"  {age}"
        lines.append(ViewLine("cursor-row" if i == state.cursor else "row", row))

    lines.append(ViewLine("blank", ""))
    lines.append(ViewLine("footer", FOOTER))
    return lines


def view_text(lines: Sequence[ViewLine]) -> str:
    return "\n".join(line.text for line in lines) + "\n"
