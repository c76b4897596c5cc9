"""curses front end driving the picker state machine."""

from __future__ import annotations

import curses
import locale
import logging
from typing import Callable, Dict, List, Optional, Sequence

from faro.models import Module
from faro.render import Renderer
from faro.tui.picker import (
    PickerState,
    ViewLine,
    ViewOptions,
    initial_state,
    key_to_event,
    render_view,
    selected_modules,
    transition,
)
from faro.updater.base import Updater

logger = logging.getLogger(__name__)

MSG_NOTHING_SELECTED = "No packages selected."
MSG_COMPLETE = "Updates complete!"

_SPECIAL_KEYS = {
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_ENTER: "enter",
    10: "enter",
    13: "enter",
    3: "ctrl+c",
}


def key_name(code: int) -> str:
    """Translate a ``getch`` code into the picker's key names."""
    if code in _SPECIAL_KEYS:
        return _SPECIAL_KEYS[code]
    if 0 <= code < 0x110000:
        return chr(code)
    return ""


def _theme() -> Dict[str, int]:
    theme = {"heading": curses.A_BOLD, "cursor-row": curses.A_BOLD, "subheading": curses.A_DIM}
    if not curses.has_colors():
        return theme
    curses.start_color()
    curses.use_default_colors()
    curses.init_pair(1, curses.COLOR_CYAN, -1)
    curses.init_pair(2, curses.COLOR_BLUE, -1)
    theme["heading"] = curses.color_pair(1) | curses.A_BOLD
    theme["cursor-row"] = curses.color_pair(2) | curses.A_BOLD
    return theme


def _draw(win, lines: List[ViewLine], theme: Dict[str, int]) -> None:
    win.erase()
    max_y, max_x = win.getmaxyx()
    cursor_line = next((i for i, line in enumerate(lines) if line.kind == "cursor-row"), 0)
    # Scroll so the cursor row stays on screen.
    top = max(0, cursor_line - max_y + 2)
    for y, line in enumerate(lines[top:top + max_y]):
        snippet = line.text[: max(0, max_x - 1)]
        try:
            win.addstr(y, 0, snippet, theme.get(line.kind, 0))
        except curses.error:
            continue
    win.refresh()


def run_picker(state: PickerState, options: ViewOptions) -> PickerState:
    """Run the event loop until the state quits; returns the final state."""
    locale.setlocale(locale.LC_ALL, "")

    def _main(stdscr) -> PickerState:
        current = state
        stdscr.keypad(True)
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        theme = _theme()
        while not current.quitting:
            _draw(stdscr, render_view(current, options), theme)
            try:
                code = stdscr.getch()
            except KeyboardInterrupt:
                code = 3
            event = key_to_event(key_name(code))
            if event is not None:
                current = transition(current, event)
        return current

    try:
        return curses.wrapper(_main)
    except KeyboardInterrupt:
        return transition(state, key_to_event("ctrl+c"))


def apply_selection(state: PickerState, updater: Updater, renderer: Renderer) -> List[Module]:
    """Hand the committed selection to ``updater``; aborted states do nothing.

    Raises:
        UpdateError: If the package manager rejects the update.
    """
    if state.aborted:
        renderer.line("Bye!")
        return []
    chosen = selected_modules(state)
    if not chosen:
        renderer.line(MSG_NOTHING_SELECTED)
        return []
    updater.update_packages(chosen)
    renderer.line(MSG_COMPLETE)
    return chosen


PickerLoop = Callable[[PickerState, ViewOptions], PickerState]


def start_interactive(
    direct: Sequence[Module],
    indirect: Sequence[Module],
    transitive: Sequence[Module],
    options: ViewOptions,
    updater: Updater,
    renderer: Renderer,
    loop: Optional[PickerLoop] = None,
) -> List[Module]:
    """Show the picker, then apply whatever the user committed."""
    state = initial_state(direct, indirect, transitive, grouped=options.group)
    final = (loop or run_picker)(state, options)
    logger.debug("Picker finished: aborted=%s selected=%d", final.aborted, len(final.selected))
    return apply_selection(final, updater, renderer)
