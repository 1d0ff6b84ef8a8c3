"""Interactive checkbox list for choosing which artifacts to delete.

The session is a blocking read-key/update/redraw loop. The terminal is put
into cbreak mode for the whole session and restored on every exit path.
"""

import logging
import os
import select
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional, Sequence

from rich.console import Console
from rich.text import Text

from reposweep import display
from reposweep.display import format_age, format_count, format_size
from reposweep.models import ArtifactRecord

try:
    import termios
    import tty

    _HAS_TERMIOS = True
except ImportError:
    _HAS_TERMIOS = False

log = logging.getLogger(__name__)

KeySource = Callable[[], str]

# Banner, header, scroll indicators, footer and summary
RESERVED_LINES = 14
MIN_VIEWPORT_ROWS = 5
MIN_PATH_WIDTH = 10
# "  [✓]  path  size  count  desc"
FIXED_ROW_CHARS = 15

KEY_INTERRUPT = "\x03"
KEY_QUIT = "q"
KEYS_UP = frozenset({"\x1b[A", "\x1bOA", "k"})
KEYS_DOWN = frozenset({"\x1b[B", "\x1bOB", "j"})
KEY_TOGGLE = " "
KEY_ALL = "a"
KEY_NONE = "n"
KEYS_CONFIRM = frozenset({"\r", "\n"})

TITLE = [
    " ┳━┓┏━╸┏━┓┏━┓  ┏━┓╻ ╻┏━╸┏━╸┏━┓",
    " ┣┳┛┣╸ ┣━┛┃ ┃  ┗━┓┃╻┃┣╸ ┣╸ ┣━┛",
    " ╹┗╸┗━╸╹  ┗━┛  ┗━┛┗┻┛┗━╸┗━╸╹  ",
]


class Action(str, Enum):
    """Outcome of handling one key."""

    CONTINUE = "continue"
    CONFIRM = "confirm"
    QUIT = "quit"
    INTERRUPT = "interrupt"


@dataclass
class SelectionState:
    """Cursor, scroll position and per-item selection of one session."""

    selected: list[bool]
    cursor: int = 0
    scroll_offset: int = 0

    @classmethod
    def create(cls, count: int) -> "SelectionState":
        return cls(selected=[True] * count)

    @property
    def last_index(self) -> int:
        return len(self.selected) - 1

    def handle_key(self, key: str) -> Action:
        """Apply a key to the state and report whether the session ends."""
        if key == KEY_INTERRUPT:
            return Action.INTERRUPT
        if key == KEY_QUIT:
            return Action.QUIT
        if key in KEYS_CONFIRM:
            return Action.CONFIRM

        if key in KEYS_UP:
            self.cursor = max(0, self.cursor - 1)
        elif key in KEYS_DOWN:
            self.cursor = min(self.last_index, self.cursor + 1)
        elif key == KEY_TOGGLE:
            self.selected[self.cursor] = not self.selected[self.cursor]
        elif key == KEY_ALL:
            self.selected = [True] * len(self.selected)
        elif key == KEY_NONE:
            self.selected = [False] * len(self.selected)
        return Action.CONTINUE

    def scroll_into_view(self, viewport_height: int) -> None:
        """Move the viewport so the cursor row is visible."""
        if self.cursor < self.scroll_offset:
            self.scroll_offset = self.cursor
        if self.cursor >= self.scroll_offset + viewport_height:
            self.scroll_offset = self.cursor - viewport_height + 1
        # Pull back when the viewport grew past the end of the list
        self.scroll_offset = max(0, min(self.scroll_offset, len(self.selected) - viewport_height))

    def chosen(self, items: Sequence[ArtifactRecord]) -> list[ArtifactRecord]:
        """Selected items in their original order."""
        return [item for item, on in zip(items, self.selected) if on]


def viewport_height(terminal_rows: int) -> int:
    return max(MIN_VIEWPORT_ROWS, terminal_rows - RESERVED_LINES)


def truncate_path(path: str, width: int) -> str:
    """Shorten a path to width by dropping its head, keeping the tail."""
    if len(path) <= width:
        return path
    return "..." + path[len(path) - width + 3 :]


def _describe(item: ArtifactRecord) -> str:
    if item.last_modified is None:
        return item.description
    return f"{item.description} · {format_age(item.last_modified)}"


def render(
    items: Sequence[ArtifactRecord],
    state: SelectionState,
    root: str,
    width: int,
    height: int,
) -> list[Text]:
    """
    Build every line of the selection screen.

    Scrolls the state so the cursor is visible. Column widths are taken over
    all items, not only the visible ones, so rows stay aligned while scrolling.

    Args:
        items: Artifacts being chosen from
        state: Current selection state (scroll offset is updated)
        root: Scan root, shown in the header
        width: Terminal columns
        height: Terminal rows

    Returns:
        Styled lines, top to bottom
    """
    rows = viewport_height(height)
    state.scroll_into_view(rows)

    sizes = [format_size(item.size_bytes) for item in items]
    counts = [f"{format_count(item.file_count)} files" for item in items]
    descriptions = [_describe(item) for item in items]

    size_width = max(len(s) for s in sizes)
    count_width = max(len(c) for c in counts)
    desc_width = max(len(d) for d in descriptions)
    available = width - FIXED_ROW_CHARS - size_width - count_width - desc_width
    longest_path = max(len(item.relative_path) + 1 for item in items)
    path_width = max(MIN_PATH_WIDTH, min(longest_path, available))

    lines = [Text(line, style="bold cyan") for line in TITLE]
    lines.append(Text())
    lines.append(Text.assemble(("  Scanned ", "dim"), root))
    lines.append(
        Text.assemble(
            ("  Found ", "dim"),
            (str(len(items)), "bold white"),
            (" deletable directories", "dim"),
        )
    )
    lines.append(Text())

    if state.scroll_offset > 0:
        lines.append(Text(f"    ▲ {state.scroll_offset} more above", style="dim"))

    visible_end = min(len(items), state.scroll_offset + rows)
    for i in range(state.scroll_offset, visible_end):
        checkbox = ("[✓]", "green") if state.selected[i] else ("[ ]", "dim")
        display_path = truncate_path(items[i].relative_path + "/", path_width)
        line = Text.assemble(
            "  ",
            checkbox,
            "  ",
            display_path.ljust(path_width),
            "  ",
            (sizes[i].rjust(size_width), "yellow"),
            "  ",
            (counts[i].rjust(count_width), "blue"),
            "  ",
            (descriptions[i], "dim"),
        )
        if i == state.cursor:
            line.stylize("reverse")
        lines.append(line)

    if visible_end < len(items):
        lines.append(Text(f"    ▼ {len(items) - visible_end} more below", style="dim"))

    lines.append(Text())
    lines.append(
        Text.assemble(
            ("  ↑↓", "dim"), " Navigate  ",
            ("␣", "dim"), " Toggle  ",
            ("a", "dim"), " All  ",
            ("n", "dim"), " None  ",
            ("⏎", "dim"), " Confirm  ",
            ("q", "dim"), " Quit",
        )
    )
    lines.append(Text())

    chosen = state.chosen(items)
    if chosen:
        lines.append(
            Text.assemble(
                (f"  Selected: {len(chosen)}/{len(items)}", "bold"),
                ("  │  ", "dim"),
                (format_size(sum(i.size_bytes for i in chosen)), "bold yellow"),
                ("  │  ", "dim"),
                (f"{format_count(sum(i.file_count for i in chosen))} files", "bold blue"),
                (" will be removed", "dim"),
            )
        )
    else:
        lines.append(Text("  Nothing selected", style="dim"))

    return lines


def draw(console: Console, lines: list[Text]) -> None:
    """Clear the screen and print every line."""
    console.clear()
    for line in lines:
        console.print(line, overflow="crop", no_wrap=True, crop=True)


# =============================================================================
# Terminal input
# =============================================================================


def _stdin_is_terminal() -> bool:
    try:
        return _HAS_TERMIOS and os.isatty(sys.stdin.fileno())
    except (OSError, ValueError):
        return False


@contextmanager
def raw_mode() -> Iterator[None]:
    """Put stdin in cbreak mode, restoring the saved mode on exit."""
    if not _stdin_is_terminal():
        yield
        return

    fd = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def _read_char(fd: int) -> str:
    data = os.read(fd, 1)
    if not data:
        raise EOFError("stdin closed")
    return data.decode("utf-8", errors="ignore")


def read_key() -> str:
    """
    Read a single keypress.

    Arrow keys arrive as escape sequences and are returned whole. Falls back
    to line input when stdin is not a terminal.
    """
    if not _stdin_is_terminal():
        line = input("> ")
        return line[:1] or "\r"

    fd = sys.stdin.fileno()
    key = _read_char(fd)
    if key != "\x1b":
        return key

    # Rest of an escape sequence, if one follows right away
    while len(key) < 3:
        ready, _, _ = select.select([fd], [], [], 0.05)
        if not ready:
            break
        key += _read_char(fd)
    return key


def select_items(
    items: Sequence[ArtifactRecord],
    root: str,
    console: Optional[Console] = None,
    key_source: Optional[KeySource] = None,
) -> list[ArtifactRecord]:
    """
    Let the user pick artifacts from an interactive list.

    Args:
        items: Non-empty list of artifacts, all selected initially
        root: Scan root, shown in the header
        console: Console to draw on (defaults to the shared console)
        key_source: Callable returning the next key (defaults to read_key)

    Returns:
        Chosen artifacts in original order; empty if the user quit
    """
    if console is None:
        console = display.console
    key_source = key_source or read_key
    state = SelectionState.create(len(items))

    action = Action.CONTINUE
    console.show_cursor(False)
    try:
        with raw_mode():
            while action is Action.CONTINUE:
                size = console.size
                draw(console, render(items, state, root, size.width, size.height))
                action = state.handle_key(key_source())
    except (KeyboardInterrupt, EOFError):
        action = Action.INTERRUPT
    finally:
        console.show_cursor(True)

    if action is Action.CONFIRM:
        chosen = state.chosen(items)
        log.info("Selected %d of %d artifacts", len(chosen), len(items))
        return chosen

    log.info("Selection cancelled (%s)", action.value)
    console.clear()
    return []
