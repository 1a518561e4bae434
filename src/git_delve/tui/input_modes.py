"""Pure mode system for key dispatch.

All keyboard input routes through GitDelveApp.on_key, which asks this module
to turn a Textual key into a navigation intent for the current mode.
Textual BINDINGS are not used - on_key is the sole dispatcher.
"""

from enum import Enum, auto

from git_delve.tui.navigation import (
    AppendChar,
    Backspace,
    BeginLineJump,
    BeginSearch,
    Cancel,
    ClearBuffer,
    Commit,
    DismissOverlay,
    JumpBottom,
    JumpTop,
    LineJumpEntry,
    MovePage,
    MoveSelection,
    OpenSecondaryPanel,
    PanelKind,
    Quit,
    ReblameSelected,
    RepeatSearch,
    SearchEntry,
    ShowHelp,
    UndoReblame,
    ViewState,
)
from git_delve.tui.search import SearchDirection


class InputMode(Enum):
    """Input focus derived from view state."""

    BROWSING = auto()
    SEARCH_ENTRY = auto()
    LINE_JUMP_ENTRY = auto()
    POPUP = auto()


def mode_for(state: ViewState) -> InputMode:
    if state.popup is not None:
        return InputMode.POPUP
    if isinstance(state.focus, SearchEntry):
        return InputMode.SEARCH_ENTRY
    if isinstance(state.focus, LineJumpEntry):
        return InputMode.LINE_JUMP_ENTRY
    return InputMode.BROWSING


# [LAW:one-source-of-truth] Key→intent mapping per mode.
# Entry modes map only editing keys; printable characters become AppendChar.
_ENTRY_KEYMAP = {
    "enter": Commit(),
    "escape": Cancel(),
    "backspace": Backspace(),
    "ctrl+h": Backspace(),
    "ctrl+u": ClearBuffer(),
}

MODE_KEYMAP = {
    InputMode.BROWSING: {
        "j": MoveSelection(1),
        "down": MoveSelection(1),
        "k": MoveSelection(-1),
        "up": MoveSelection(-1),
        "ctrl+d": MovePage(0.5),
        "ctrl+u": MovePage(-0.5),
        "ctrl+f": MovePage(1),
        "pagedown": MovePage(1),
        "ctrl+b": MovePage(-1),
        "pageup": MovePage(-1),
        "g": JumpTop(),
        "home": JumpTop(),
        "G": JumpBottom(),
        "end": JumpBottom(),
        ":": BeginLineJump(),
        "colon": BeginLineJump(),
        "/": BeginSearch(),
        "slash": BeginSearch(),
        "n": RepeatSearch(SearchDirection.FORWARD),
        "N": RepeatSearch(SearchDirection.BACKWARD),
        "enter": OpenSecondaryPanel(PanelKind.LINE_HISTORY),
        "s": OpenSecondaryPanel(PanelKind.COMMIT_SHOW),
        "b": ReblameSelected(),
        "B": UndoReblame(),
        "u": UndoReblame(),
        "?": ShowHelp(),
        "question_mark": ShowHelp(),
        "escape": Cancel(),
        "q": Quit(),
    },
    InputMode.SEARCH_ENTRY: _ENTRY_KEYMAP,
    InputMode.LINE_JUMP_ENTRY: _ENTRY_KEYMAP,
    InputMode.POPUP: {},
}

# App-level keys handled outside the engine (theme cycling).
APP_KEYMAP = {
    "[": "prev_theme",
    "left_square_bracket": "prev_theme",
    "]": "next_theme",
    "right_square_bracket": "next_theme",
}


def resolve_intent(mode: InputMode, key: str, character: str | None = None):
    """Translate one key press into an intent, or None when unbound."""
    if mode is InputMode.POPUP:
        return DismissOverlay()
    intent = MODE_KEYMAP[mode].get(key)
    if intent is not None:
        return intent
    if mode in (InputMode.SEARCH_ENTRY, InputMode.LINE_JUMP_ENTRY):
        if character and len(character) == 1 and character.isprintable():
            return AppendChar(character)
    return None


ENTRY_PREFIX = {
    InputMode.SEARCH_ENTRY: "/",
    InputMode.LINE_JUMP_ENTRY: ":",
}


# [LAW:one-source-of-truth] Footer display per mode.
FOOTER_KEYS: dict[InputMode, list[tuple[str, str]]] = {
    InputMode.BROWSING: [
        ("j/k", "move"),
        ("b", "blame parent"),
        ("B", "undo"),
        ("enter", "line log"),
        ("s", "show"),
        ("/", "search"),
        ("n/N", "next/prev"),
        (":", "line"),
        ("?", "keys"),
        ("q", "quit"),
    ],
    InputMode.SEARCH_ENTRY: [
        ("enter", "search"),
        ("^U", "clear"),
        ("esc", "cancel"),
    ],
    InputMode.LINE_JUMP_ENTRY: [
        ("enter", "jump"),
        ("^U", "clear"),
        ("esc", "cancel"),
    ],
    InputMode.POPUP: [
        ("any key", "dismiss"),
    ],
}


# [LAW:one-source-of-truth] Display data for the help popup.
KEY_GROUPS: list[tuple[str, list[tuple[str, str]]]] = [
    ("Nav", [
        ("j/k", "Line down / up"),
        ("^D/^U", "Half page"),
        ("^F/^B", "Full page"),
        ("g/G", "Top / bottom"),
        (":N", "Jump to line N"),
    ]),
    ("History", [
        ("b", "Re-blame at parent commit"),
        ("B/u", "Undo re-blame"),
        ("enter", "Line history"),
        ("s", "Show commit"),
        ("esc", "Close panel"),
    ]),
    ("Search", [
        ("/", "Search"),
        ("n/N", "Next / previous match"),
    ]),
    ("Other", [
        ("[/]", "Cycle theme"),
        ("?", "This help"),
        ("q", "Quit"),
    ]),
]


def render_help() -> str:
    lines: list[str] = []
    for title, keys in KEY_GROUPS:
        if lines:
            lines.append("")
        lines.append(title)
        for key, description in keys:
            lines.append(f"  {key:<7} {description}")
    return "\n".join(lines)


def render_footer_hints(mode: InputMode) -> str:
    return "  ".join(f"{key} {desc}" for key, desc in FOOTER_KEYS[mode])
