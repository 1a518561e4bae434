"""Navigation engine: view state, checkpoint stack, and intent dispatch.

The engine owns the current BlameModel and every piece of UI state. Input
arrives as abstract intents (never raw key codes); each dispatch runs to
completion, including any blocking git call, before the next is accepted.

Dispatch priority:
    1. A visible popup swallows the intent and is dismissed.
    2. SearchEntry / LineJumpEntry accept only text-entry intents, Cancel, Commit.
    3. Otherwise browsing intents act on the blame list or the open panel.

// [LAW:single-enforcer] dispatch() is the sole mutator of ViewState and the
//   only place collaborator failures are converted into popups.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Union

from git_delve.core.model import BlameHunk, BlameModel, CommitPath
from git_delve.core.porcelain import parse_blame_porcelain
from git_delve.errors import CollaboratorError, ParseError
from git_delve.io.git_backend import GitCollaborator
from git_delve.tui import rendering
from git_delve.tui.search import SearchDirection, search

logger = logging.getLogger(__name__)


class PanelKind(Enum):
    COMMIT_SHOW = "commit_show"
    LINE_HISTORY = "line_history"


class PopupKind(Enum):
    HELP = "help"
    ERROR = "error"


# ─── Intents ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class MoveSelection:
    delta: int


@dataclass(frozen=True)
class MovePage:
    """Move by a fraction of the viewport; negative pages move up."""

    pages: float


@dataclass(frozen=True)
class JumpTop:
    pass


@dataclass(frozen=True)
class JumpBottom:
    pass


@dataclass(frozen=True)
class BeginLineJump:
    pass


@dataclass(frozen=True)
class BeginSearch:
    pass


@dataclass(frozen=True)
class RepeatSearch:
    direction: SearchDirection = SearchDirection.FORWARD


@dataclass(frozen=True)
class OpenSecondaryPanel:
    kind: PanelKind


@dataclass(frozen=True)
class ReblameSelected:
    pass


@dataclass(frozen=True)
class UndoReblame:
    pass


@dataclass(frozen=True)
class ShowHelp:
    pass


@dataclass(frozen=True)
class DismissOverlay:
    pass


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class AppendChar:
    char: str


@dataclass(frozen=True)
class Backspace:
    pass


@dataclass(frozen=True)
class ClearBuffer:
    pass


@dataclass(frozen=True)
class Commit:
    pass


Intent = Union[
    MoveSelection, MovePage, JumpTop, JumpBottom, BeginLineJump, BeginSearch,
    RepeatSearch, OpenSecondaryPanel, ReblameSelected, UndoReblame, ShowHelp,
    DismissOverlay, Cancel, Quit, AppendChar, Backspace, ClearBuffer, Commit,
]

TEXT_ENTRY_INTENTS = (AppendChar, Backspace, ClearBuffer, Cancel, Commit)


# ─── View state ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Browsing:
    pass


@dataclass(frozen=True)
class SearchEntry:
    buffer: str = ""


@dataclass(frozen=True)
class LineJumpEntry:
    buffer: str = ""


Focus = Union[Browsing, SearchEntry, LineJumpEntry]


@dataclass
class SecondaryPanel:
    kind: PanelKind
    title: str
    content: str
    scroll: int = 0

    @property
    def line_count(self) -> int:
        return len(self.content.rstrip("\n").split("\n"))


@dataclass(frozen=True)
class Popup:
    kind: PopupKind
    text: str


@dataclass
class ViewState:
    model: BlameModel
    selected: int | None = None
    focus: Focus = field(default_factory=Browsing)
    panel: SecondaryPanel | None = None
    popup: Popup | None = None
    last_query: str | None = None
    quit_requested: bool = False


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


# ─── Engine ──────────────────────────────────────────────────────────────────


class NavigationEngine:
    """Holds the session's view state and applies one intent at a time."""

    def __init__(
        self,
        git: GitCollaborator,
        model: BlameModel,
        origin: CommitPath,
        *,
        viewport_height: int = 20,
        help_text: str = "",
    ):
        self.git = git
        self.checkpoints: list[CommitPath] = [origin]
        self.state = ViewState(model=model.with_origin(origin))
        self.viewport_height = viewport_height
        self.help_text = help_text
        self._row_texts: list[str] | None = None

    @classmethod
    def open(cls, git: GitCollaborator, origin: CommitPath, **kwargs) -> NavigationEngine:
        """Blame `origin` and start a session on it. Failures propagate."""
        raw = git.blame(origin.path, origin.commit)
        return cls(git, parse_blame_porcelain(raw, origin=origin), origin, **kwargs)

    # ─── Derived state ─────────────────────────────────────────────────

    @property
    def top(self) -> CommitPath:
        return self.checkpoints[-1]

    @property
    def model(self) -> BlameModel:
        return self.state.model

    def selected_hunk(self) -> BlameHunk | None:
        if self.state.selected is None:
            return None
        return self.model.hunk_at(self.state.selected)

    def row_texts(self) -> list[str]:
        if self._row_texts is None:
            model = self.model
            self._row_texts = [rendering.row_plain_text(model, row) for row in model.rows]
        return self._row_texts

    # ─── Dispatch ──────────────────────────────────────────────────────

    def dispatch(self, intent: Intent) -> None:
        state = self.state
        if state.popup is not None:
            state.popup = None
            return

        if isinstance(state.focus, (SearchEntry, LineJumpEntry)):
            if isinstance(intent, TEXT_ENTRY_INTENTS):
                self._dispatch_entry(intent)
            return

        handler = _BROWSE_HANDLERS.get(type(intent))
        if handler is None:
            return
        try:
            handler(self, intent)
        except (CollaboratorError, ParseError) as e:
            logger.warning("%s failed: %s", type(intent).__name__, e)
            state.popup = Popup(PopupKind.ERROR, str(e))

    def _dispatch_entry(self, intent: Intent) -> None:
        state = self.state
        focus = state.focus
        if isinstance(intent, Cancel):
            state.focus = Browsing()
        elif isinstance(intent, AppendChar):
            if isinstance(focus, LineJumpEntry) and not intent.char.isdecimal():
                return
            state.focus = type(focus)(focus.buffer + intent.char)
        elif isinstance(intent, Backspace):
            state.focus = type(focus)(focus.buffer[:-1])
        elif isinstance(intent, ClearBuffer):
            state.focus = type(focus)("")
        elif isinstance(intent, Commit):
            if isinstance(focus, SearchEntry):
                self._commit_search(focus.buffer)
            else:
                self._commit_line_jump(focus.buffer)

    def _commit_search(self, query: str) -> None:
        self.state.focus = Browsing()
        if not query:
            return
        self.state.last_query = query
        self._run_search(query, SearchDirection.FORWARD)

    def _commit_line_jump(self, buffer: str) -> None:
        if not buffer.isdecimal():
            # Unparsable: leave the buffer for correction.
            return
        self.state.focus = Browsing()
        count = len(self.model)
        if count == 0:
            return
        self.state.selected = clamp(int(buffer) - 1, 0, count - 1)

    def _run_search(self, query: str, direction: SearchDirection) -> None:
        found = search(self.row_texts(), query, self.state.selected, direction)
        if found is not None:
            self.state.selected = found

    # ─── Movement ──────────────────────────────────────────────────────

    def _max_scroll(self, panel: SecondaryPanel) -> int:
        return max(0, panel.line_count - self.viewport_height)

    def _move(self, delta: int) -> None:
        state = self.state
        if state.panel is not None:
            state.panel.scroll = clamp(state.panel.scroll + delta, 0, self._max_scroll(state.panel))
            return
        count = len(self.model)
        if count == 0:
            return
        if state.selected is None:
            state.selected = 0
        else:
            state.selected = clamp(state.selected + delta, 0, count - 1)

    def _on_move_selection(self, intent: MoveSelection) -> None:
        self._move(intent.delta)

    def _on_move_page(self, intent: MovePage) -> None:
        step = max(1, int(self.viewport_height * abs(intent.pages)))
        self._move(step if intent.pages > 0 else -step)

    def _on_jump_top(self, intent: JumpTop) -> None:
        state = self.state
        if state.panel is not None:
            state.panel.scroll = 0
        elif len(self.model):
            state.selected = 0

    def _on_jump_bottom(self, intent: JumpBottom) -> None:
        state = self.state
        if state.panel is not None:
            state.panel.scroll = self._max_scroll(state.panel)
        elif len(self.model):
            state.selected = len(self.model) - 1

    # ─── Entry modes and search ────────────────────────────────────────

    def _on_begin_line_jump(self, intent: BeginLineJump) -> None:
        self.state.focus = LineJumpEntry()

    def _on_begin_search(self, intent: BeginSearch) -> None:
        self.state.focus = SearchEntry()

    def _on_repeat_search(self, intent: RepeatSearch) -> None:
        if self.state.last_query:
            self._run_search(self.state.last_query, intent.direction)

    # ─── Re-blame ──────────────────────────────────────────────────────

    def _load(self, target: CommitPath) -> BlameModel:
        logger.debug("blaming %s", target.describe())
        raw = self.git.blame(target.path, target.commit)
        return parse_blame_porcelain(raw, origin=target)

    def _replace_model(self, model: BlameModel) -> None:
        state = self.state
        state.model = model
        self._row_texts = None
        state.panel = None
        count = len(model)
        if count == 0:
            state.selected = None
        elif state.selected is not None:
            state.selected = clamp(state.selected, 0, count - 1)

    def reblame_path(self, hunk: BlameHunk) -> str:
        """Path to blame at the parent: the hunk's historical path wins over the view's."""
        previous = self.model.info(hunk).previous
        if previous is not None:
            return previous[1]
        if hunk.path and hunk.path != self.top.path:
            return hunk.path
        return self.top.path

    def _on_reblame(self, intent: ReblameSelected) -> None:
        hunk = self.selected_hunk()
        if hunk is None:
            return
        parent = self.git.parent_of(hunk.commit)
        target = CommitPath(parent, self.reblame_path(hunk))
        model = self._load(target)
        self.checkpoints.append(target)
        self._replace_model(model)
        logger.info("re-blamed at %s (depth %d)", target.describe(), len(self.checkpoints))

    def _on_undo(self, intent: UndoReblame) -> None:
        if len(self.checkpoints) <= 1:
            return
        target = self.checkpoints[-2]
        model = self._load(target)
        self.checkpoints.pop()
        self._replace_model(model)
        logger.info("returned to %s (depth %d)", target.describe(), len(self.checkpoints))

    # ─── Overlays ──────────────────────────────────────────────────────

    def _on_open_panel(self, intent: OpenSecondaryPanel) -> None:
        state = self.state
        if state.selected is None:
            return
        hunk = self.model.hunk_at(state.selected)
        if intent.kind is PanelKind.COMMIT_SHOW:
            content = self.git.show_commit(hunk.commit)
            title = f"commit {hunk.commit[:8]}"
        else:
            line_number = self.model.rows[state.selected].line_number
            top = self.top
            content = self.git.line_history(top.path, line_number, top.commit)
            title = f"history {top.path}:{line_number}"
        state.panel = SecondaryPanel(kind=intent.kind, title=title, content=content)

    def _on_show_help(self, intent: ShowHelp) -> None:
        self.state.popup = Popup(PopupKind.HELP, self.help_text)

    def _on_dismiss(self, intent: Intent) -> None:
        self.state.panel = None

    def _on_quit(self, intent: Quit) -> None:
        if self.state.panel is not None:
            self.state.panel = None
        else:
            self.state.quit_requested = True


# [LAW:one-source-of-truth] Browsing intent → handler.
_BROWSE_HANDLERS: dict[type, Callable[[NavigationEngine, Intent], None]] = {
    MoveSelection: NavigationEngine._on_move_selection,
    MovePage: NavigationEngine._on_move_page,
    JumpTop: NavigationEngine._on_jump_top,
    JumpBottom: NavigationEngine._on_jump_bottom,
    BeginLineJump: NavigationEngine._on_begin_line_jump,
    BeginSearch: NavigationEngine._on_begin_search,
    RepeatSearch: NavigationEngine._on_repeat_search,
    OpenSecondaryPanel: NavigationEngine._on_open_panel,
    ReblameSelected: NavigationEngine._on_reblame,
    UndoReblame: NavigationEngine._on_undo,
    ShowHelp: NavigationEngine._on_show_help,
    DismissOverlay: NavigationEngine._on_dismiss,
    Cancel: NavigationEngine._on_dismiss,
    Quit: NavigationEngine._on_quit,
}
