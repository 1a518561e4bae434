"""Main TUI application using Textual.

// [LAW:locality-or-seam] Thin coordinator: key decoding lives in input_modes,
//   state transitions in navigation, text building in rendering.
// [LAW:one-source-of-truth] NavigationEngine.state is the only view state;
//   widgets are refreshed from it after every intent.
"""

import logging
import traceback

from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.css.query import NoMatches

from git_delve.tui import input_modes
from git_delve.tui import rendering
from git_delve.tui import theme_controller as _theme
from git_delve.tui.navigation import NavigationEngine, Popup, PopupKind
from git_delve.tui.widgets import BlameView, EntryBar, PopupOverlay, SecondaryPanel, StatusFooter

logger = logging.getLogger(__name__)


class GitDelveApp(App):
    """TUI application for git-delve."""

    CSS = """
    Screen {
        layers: base overlay;
    }
    #main {
        height: 1fr;
    }
    """

    ENABLE_COMMAND_PALETTE = False

    def __init__(self, engine: NavigationEngine):
        super().__init__()
        self._engine = engine
        self._rendered_model = None
        self._blame_id = "blame-view"
        self._panel_id = "secondary-panel"
        self._popup_id = "popup"
        self._entry_id = "entry-bar"
        self._footer_id = "status-footer"

    @property
    def engine(self) -> NavigationEngine:
        return self._engine

    @property
    def _input_mode(self) -> input_modes.InputMode:
        return input_modes.mode_for(self._engine.state)

    # ─── Widget accessors ──────────────────────────────────────────────

    def _query_safe(self, selector):
        try:
            return self.query_one(selector)
        except NoMatches:
            return None

    def _get_blame_view(self):
        return self._query_safe("#" + self._blame_id)

    def _get_panel(self):
        return self._query_safe("#" + self._panel_id)

    def _get_popup(self):
        return self._query_safe("#" + self._popup_id)

    def _get_entry_bar(self):
        return self._query_safe("#" + self._entry_id)

    def _get_footer(self):
        return self._query_safe("#" + self._footer_id)

    # ─── Lifecycle ─────────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        with Horizontal(id="main"):
            yield BlameView(id=self._blame_id)
            yield SecondaryPanel(id=self._panel_id)
        yield StatusFooter(id=self._footer_id)
        yield EntryBar(id=self._entry_id)
        yield PopupOverlay(id=self._popup_id)

    def on_mount(self) -> None:
        _theme.restore_theme(self)
        self.title = self._engine.top.path
        self._sync_view()
        logger.info("session started at %s", self._engine.top.describe())

    def on_resize(self, event) -> None:
        self.call_after_refresh(self._sync_view)

    def on_unmount(self) -> None:
        logger.info("session ended at %s", self._engine.top.describe())

    def _handle_exception(self, error: Exception) -> None:
        """Log unexpected exceptions and show them in the popup instead of crashing."""
        tb = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        logger.error("unhandled exception: %s\n%s", error, tb)
        self._engine.state.popup = Popup(PopupKind.ERROR, f"{type(error).__name__}: {error}")
        self._sync_view()

    # ─── Actions ───────────────────────────────────────────────────────

    def action_next_theme(self) -> None:
        _theme.cycle_theme(self, 1)

    def action_prev_theme(self) -> None:
        _theme.cycle_theme(self, -1)

    # ─── Key dispatch ──────────────────────────────────────────────────

    async def on_key(self, event) -> None:
        """// [LAW:single-enforcer] on_key is the sole key dispatcher."""
        mode = self._input_mode
        if mode is input_modes.InputMode.BROWSING:
            action_name = input_modes.APP_KEYMAP.get(event.key)
            if action_name:
                event.prevent_default()
                await self.run_action(action_name)
                return

        intent = input_modes.resolve_intent(mode, event.key, event.character)
        if intent is None:
            return
        event.prevent_default()
        event.stop()
        self.dispatch_intent(intent)

    def dispatch_intent(self, intent) -> None:
        engine = self._engine
        engine.dispatch(intent)
        if engine.state.quit_requested:
            self.exit()
            return
        self._sync_view()

    # ─── View sync ─────────────────────────────────────────────────────

    def _sync_view(self) -> None:
        engine = self._engine
        state = engine.state

        blame_view = self._get_blame_view()
        if blame_view is not None:
            if state.model is not self._rendered_model:
                blame_view.set_model(state.model)
                self._rendered_model = state.model
            engine.viewport_height = blame_view.viewport_height
            blame_view.set_selected(state.selected)

        panel = self._get_panel()
        if panel is not None:
            panel.show_panel(state.panel, engine.viewport_height)

        popup = self._get_popup()
        if popup is not None:
            if state.popup is None:
                popup.show_popup(None)
            else:
                popup.show_popup(state.popup.kind, state.popup.text)

        mode = input_modes.mode_for(state)
        entry_bar = self._get_entry_bar()
        if entry_bar is not None:
            prefix = input_modes.ENTRY_PREFIX.get(mode)
            entry_bar.show_entry(prefix, getattr(state.focus, "buffer", ""))

        footer = self._get_footer()
        if footer is not None:
            footer.update_display(
                rendering.render_checkpoint(engine.top, len(engine.checkpoints)),
                input_modes.render_footer_hints(mode),
                state.last_query,
                rendering.render_commit_detail(engine.model, engine.selected_hunk()),
            )
