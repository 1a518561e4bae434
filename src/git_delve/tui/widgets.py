"""Textual widgets for the blame session.

Widgets hold no session state of their own; the app pushes the engine's
ViewState into them after every dispatched intent.
"""

from __future__ import annotations

from rich.text import Text
from textual.geometry import Region, Size
from textual.scroll_view import ScrollView
from textual.strip import Strip
from textual.widgets import Static

from git_delve.core.model import BlameModel
from git_delve.tui import rendering
from git_delve.tui.navigation import PopupKind, SecondaryPanel as PanelState


class BlameView(ScrollView):
    """Virtual-rendering blame list using the Line API.

    render_line(y) renders only the visible rows; the selected row is
    highlighted and kept inside the viewport.
    """

    can_focus = False

    DEFAULT_CSS = """
    BlameView {
        width: 1fr;
        height: 1fr;
        overflow-y: auto;
        overflow-x: auto;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._model: BlameModel | None = None
        self._selected: int | None = None

    @property
    def viewport_height(self) -> int:
        return max(1, self.scrollable_content_region.height)

    def set_model(self, model: BlameModel) -> None:
        self._model = model
        widest = max(
            (len(rendering.row_plain_text(model, row)) for row in model.rows),
            default=0,
        )
        self.virtual_size = Size(widest, len(model))
        self.refresh()

    def set_selected(self, index: int | None) -> None:
        self._selected = index
        if index is not None:
            self.scroll_to_region(Region(0, index, 1, 1), animate=False, immediate=True)
        self.refresh()

    def render_line(self, y: int) -> Strip:
        """Line API: render a single line at virtual position y."""
        scroll_x, scroll_y = self.scroll_offset
        index = scroll_y + y
        width = self.scrollable_content_region.width
        model = self._model
        if model is None or index >= len(model):
            return Strip.blank(width, self.rich_style)
        text = rendering.render_row(model, model.rows[index], selected=index == self._selected)
        strip = Strip(list(text.render(self.app.console)))
        return strip.crop_extend(scroll_x, scroll_x + width, self.rich_style)


class SecondaryPanel(Static):
    """Right-hand panel for commit diffs and line-history traces."""

    DEFAULT_CSS = """
    SecondaryPanel {
        width: 1fr;
        height: 1fr;
        border-left: solid $accent;
        border-title-color: $accent;
        padding: 0 1;
        display: none;
    }
    """

    def show_panel(self, panel: PanelState | None, height: int) -> None:
        if panel is None:
            self.display = False
            return
        self.border_title = panel.title
        self.update(rendering.render_panel(panel.content, panel.scroll, height))
        self.display = True


class PopupOverlay(Static):
    """Centered transient message: help text or a collaborator error."""

    DEFAULT_CSS = """
    PopupOverlay {
        layer: overlay;
        width: auto;
        max-width: 80%;
        height: auto;
        margin: 3 6;
        padding: 1 2;
        background: $panel;
        border: round $accent;
        display: none;
    }
    PopupOverlay.-error {
        border: round $error;
        color: $error;
    }
    """

    def show_popup(self, kind: PopupKind | None, text: str = "") -> None:
        if kind is None:
            self.display = False
            return
        self.set_class(kind is PopupKind.ERROR, "-error")
        self.border_title = "error" if kind is PopupKind.ERROR else "keys"
        self.border_subtitle = "any key to dismiss"
        self.update(Text(text))
        self.display = True


class EntryBar(Static):
    """One-line prompt shown while typing a search query or line number."""

    DEFAULT_CSS = """
    EntryBar {
        dock: bottom;
        height: 1;
        padding: 0 1;
        display: none;
    }
    """

    def show_entry(self, prefix: str | None, buffer: str = "") -> None:
        if prefix is None:
            self.display = False
            return
        self.update(rendering.render_entry_prompt(prefix, buffer))
        self.display = True


class StatusFooter(Static):
    """Checkpoint location plus key hints for the current mode."""

    DEFAULT_CSS = """
    StatusFooter {
        dock: bottom;
        height: 1;
        padding: 0 1;
        background: $panel;
        color: $text-muted;
    }
    """

    def update_display(
        self, location: str, hints: str, last_query: str | None = None, detail: str = ""
    ) -> None:
        text = Text(location, style="bold")
        if detail:
            text.append("  " + detail)
        if last_query:
            text.append(f"  /{last_query}", style="italic")
        text.append("   " + hints)
        self.update(text)
