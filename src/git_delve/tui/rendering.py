"""Rendering logic - pure functions building display text from model state.

Nothing here touches widgets; widgets call in with model data and get Rich
Text (or plain strings, for search) back.
"""

from __future__ import annotations

from rich.style import Style
from rich.text import Text

from git_delve.core.model import BlameHunk, BlameModel, BlameRow, CommitPath

SHORT_COMMIT = 8
AUTHOR_WIDTH = 12
LINE_NO_WIDTH = 4
ATTRIBUTION_WIDTH = SHORT_COMMIT + 1 + AUTHOR_WIDTH

COMMIT_STYLE = Style(color="yellow")
UNCOMMITTED_STYLE = Style(color="red")
LINE_NO_STYLE = Style(color="bright_black")
SELECTED_STYLE = Style(bgcolor="grey30")
ENTRY_PROMPT_STYLE = Style(bold=True)


def _author_cell(author: str) -> str:
    return f"{author[:AUTHOR_WIDTH]:<{AUTHOR_WIDTH}}"


def short_commit(commit: str, boundary: bool = False) -> str:
    """Abbreviated id; boundary commits get git's `^` marker in the same width."""
    if boundary:
        return "^" + commit[:SHORT_COMMIT - 1]
    return commit[:SHORT_COMMIT]


def attribution(model: BlameModel, row: BlameRow) -> str:
    """Commit + author prefix for the first row of a hunk; padding otherwise."""
    if not row.first_in_hunk:
        return " " * ATTRIBUTION_WIDTH
    hunk = model.hunks[row.hunk_index]
    info = model.info(hunk)
    return f"{short_commit(hunk.commit, info.boundary)} {_author_cell(info.author)}"


def row_plain_text(model: BlameModel, row: BlameRow) -> str:
    """The row exactly as displayed, without styling. Search matches against this."""
    return f"{attribution(model, row)} {row.line_number:>{LINE_NO_WIDTH}} {row.text}"


def render_row(model: BlameModel, row: BlameRow, *, selected: bool = False) -> Text:
    text = Text(no_wrap=True, end="")
    if row.first_in_hunk:
        hunk = model.hunks[row.hunk_index]
        info = model.info(hunk)
        style = UNCOMMITTED_STYLE if hunk.is_uncommitted else COMMIT_STYLE
        text.append(short_commit(hunk.commit, info.boundary), style=style)
        text.append(" " + _author_cell(info.author))
    else:
        text.append(" " * ATTRIBUTION_WIDTH)
    text.append(f" {row.line_number:>{LINE_NO_WIDTH}} ", style=LINE_NO_STYLE)
    text.append(row.text.expandtabs(4))
    if selected:
        text.stylize(SELECTED_STYLE)
    return text


def render_panel(content: str, scroll: int, height: int) -> Text:
    """Slice of ANSI-colored collaborator output starting at `scroll`."""
    lines = content.rstrip("\n").split("\n")
    window = "\n".join(lines[scroll:scroll + max(height, 0)])
    return Text.from_ansi(window, no_wrap=True)


def render_entry_prompt(prefix: str, buffer: str) -> Text:
    text = Text(prefix, style=ENTRY_PROMPT_STYLE)
    text.append(buffer)
    text.append("█")
    return text


def render_checkpoint(top: CommitPath, depth: int) -> str:
    label = top.describe()
    if depth > 1:
        label += f"  [depth {depth}]"
    return label


def render_commit_detail(model: BlameModel, hunk: BlameHunk | None) -> str:
    """One-line description of the selected hunk's commit for the footer."""
    if hunk is None:
        return ""
    info = model.info(hunk)
    if hunk.is_uncommitted:
        return "Not committed yet"
    parts = [info.author]
    if info.author_mail:
        parts.append(info.author_mail)
    parts.append(info.commit_time.strftime("%Y-%m-%d"))
    if info.summary:
        parts.append(info.summary)
    return " ".join(parts)
