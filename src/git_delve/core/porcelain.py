"""Decoder for `git blame --porcelain` output.

Grammar, one item per line:

    header      := <commit> SP <orig-line> SP <final-line> [SP <group-size>] EOL
    info-field  := <field> [SP <value>] EOL          (never tab-prefixed)
    code        := TAB <source line> EOL

The first header of a group carries group-size N; the group continues with
N-1 more header+code pairs. A commit's info block follows its header the
first time the commit appears in the run. git may repeat a bare `filename`
field for an already-seen commit when the file moved; that is accepted and
applied to the hunk only.

// [LAW:single-enforcer] parse_blame_porcelain is the only place CommitInfo
//   records are created; each commit id gets exactly one arena slot.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone

from git_delve.core.model import BlameHunk, BlameModel, CommitInfo, CommitPath
from git_delve.errors import ParseError

logger = logging.getLogger(__name__)

_HEADER_RE = re.compile(r"([^ \r\n]+) (\d+) (\d+)(?: ([^ \r\n]+))?$")


class Cursor:
    """Line-oriented read position over the raw porcelain text."""

    __slots__ = ("text", "pos")

    def __init__(self, text: str, pos: int = 0):
        self.text = text
        self.pos = pos

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    @property
    def remainder(self) -> str:
        return self.text[self.pos:]

    def peek_line(self) -> str:
        end = self.text.find("\n", self.pos)
        line = self.text[self.pos:] if end == -1 else self.text[self.pos:end]
        return line[:-1] if line.endswith("\r") else line

    def take_line(self) -> str:
        line = self.peek_line()
        end = self.text.find("\n", self.pos)
        self.pos = len(self.text) if end == -1 else end + 1
        return line


@dataclass(frozen=True)
class Header:
    commit: str
    orig_line: int
    final_line: int
    group_size: int = 1


def parse_header(cursor: Cursor) -> Header:
    """Consume one header line. Group size defaults to 1 when absent."""
    if cursor.at_end():
        raise ParseError("expected blame header", cursor.remainder)
    line = cursor.peek_line()
    match = _HEADER_RE.match(line)
    if match is None:
        raise ParseError("malformed blame header", cursor.remainder)
    commit, orig, final, group = match.groups()
    if group is None:
        group_size = 1
    elif group.isdecimal():
        group_size = int(group)
    else:
        raise ParseError("non-numeric group size in blame header", cursor.remainder)
    if group_size < 1:
        raise ParseError("group size must be positive", cursor.remainder)
    cursor.take_line()
    return Header(commit, int(orig), int(final), group_size)


def _parse_timestamp(value: str, remainder: str) -> datetime:
    if not value.isdecimal():
        raise ParseError(f"invalid committer-time {value!r}", remainder)
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise ParseError(f"committer-time {value} out of range", remainder) from e


def parse_commit_info(cursor: Cursor) -> tuple[CommitInfo, str | None]:
    """Consume `<field> <value>` lines up to the next tab-prefixed code line.

    Returns the decoded CommitInfo and the raw `filename` value (None when
    the block had no filename field). Unknown fields are skipped.
    """
    fields: dict = {}
    filename = None
    while not cursor.at_end():
        if cursor.text.startswith("\t", cursor.pos):
            break
        line = cursor.take_line()
        key, _, value = line.partition(" ")
        if key == "author":
            fields["author"] = value
        elif key == "author-mail":
            fields["author_mail"] = value
        elif key == "committer-time":
            fields["commit_time"] = _parse_timestamp(value, line + "\n" + cursor.remainder)
        elif key == "summary":
            fields["summary"] = value
        elif key == "boundary":
            fields["boundary"] = True
        elif key == "previous":
            prev_commit, _, prev_path = value.partition(" ")
            fields["previous"] = (prev_commit, prev_path)
        elif key == "filename":
            filename = value
            fields["path"] = value
    else:
        raise ParseError("expected code line", cursor.remainder)
    return CommitInfo(**fields), filename


def parse_code_line(cursor: Cursor) -> str:
    """Consume one tab-prefixed code line; returns it without tab or EOL."""
    if not cursor.text.startswith("\t", cursor.pos):
        raise ParseError("expected code line", cursor.remainder)
    return cursor.take_line()[1:]


def parse_blame_porcelain(text: str, origin: CommitPath | None = None) -> BlameModel:
    """Decode a full porcelain blame run into a BlameModel.

    Raises ParseError on any grammar violation; nothing is skipped.
    """
    cursor = Cursor(text)
    hunks: list[BlameHunk] = []
    commits: list[CommitInfo] = []
    commit_index: dict[str, int] = {}

    while not cursor.at_end():
        header = parse_header(cursor)

        hunk_path = None
        info_index = commit_index.get(header.commit)
        if info_index is None:
            info, _ = parse_commit_info(cursor)
            info_index = len(commits)
            commits.append(info)
            commit_index[header.commit] = info_index
        elif not cursor.text.startswith("\t", cursor.pos):
            # Repeated filename for a commit seen under more than one path.
            _, hunk_path = parse_commit_info(cursor)
        if hunk_path is None:
            hunk_path = commits[info_index].path

        code = [parse_code_line(cursor)]
        for _ in range(1, header.group_size):
            continuation = parse_header(cursor)
            if continuation.commit != header.commit:
                raise ParseError(
                    f"group for {header.commit[:8]} interrupted by {continuation.commit[:8]}",
                    cursor.remainder,
                )
            code.append(parse_code_line(cursor))

        hunks.append(
            BlameHunk(
                commit=header.commit,
                line_number=header.final_line,
                code=tuple(code),
                info_index=info_index,
                path=hunk_path,
            )
        )

    logger.debug("parsed %d hunks across %d commits", len(hunks), len(commits))
    return BlameModel(hunks=hunks, commits=commits, commit_index=commit_index, origin=origin)
