"""Blame model: attributed hunks, shared commit metadata, and checkpoints.

A BlameModel is built atomically by one parse call and replaced wholesale on
every re-blame or undo; it is never patched in place.

// [LAW:one-source-of-truth] CommitInfo lives once in the model's arena.
//   Hunks hold an arena index, never a copy of the metadata.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

UNCOMMITTED = "0" * 40
EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass(frozen=True)
class CommitInfo:
    """Per-commit metadata shared by every hunk citing the commit."""

    author: str = ""
    commit_time: datetime = EPOCH
    path: str | None = None
    author_mail: str = ""
    summary: str = ""
    boundary: bool = False
    previous: tuple[str, str] | None = None


@dataclass(frozen=True)
class BlameHunk:
    """A contiguous run of lines attributed to one commit.

    line_number is 1-based; code holds the raw source lines without the
    leading tab or line ending.
    """

    commit: str
    line_number: int
    code: tuple[str, ...]
    info_index: int
    path: str | None = None

    @property
    def line_count(self) -> int:
        return len(self.code)

    @property
    def is_uncommitted(self) -> bool:
        return self.commit == UNCOMMITTED


@dataclass(frozen=True)
class BlameRow:
    """One displayed line: a single source line and the hunk that owns it."""

    hunk_index: int
    line_number: int
    text: str
    first_in_hunk: bool


@dataclass(frozen=True)
class CommitPath:
    """Checkpoint: blame pinned to `commit` (None = working tree) for `path`."""

    commit: str | None
    path: str

    def describe(self) -> str:
        rev = self.commit[:8] if self.commit else "working tree"
        return f"{rev}:{self.path}"


@dataclass
class BlameModel:
    """Decoded blame for one (commit, path): hunks plus the CommitInfo arena."""

    hunks: list[BlameHunk] = field(default_factory=list)
    commits: list[CommitInfo] = field(default_factory=list)
    commit_index: dict[str, int] = field(default_factory=dict)
    origin: CommitPath | None = None
    _rows: list[BlameRow] | None = field(default=None, init=False, repr=False, compare=False)

    def info(self, hunk: BlameHunk) -> CommitInfo:
        return self.commits[hunk.info_index]

    @property
    def rows(self) -> list[BlameRow]:
        """Flattened one-row-per-line view, computed once per model."""
        if self._rows is None:
            rows: list[BlameRow] = []
            for hunk_index, hunk in enumerate(self.hunks):
                for offset, text in enumerate(hunk.code):
                    rows.append(
                        BlameRow(
                            hunk_index=hunk_index,
                            line_number=hunk.line_number + offset,
                            text=text,
                            first_in_hunk=offset == 0,
                        )
                    )
            self._rows = rows
        return self._rows

    @property
    def line_count(self) -> int:
        return sum(h.line_count for h in self.hunks)

    def __len__(self) -> int:
        return len(self.rows)

    def hunk_at(self, row_index: int) -> BlameHunk:
        return self.hunks[self.rows[row_index].hunk_index]

    def with_origin(self, origin: CommitPath) -> BlameModel:
        """Return the same decoded data pinned to a checkpoint."""
        return BlameModel(
            hunks=self.hunks,
            commits=self.commits,
            commit_index=self.commit_index,
            origin=origin,
        )
