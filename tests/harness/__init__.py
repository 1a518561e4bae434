"""Test harness for git-delve.

Re-exports all public API for convenient imports:
    from tests.harness import FakeGit, HunkSpec, make_porcelain, run_app, ...
"""

from tests.harness.fakes import FakeGit, HunkSpec, make_porcelain, sha
from tests.harness.app_runner import run_app, press_and_settle, press_sequence
from tests.harness.gitrepo import GitRepo, requires_git
from tests.harness.assertions import (
    checkpoint_depth,
    entry_buffer,
    is_entry_visible,
    is_error_popup,
    is_panel_visible,
    is_popup_visible,
    selected_row,
)

__all__ = [
    "FakeGit",
    "HunkSpec",
    "make_porcelain",
    "sha",
    "run_app",
    "press_and_settle",
    "press_sequence",
    "GitRepo",
    "requires_git",
    "checkpoint_depth",
    "entry_buffer",
    "is_entry_visible",
    "is_error_popup",
    "is_panel_visible",
    "is_popup_visible",
    "selected_row",
]
