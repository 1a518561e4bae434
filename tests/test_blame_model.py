"""Tests for the blame model: row flattening, arena lookups, checkpoints."""

from git_delve.core.model import UNCOMMITTED, BlameModel, CommitPath
from git_delve.core.porcelain import parse_blame_porcelain
from tests.harness import HunkSpec, make_porcelain, sha


def _model() -> BlameModel:
    a, b = sha("A"), sha("B")
    return parse_blame_porcelain(
        make_porcelain(
            HunkSpec(a, 1, ("alpha", "beta"), author="Ada"),
            HunkSpec(b, 3, ("gamma",), author="Bob"),
            HunkSpec(a, 4, ("delta", "epsilon"), author="Ada"),
        )
    )


def test_rows_flatten_hunks_one_per_line():
    model = _model()
    assert [(r.hunk_index, r.line_number, r.text, r.first_in_hunk) for r in model.rows] == [
        (0, 1, "alpha", True),
        (0, 2, "beta", False),
        (1, 3, "gamma", True),
        (2, 4, "delta", True),
        (2, 5, "epsilon", False),
    ]
    assert len(model) == model.line_count == 5


def test_rows_are_computed_once():
    model = _model()
    assert model.rows is model.rows


def test_hunk_at_maps_rows_back_to_hunks():
    model = _model()
    assert model.hunk_at(1) is model.hunks[0]
    assert model.hunk_at(2).commit == sha("B")
    assert model.hunk_at(4) is model.hunks[2]


def test_commit_index_maps_ids_to_arena_slots():
    model = _model()
    assert model.commit_index == {sha("A"): 0, sha("B"): 1}
    assert model.info(model.hunks[1]).author == "Bob"
    assert model.info(model.hunks[0]) is model.info(model.hunks[2])


def test_with_origin_shares_decoded_data():
    model = _model()
    origin = CommitPath(None, "src/app.py")
    pinned = model.with_origin(origin)
    assert pinned.origin == origin
    assert pinned.hunks is model.hunks
    assert pinned.commits is model.commits


def test_empty_model():
    model = BlameModel()
    assert len(model) == 0
    assert model.rows == []
    assert model.line_count == 0


def test_uncommitted_hunk_flag():
    model = parse_blame_porcelain(
        make_porcelain(HunkSpec(UNCOMMITTED, 1, ("wip",), author="Not Committed Yet"))
    )
    assert model.hunks[0].is_uncommitted


def test_commit_path_describe():
    assert CommitPath(None, "a.py").describe() == "working tree:a.py"
    assert CommitPath(sha("A"), "a.py").describe() == f"{sha('A')[:8]}:a.py"
