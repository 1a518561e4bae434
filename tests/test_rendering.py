"""Tests for pure rendering helpers."""

from git_delve.core.model import UNCOMMITTED, CommitPath
from git_delve.core.porcelain import parse_blame_porcelain
from git_delve.tui import rendering
from tests.harness import HunkSpec, make_porcelain, sha


def _model():
    return parse_blame_porcelain(
        make_porcelain(
            HunkSpec(sha("A"), 1, ("def f():", "\treturn 1"), author="Alexandria Ocasio"),
            HunkSpec(UNCOMMITTED, 3, ("# wip",), author="Not Committed Yet"),
        )
    )


def test_attribution_only_on_first_row_of_hunk():
    model = _model()
    first, second, third = model.rows
    assert rendering.attribution(model, first) == f"{sha('A')[:8]} Alexandria O"
    assert rendering.attribution(model, second) == " " * rendering.ATTRIBUTION_WIDTH
    assert rendering.attribution(model, third).startswith("00000000 Not Committe")


def test_row_plain_text_columns_line_up():
    model = _model()
    texts = [rendering.row_plain_text(model, row) for row in model.rows]
    assert texts[0] == f"{sha('A')[:8]} Alexandria O    1 def f():"
    assert texts[1] == " " * 21 + "    2 \treturn 1"
    code_column = rendering.ATTRIBUTION_WIDTH + rendering.LINE_NO_WIDTH + 2
    assert texts[0].index("def") == texts[1].index("\treturn") == code_column


def test_render_row_expands_tabs_in_code():
    model = _model()
    text = rendering.render_row(model, model.rows[1])
    assert text.plain == " " * 21 + "    2 " + "    return 1"


def test_render_row_styles():
    model = _model()
    committed = rendering.render_row(model, model.rows[0])
    uncommitted = rendering.render_row(model, model.rows[2])
    assert any(span.style == rendering.COMMIT_STYLE for span in committed.spans)
    assert any(span.style == rendering.UNCOMMITTED_STYLE for span in uncommitted.spans)

    selected = rendering.render_row(model, model.rows[0], selected=True)
    assert any(span.style == rendering.SELECTED_STYLE for span in selected.spans)
    assert not any(span.style == rendering.SELECTED_STYLE for span in committed.spans)


def test_render_panel_slices_and_strips_ansi():
    content = "\x1b[33mcommit abc\x1b[m\nAuthor: X\n\nline 4\nline 5\n"
    text = rendering.render_panel(content, 3, 2)
    assert text.plain == "line 4\nline 5"

    coloured = rendering.render_panel(content, 0, 2)
    assert coloured.plain == "commit abc\nAuthor: X"
    assert coloured.spans


def test_render_panel_past_end_is_empty():
    assert rendering.render_panel("one\ntwo\n", 5, 10).plain == ""


def test_entry_prompt():
    assert rendering.render_entry_prompt("/", "needle").plain == "/needle█"


def test_checkpoint_label_shows_depth_only_after_reblame():
    assert rendering.render_checkpoint(CommitPath(None, "a.py"), 1) == "working tree:a.py"
    label = rendering.render_checkpoint(CommitPath(sha("A"), "a.py"), 3)
    assert label == f"{sha('A')[:8]}:a.py  [depth 3]"


def test_boundary_commit_is_marked_with_caret():
    model = parse_blame_porcelain(
        make_porcelain(HunkSpec(sha("R"), 1, ("root",), author="Ada", boundary=True))
    )
    row = model.rows[0]
    assert rendering.attribution(model, row) == f"^{sha('R')[:7]} Ada         "
    assert rendering.render_row(model, row).plain.startswith(f"^{sha('R')[:7]} Ada")
    assert len(rendering.attribution(model, row)) == rendering.ATTRIBUTION_WIDTH


def test_commit_detail_describes_selected_hunk():
    model = parse_blame_porcelain(
        make_porcelain(
            HunkSpec(sha("A"), 1, ("x",), author="Ada", time=0, summary="first cut"),
            HunkSpec(UNCOMMITTED, 2, ("y",), author="Not Committed Yet"),
        )
    )
    first, wip = model.hunks
    assert rendering.render_commit_detail(model, first) == "Ada <Ada@example.com> 1970-01-01 first cut"
    assert rendering.render_commit_detail(model, wip) == "Not committed yet"
    assert rendering.render_commit_detail(model, None) == ""
