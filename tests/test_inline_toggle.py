import pytest

from richtext_engine.document import (
    BlockTag,
    Document,
    Element,
    InlineMarkTag,
    Selection,
    SelectionValidationError,
    Text,
    build,
    selection_from_offsets,
)
from richtext_engine.transforms import toggle_inline_mark

BOLD = InlineMarkTag.BOLD
ITALIC = InlineMarkTag.ITALIC


def make_document(*blocks: Element) -> Document:
    return Document.of(*blocks) if blocks else Document.of(build(BlockTag.PARAGRAPH, "hello world"))


def leaves(document: Document) -> list[Text]:
    return list(document.iter_text())


def assert_no_empty_nodes(document: Document) -> None:
    for node in document.iter_descendants():
        assert node.text_content, f"empty node left behind: {node!r}"


def test_apply_wraps_selected_prefix() -> None:
    document = make_document()

    outcome = toggle_inline_mark(document, selection_from_offsets(document, 0, 5), BOLD)

    assert outcome is not None and outcome.applied
    assert document.outline() == ("root", [("p", [("strong", ["hello"]), " world"])])
    assert outcome.selection.start.leaf.content == "hello"
    assert outcome.selection.start.offset == 0
    assert outcome.selection.end.offset == 5
    assert outcome.updated == (document.blocks[0],)


def test_second_toggle_clears_and_merges_text() -> None:
    document = make_document()
    first = toggle_inline_mark(document, selection_from_offsets(document, 0, 5), BOLD)
    assert first is not None

    second = toggle_inline_mark(document, first.selection, BOLD)

    assert second is not None and not second.applied
    assert document.outline() == ("root", [("p", ["hello world"])])
    assert second.selection.start.leaf is second.selection.end.leaf
    assert (second.selection.start.offset, second.selection.end.offset) == (0, 5)


def test_clear_part_of_a_mark_splits_it() -> None:
    document = make_document(build(BlockTag.PARAGRAPH, build(BOLD, "hello")))
    leaf = leaves(document)[0]

    outcome = toggle_inline_mark(document, Selection.between(leaf, 1, leaf, 3), BOLD)

    assert outcome is not None and not outcome.applied
    assert document.outline() == (
        "root",
        [("p", [("strong", ["h"]), "el", ("strong", ["lo"])])],
    )
    assert outcome.selection.start.leaf.content == "el"
    assert_no_empty_nodes(document)


def test_any_covered_mark_switches_to_clear() -> None:
    document = make_document(build(BlockTag.PARAGRAPH, "ab", build(BOLD, "cd"), "ef"))
    first, _, last = leaves(document)

    outcome = toggle_inline_mark(document, Selection.between(first, 1, last, 1), BOLD)

    assert outcome is not None and not outcome.applied
    assert document.outline() == ("root", [("p", ["abcdef"])])
    assert (outcome.selection.start.offset, outcome.selection.end.offset) == (1, 5)


def test_apply_across_blocks_wraps_each_part() -> None:
    document = make_document(
        build(BlockTag.PARAGRAPH, "hello"), build(BlockTag.HEADING1, "world")
    )

    outcome = toggle_inline_mark(document, selection_from_offsets(document, 3, 8), ITALIC)

    assert outcome is not None and outcome.applied
    assert document.outline() == (
        "root",
        [("p", ["hel", ("i", ["lo"])]), ("h1", [("i", ["wo"]), "rld"])],
    )
    assert outcome.selection.start.leaf.content == "lo"
    assert outcome.selection.end.leaf.content == "wo"
    assert len(outcome.updated) == 2


def test_nested_marks_are_cleared_at_any_depth() -> None:
    document = make_document(
        build(BlockTag.PARAGRAPH, build(ITALIC, build(BOLD, "abc")), "d")
    )
    leaf = leaves(document)[0]

    outcome = toggle_inline_mark(document, Selection.between(leaf, 0, leaf, 3), BOLD)

    assert outcome is not None and not outcome.applied
    assert document.outline() == ("root", [("p", [("i", ["abc"]), "d"])])


def test_apply_nests_inside_other_mark() -> None:
    document = make_document(build(BlockTag.PARAGRAPH, build(BOLD, "abc")))
    leaf = leaves(document)[0]

    toggle_inline_mark(document, Selection.between(leaf, 0, leaf, 3), ITALIC)

    assert document.outline() == ("root", [("p", [("strong", [("i", ["abc"])])])])


def test_apply_then_clear_restores_text() -> None:
    document = make_document(
        build(BlockTag.PARAGRAPH, "one ", build(ITALIC, "two"), " three"),
        build(BlockTag.PARAGRAPH, "four"),
    )
    before = document.plain_text

    applied = toggle_inline_mark(document, selection_from_offsets(document, 2, 16), BOLD)
    assert applied is not None and applied.applied
    cleared = toggle_inline_mark(document, applied.selection, BOLD)

    assert cleared is not None and not cleared.applied
    assert document.plain_text == before
    assert not any(
        isinstance(node, Element) and node.tag is BOLD for node in document.iter_descendants()
    )
    assert_no_empty_nodes(document)


@pytest.mark.parametrize("start,end", [(3, 3), (5, 5)])
def test_collapsed_selection_is_noop(start: int, end: int) -> None:
    document = make_document()

    outcome = toggle_inline_mark(document, selection_from_offsets(document, start, end), BOLD)

    assert outcome is None
    assert document.outline() == ("root", [("p", ["hello world"])])


def test_selection_outside_root_is_noop() -> None:
    document = make_document()
    stray = Text("elsewhere")

    assert toggle_inline_mark(document, Selection.between(stray, 0, stray, 4), BOLD) is None
    assert document.outline() == ("root", [("p", ["hello world"])])


def test_backward_selection_behaves_like_forward() -> None:
    document = make_document()
    leaf = leaves(document)[0]

    outcome = toggle_inline_mark(document, Selection.between(leaf, 5, leaf, 0), BOLD)

    assert outcome is not None
    assert document.outline() == ("root", [("p", [("strong", ["hello"]), " world"])])


def test_invalid_offset_raises() -> None:
    document = make_document()
    leaf = leaves(document)[0]

    with pytest.raises(SelectionValidationError):
        toggle_inline_mark(document, Selection.between(leaf, 0, leaf, 40), BOLD)


def test_clear_without_merge_keeps_leaves_separate() -> None:
    document = make_document()
    first = toggle_inline_mark(document, selection_from_offsets(document, 0, 5), BOLD)
    assert first is not None

    toggle_inline_mark(document, first.selection, BOLD, merge_text=False)

    assert document.outline() == ("root", [("p", ["hello", " world"])])
