from richtext_engine.document import (
    BlockTag,
    Document,
    InlineMarkTag,
    Selection,
    Text,
    build,
    selection_from_offsets,
)
from richtext_engine.transforms import toggle_block_type

H1 = BlockTag.HEADING1
H2 = BlockTag.HEADING2
P = BlockTag.PARAGRAPH


def make_document() -> Document:
    return Document.of(build(P, "first"), build(P, "second"), build(P, "third"))


def leaves(document: Document) -> list[Text]:
    return list(document.iter_text())


def test_range_across_blocks_splits_off_unselected_parts() -> None:
    document = make_document()
    first, second, _ = leaves(document)
    third_block = document.blocks[2]

    outcome = toggle_block_type(document, Selection.between(first, 2, second, 3), H1)

    assert outcome is not None and outcome.applied
    assert document.outline() == (
        "root",
        [
            ("p", ["fi"]),
            ("h1", ["rst"]),
            ("h1", ["sec"]),
            ("p", ["ond"]),
            ("p", ["third"]),
        ],
    )
    assert document.plain_text.replace("\n", "") == "firstsecondthird"
    assert document.blocks[4] is third_block
    assert outcome.selection.start.leaf.content == "rst"
    assert outcome.selection.start.offset == 0
    assert outcome.selection.end.leaf.content == "sec"
    assert outcome.selection.end.offset == 3
    assert len(outcome.removed) == 2
    assert [block.tag for block in outcome.added] == [P, H1, H1, P]


def test_caret_inside_heading_clears_to_paragraph() -> None:
    document = Document.of(build(H2, "title"))
    leaf = leaves(document)[0]

    outcome = toggle_block_type(document, Selection.caret(leaf, 2), H2)

    assert outcome is not None and outcome.applied
    assert document.outline() == ("root", [("p", ["title"])])
    assert leaf.parent is document.blocks[0]
    assert outcome.selection == Selection.caret(leaf, 2)


def test_caret_retypes_whole_block() -> None:
    document = make_document()
    second = leaves(document)[1]

    outcome = toggle_block_type(document, Selection.caret(second, 0), H1)

    assert outcome is not None and outcome.applied
    assert [block.tag for block in document.blocks] == [P, H1, P]


def test_each_block_decides_clear_or_apply() -> None:
    document = Document.of(build(P, "aa"), build(H1, "bb"))

    outcome = toggle_block_type(document, selection_from_offsets(document, 0, 5), H1)

    assert outcome is not None
    assert document.outline() == ("root", [("h1", ["aa"]), ("p", ["bb"])])


def test_inline_marks_survive_block_split() -> None:
    document = Document.of(build(P, "ab", build(InlineMarkTag.BOLD, "cd"), "ef"))

    toggle_block_type(document, selection_from_offsets(document, 3, 5), H2)

    assert document.outline() == (
        "root",
        [
            ("p", ["ab", ("strong", ["c"])]),
            ("h2", [("strong", ["d"]), "e"]),
            ("p", ["f"]),
        ],
    )


def test_clear_target_is_configurable() -> None:
    document = Document.of(build(H1, "title"))
    leaf = leaves(document)[0]

    toggle_block_type(document, Selection.caret(leaf, 0), H1, clear_to=H2)

    assert document.blocks[0].tag is H2


def test_selection_outside_root_is_noop() -> None:
    document = make_document()
    stray = Text("x")

    assert toggle_block_type(document, Selection.caret(stray, 0), H1) is None
    assert [block.tag for block in document.blocks] == [P, P, P]


def test_range_to_current_tag_leaves_block_whole() -> None:
    document = Document.of(build(P, "hello world"))
    paragraph = document.blocks[0]

    outcome = toggle_block_type(document, selection_from_offsets(document, 2, 5), P)

    assert outcome is None
    assert document.outline() == ("root", [("p", ["hello world"])])
    assert document.blocks[0] is paragraph


def test_caret_to_current_tag_is_noop() -> None:
    document = Document.of(build(P, "hello"))
    leaf = leaves(document)[0]

    assert toggle_block_type(document, Selection.caret(leaf, 1), P) is None
    assert document.outline() == ("root", [("p", ["hello"])])


def test_only_blocks_whose_tag_changes_are_split() -> None:
    document = Document.of(build(P, "first"), build(H1, "second"))
    paragraph = document.blocks[0]

    outcome = toggle_block_type(document, selection_from_offsets(document, 2, 9), P)

    assert outcome is not None and outcome.applied
    assert document.blocks[0] is paragraph
    assert document.outline() == (
        "root",
        [("p", ["first"]), ("p", ["sec"]), ("h1", ["ond"])],
    )
    assert len(outcome.removed) == 1
