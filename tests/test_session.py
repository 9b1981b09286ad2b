from typing import List

import pytest

from richtext_engine.config import EngineConfig
from richtext_engine.document import (
    BlockTag,
    Document,
    DocumentChange,
    EditableRootMissingError,
    InlineMarkTag,
    MemoryHost,
    Selection,
    build,
)
from richtext_engine.session import DOCUMENT_CHANGED, ChangeBus, EditingSession


def make_session(text: str = "hello world", **config: object) -> EditingSession:
    host = MemoryHost(Document.from_text(text))
    return EditingSession(host, config=EngineConfig(**config))


def collect_changes(session: EditingSession) -> List[DocumentChange]:
    changes: List[DocumentChange] = []
    session.bus.subscribe(DOCUMENT_CHANGED, changes.append)
    return changes


def test_missing_root_is_fatal() -> None:
    with pytest.raises(EditableRootMissingError):
        EditingSession(MemoryHost())


def test_scenario_bold_round_trip() -> None:
    session = make_session()
    changes = collect_changes(session)
    session.select_offsets(0, 5)

    session.toggle_inline_mark(InlineMarkTag.BOLD)
    assert session.document.outline() == (
        "root",
        [("p", [("strong", ["hello"]), " world"])],
    )
    selection = session.current_selection()
    assert selection is not None and selection.start.leaf.content == "hello"

    session.toggle_inline_mark(InlineMarkTag.BOLD)
    assert session.document.outline() == ("root", [("p", ["hello world"])])

    assert [change.label for change in changes] == ["apply::strong", "clear::strong"]
    assert session.document.version == 2


def test_selection_is_replaced_before_notification() -> None:
    session = make_session()
    session.select_offsets(0, 5)
    seen: List[object] = []

    def on_change(payload: object) -> None:
        assert isinstance(payload, DocumentChange)
        seen.append(session.current_selection() == payload.selection)

    session.bus.subscribe(DOCUMENT_CHANGED, on_change)
    session.toggle_block_type(BlockTag.HEADING1)

    assert seen == [True]


def test_noop_leaves_version_and_selection_alone() -> None:
    session = make_session()
    host = session.host
    assert isinstance(host, MemoryHost)
    changes = collect_changes(session)
    session.select_offsets(3)
    updates = host.selection_updates

    session.toggle_inline_mark(InlineMarkTag.ITALIC)

    assert changes == []
    assert session.document.version == 0
    assert host.selection_updates == updates


def test_missing_selection_is_noop() -> None:
    session = make_session()
    changes = collect_changes(session)

    session.toggle_block_type(BlockTag.HEADING2)

    assert changes == []
    assert session.document.blocks[0].tag is BlockTag.PARAGRAPH


def test_reentrant_toggle_from_notification_is_skipped() -> None:
    session = make_session()
    session.select_offsets(0, 5)
    changes = collect_changes(session)
    session.bus.subscribe(
        DOCUMENT_CHANGED, lambda _payload: session.toggle_inline_mark(InlineMarkTag.BOLD)
    )

    session.toggle_inline_mark(InlineMarkTag.BOLD)

    assert len(changes) == 1
    assert session.document.outline() == (
        "root",
        [("p", [("strong", ["hello"]), " world"])],
    )


def test_other_toggle_may_run_from_notification() -> None:
    session = make_session()
    session.select_offsets(0, 5)
    changes = collect_changes(session)

    def promote(payload: object) -> None:
        if isinstance(payload, DocumentChange) and payload.label == "apply::strong":
            session.toggle_block_type(BlockTag.HEADING1)

    session.bus.subscribe(DOCUMENT_CHANGED, promote)
    session.toggle_inline_mark(InlineMarkTag.BOLD)

    assert [change.label for change in changes] == ["apply::strong", "apply::h1"]
    assert session.document.outline() == (
        "root",
        [("h1", [("strong", ["hello"])]), ("p", [" world"])],
    )


def test_configured_clear_block() -> None:
    session = make_session(clear_block_tag=BlockTag.HEADING2)
    session.select_offsets(0)

    session.toggle_block_type(BlockTag.HEADING1)
    session.toggle_block_type(BlockTag.HEADING1)

    assert session.document.blocks[0].tag is BlockTag.HEADING2


def test_active_tags_and_copy() -> None:
    host = MemoryHost(
        Document.of(
            build(BlockTag.HEADING1, "ab", build(InlineMarkTag.ITALIC, "cd")),
            build(BlockTag.PARAGRAPH, "ef"),
        )
    )
    session = EditingSession(host)

    session.select_offsets(3)
    assert session.active_tags() == {BlockTag.HEADING1, InlineMarkTag.ITALIC}

    session.select_offsets(1, 6)
    copied = session.copy_selection()
    assert [block.outline() for block in copied] == [
        ("h1", ["b", ("i", ["cd"])]),
        ("p", ["e"]),
    ]
    assert session.document.plain_text == "abcd\nef"


def test_mirror_reports_runs_and_offsets() -> None:
    session = make_session()
    session.select_offsets(0, 5)
    session.toggle_inline_mark(InlineMarkTag.BOLD)

    mirror = session.mirror()

    assert mirror.version == 1
    assert mirror.text == "hello world"
    assert mirror.selection == (0, 5)
    (block,) = mirror.blocks
    assert block.tag is BlockTag.PARAGRAPH
    assert [(run.text, run.marks) for run in block.runs] == [
        ("hello", frozenset({InlineMarkTag.BOLD})),
        (" world", frozenset()),
    ]


def test_external_change_is_announced() -> None:
    session = make_session()
    changes = collect_changes(session)
    pasted = build(BlockTag.PARAGRAPH, "pasted")
    session.document.append(pasted)

    change = session.notify_external_change("paste", added=[pasted])

    assert changes == [change]
    assert change.added == (pasted,)
    assert session.document.version == 1


def test_change_bus_unsubscribe() -> None:
    bus = ChangeBus()
    received: List[object] = []
    bus.subscribe("x", received.append)
    bus.emit("x", 1)
    bus.unsubscribe("x", received.append)
    bus.emit("x", 2)

    assert received == [1]


def test_selection_can_be_set_directly() -> None:
    session = make_session()
    leaf = session.document.first_text()
    assert leaf is not None

    session.select(Selection.between(leaf, 0, leaf, 2))

    assert session.mirror().selection == (0, 2)


def test_block_toggle_to_current_tag_announces_nothing() -> None:
    session = make_session()
    changes = collect_changes(session)
    session.select_offsets(2, 5)

    session.toggle_block_type(BlockTag.PARAGRAPH)

    assert changes == []
    assert session.document.version == 0
    assert session.document.outline() == ("root", [("p", ["hello world"])])
