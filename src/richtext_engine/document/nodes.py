"""Document tree model: text leaves, tagged elements, and structural edits.

Nodes keep a back-reference to their parent so split and wrap operations
can walk upward from a text leaf. Node identity is object identity; two
separately built ``Text("a")`` leaves never compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .tags import BlockTag, Tag, is_block_tag

Outline = Union[str, Tuple[str, list]]


@dataclass(eq=False)
class Node:
    """Common base for leaves and elements."""

    parent: Optional["Element"] = field(
        default=None, init=False, repr=False, compare=False
    )

    @property
    def text_content(self) -> str:  # pragma: no cover - abstract override
        raise NotImplementedError

    def clone(self, *, deep: bool = True) -> "Node":  # pragma: no cover
        raise NotImplementedError

    def outline(self) -> Outline:  # pragma: no cover - abstract override
        raise NotImplementedError

    def ancestors(self) -> Iterator["Element"]:
        """Yield parents from the nearest one up to the top of the tree."""

        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def detach(self) -> "Node":
        if self.parent is not None:
            self.parent.remove(self)
        return self


@dataclass(eq=False)
class Text(Node):
    """Leaf owning a mutable string."""

    content: str = ""

    @property
    def text_content(self) -> str:
        return self.content

    def clone(self, *, deep: bool = True) -> "Text":
        del deep
        return Text(self.content)

    def outline(self) -> Outline:
        return self.content


@dataclass(eq=False)
class Element(Node):
    """Tagged node with an ordered child list (reading order)."""

    tag: Optional[Tag] = None
    children: List[Node] = field(default_factory=list)
    attributes: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        adopted = list(self.children)
        self.children = []
        for child in adopted:
            self.append(child)

    @property
    def text_content(self) -> str:
        return "".join(leaf.content for leaf in self.iter_text())

    @property
    def is_block(self) -> bool:
        return is_block_tag(self.tag)

    def index(self, child: Node) -> int:
        for position, candidate in enumerate(self.children):
            if candidate is child:
                return position
        raise ValueError("node is not a child of this element")

    def append(self, child: Node) -> Node:
        child.detach()
        child.parent = self
        self.children.append(child)
        return child

    def extend(self, children: Iterable[Node]) -> None:
        for child in list(children):
            self.append(child)

    def insert(self, index: int, child: Node) -> Node:
        child.detach()
        child.parent = self
        self.children.insert(index, child)
        return child

    def insert_before(self, child: Node, reference: Node) -> Node:
        if child is reference:
            return child
        child.detach()
        return self.insert(self.index(reference), child)

    def remove(self, child: Node) -> Node:
        del self.children[self.index(child)]
        child.parent = None
        return child

    def replace(self, old: Node, new_nodes: Sequence[Node]) -> None:
        """Swap ``old`` for ``new_nodes`` in place, keeping their order.

        ``new_nodes`` may include children of ``old``; they are moved.
        """

        replacements = list(new_nodes)
        for node in replacements:
            node.detach()
        position = self.index(old)
        self.remove(old)
        for offset, node in enumerate(replacements):
            node.parent = self
            self.children.insert(position + offset, node)

    def clone_shallow(self) -> "Element":
        return Element(tag=self.tag, attributes=dict(self.attributes))

    def clone(self, *, deep: bool = True) -> "Element":
        copy = self.clone_shallow()
        if deep:
            for child in self.children:
                copy.append(child.clone(deep=True))
        return copy

    def contains(self, node: Optional[Node]) -> bool:
        """True when ``node`` is this element or one of its descendants."""

        if node is None:
            return False
        if node is self:
            return True
        return any(ancestor is self for ancestor in node.ancestors())

    def iter_descendants(self) -> Iterator[Node]:
        """Depth-first, reading-order traversal excluding ``self``."""

        stack: List[Node] = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, Element):
                stack.extend(reversed(node.children))

    def iter_text(self) -> Iterator[Text]:
        for node in self.iter_descendants():
            if isinstance(node, Text):
                yield node

    def first_text(self) -> Optional[Text]:
        return next(self.iter_text(), None)

    def last_text(self) -> Optional[Text]:
        leaves = list(self.iter_text())
        return leaves[-1] if leaves else None

    def outline(self) -> Outline:
        name = self.tag.value if self.tag is not None else "root"
        return (name, [child.outline() for child in self.children])


@dataclass(eq=False)
class Document(Element):
    """Editable root whose direct children are the block elements."""

    version: int = 0

    @classmethod
    def of(cls, *blocks: Element) -> "Document":
        return cls(children=list(blocks))

    @classmethod
    def from_text(cls, text: str) -> "Document":
        """One paragraph per line of ``text``."""

        return cls.of(*(build(BlockTag.PARAGRAPH, line) for line in text.split("\n")))

    @property
    def blocks(self) -> Tuple[Element, ...]:
        return tuple(child for child in self.children if isinstance(child, Element))

    @property
    def plain_text(self) -> str:
        return "\n".join(block.text_content for block in self.blocks)

    def clone_shallow(self) -> "Document":
        return Document(attributes=dict(self.attributes), version=self.version)


def build(tag: Tag, *children: Union[Node, str]) -> Element:
    """Create an element from child nodes and/or plain strings."""

    nodes: List[Node] = [Text(child) if isinstance(child, str) else child for child in children]
    return Element(tag=tag, children=nodes)


def retagged(element: Element, tag: Tag) -> Element:
    """Return a new element with ``tag`` that takes over ``element``'s children."""

    replacement = Element(tag=tag)
    replacement.extend(list(element.children))
    return replacement


def rename(element: Element, tag: Tag) -> Element:
    """Replace ``element`` in its parent by an element carrying ``tag``.

    Children (and therefore every text leaf) move over unchanged, so
    boundary points anchored inside stay valid.
    """

    if element.tag is tag:
        return element
    parent = element.parent
    replacement = retagged(element, tag)
    if parent is not None:
        parent.replace(element, [replacement])
    return replacement


def prune_empty(element: Element) -> None:
    """Drop every descendant whose text content is empty."""

    stack: List[Element] = [element]
    while stack:
        current = stack.pop()
        for child in list(current.children):
            if not child.text_content:
                current.remove(child)
            elif isinstance(child, Element):
                stack.append(child)


def top_level_block(root: Element, node: Node) -> Optional[Element]:
    """Return the direct child of ``root`` that holds ``node``."""

    current: Node = node
    while current.parent is not None and current.parent is not root:
        current = current.parent
    if current.parent is root and isinstance(current, Element):
        return current
    return None


def nearest_tagged(node: Node, tag: Tag, *, stop: Element) -> Optional[Element]:
    """Find the closest element tagged ``tag`` among ``node`` and its ancestors.

    The search ends before ``stop``.
    """

    candidates = [node, *node.ancestors()]
    for candidate in candidates:
        if candidate is stop:
            return None
        if isinstance(candidate, Element) and candidate.tag is tag:
            return candidate
    return None


def has_ancestor_tagged(node: Node, tag: Tag, *, stop: Element) -> bool:
    for ancestor in node.ancestors():
        if ancestor is stop:
            return False
        if ancestor.tag is tag:
            return True
    return False


def common_ancestor(first: Node, second: Node) -> Optional[Element]:
    lineage = {id(ancestor) for ancestor in first.ancestors()}
    if isinstance(first, Element):
        lineage.add(id(first))
    candidates = [second] if isinstance(second, Element) else []
    candidates.extend(second.ancestors())
    for candidate in candidates:
        if id(candidate) in lineage:
            return candidate
    return None


__all__ = [
    "Node",
    "Text",
    "Element",
    "Document",
    "Outline",
    "build",
    "retagged",
    "rename",
    "prune_empty",
    "top_level_block",
    "nearest_tagged",
    "has_ancestor_tagged",
    "common_ancestor",
]
