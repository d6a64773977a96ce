# api/services/scripture/xml_tree.py
"""
Parser-neutral document tree for the XML decoders.

ElementTree keeps inter-element text in `.tail`, which makes sibling walks
awkward. The decoders work on this tree instead, where text is an ordinary
child node sitting between element siblings, tags have their namespace
stripped, and every node knows its parent.
"""

import itertools
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Iterator, Optional

from .errors import DecodeFailure

ELEMENT = "element"
TEXT = "text"


@dataclass(eq=False)
class Node:
    kind: str
    tag: str = ""
    attrs: dict = field(default_factory=dict)
    children: list = field(default_factory=list)
    text: str = ""
    parent: Optional["Node"] = field(default=None, repr=False)
    # Position within parent.children
    index: int = field(default=0, repr=False)

    @property
    def is_element(self) -> bool:
        return self.kind == ELEMENT

    @property
    def name(self) -> str:
        """Lowercased local tag name ('' for text nodes)."""
        return self.tag.lower()

    def attr(self, *names: str) -> Optional[str]:
        """Return the first non-empty attribute among `names`."""
        for name in names:
            value = self.attrs.get(name)
            if value:
                return value
        return None

    def has_attr(self, name: str) -> bool:
        return name in self.attrs

    def elements(self) -> list:
        """Direct element children."""
        return [c for c in self.children if c.kind == ELEMENT]

    def iter(self) -> Iterator["Node"]:
        """Depth-first over this node and all descendant elements."""
        stack = [self]
        while stack:
            node = stack.pop()
            if node.kind != ELEMENT:
                continue
            yield node
            stack.extend(reversed(node.children))

    def find_all(self, name: str) -> list:
        """All descendant elements (excluding self) whose local name matches, case-insensitively."""
        name = name.lower()
        return [n for n in self.iter() if n is not self and n.name == name]

    def find(self, name: str) -> Optional["Node"]:
        name = name.lower()
        for node in self.iter():
            if node is not self and node.name == name:
                return node
        return None

    def text_content(self) -> str:
        """Concatenated text of this node and all its descendants."""
        if self.kind == TEXT:
            return self.text
        parts = []
        stack = [self]
        while stack:
            node = stack.pop()
            if node.kind == TEXT:
                parts.append(node.text)
            else:
                stack.extend(reversed(node.children))
        return "".join(parts)

    def append(self, child: "Node") -> "Node":
        child.parent = self
        child.index = len(self.children)
        self.children.append(child)
        return child

    def following_siblings(self) -> Iterator["Node"]:
        if self.parent is None:
            return iter(())
        return itertools.islice(self.parent.children, self.index + 1, None)


def _local(name: str) -> str:
    # "{http://www.bibletechnologies.net/2003/OSIS/namespace}verse" -> "verse"
    return name.rsplit("}", 1)[-1] if name.startswith("{") else name


def _convert(element: ET.Element) -> Node:
    node = Node(
        kind=ELEMENT,
        tag=_local(element.tag),
        attrs={_local(k): v for k, v in element.attrib.items()},
    )
    if element.text:
        node.append(Node(kind=TEXT, text=element.text))
    for child in element:
        # Comments and processing instructions carry no verse text
        if isinstance(child.tag, str):
            node.append(_convert(child))
        if child.tail:
            node.append(Node(kind=TEXT, text=child.tail))
    return node


def parse_document(content: str) -> Node:
    """
    Parse XML text into a Node tree and return the root element.

    Raises:
        DecodeFailure: If the document is not well-formed XML
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise DecodeFailure(f"Malformed XML: {e}")
    return _convert(root)


def normalize_space(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return " ".join(text.split())
