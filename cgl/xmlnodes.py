"""The node tree of an XML document: elements, text, comments and the rest."""

from __future__ import annotations

import enum
from typing import Callable, Iterator, TypeVar

from cgl.xmlutil import (
    TextFlags,
    Whitespace,
    XMLError,
    XMLException,
    decode_text,
    is_name_start_char,
    parse_name,
    parse_text,
    skip_whitespace,
    to_bool,
    to_double,
    to_float,
    to_int,
    to_str,
    to_unsigned,
)

_T = TypeVar("_T")


def _as_text(value: str | bool | int | float) -> str:
    return value if isinstance(value, str) else to_str(value)


def _convert(converter: Callable[[str], _T], text: str, error: XMLError) -> _T:
    try:
        return converter(text)
    except ValueError:
        raise XMLException(error) from None


def _index_of(nodes: list[XMLNode], node: XMLNode) -> int:
    for index, candidate in enumerate(nodes):
        if candidate is node:
            return index
    raise ValueError("node is not a child of this node")


def _process_entities(document: XMLNode) -> bool:
    return getattr(document, "process_entities", True)


def _collapses_whitespace(document: XMLNode) -> bool:
    mode = getattr(document, "whitespace", Whitespace.PRESERVE_WHITESPACE)
    return mode is Whitespace.COLLAPSE_WHITESPACE


class ClosingType(enum.Enum):
    """How an element tag was closed."""

    OPEN = 0
    CLOSED = 1
    CLOSING = 2


class XMLVisitor:
    """Walks a node tree; every method returns True to keep walking."""

    def visit_enter(self, node: XMLNode) -> bool:
        """Called before the children of a document or element."""
        return True

    def visit_exit(self, node: XMLNode) -> bool:
        """Called after the children of a document or element."""
        return True

    def visit(self, node: XMLNode) -> bool:
        """Called for text, comments, declarations and unknown markup."""
        return True


class XMLNode:
    """A node with an ordered list of children.

    A node created without a document is its own document.
    """

    def __init__(self, document: XMLNode | None, value: str | None = "") -> None:
        self.document: XMLNode = document if document is not None else self
        self.parent: XMLNode | None = None
        self._children: list[XMLNode] = []
        self._value = value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def __iter__(self) -> Iterator[XMLNode]:
        return iter(tuple(self._children))

    @property
    def value(self) -> str | None:
        """The node's text: element name, text content, comment body."""
        return self._value

    def set_value(self, text: str) -> None:
        """Replace the node's value."""
        self._value = text

    @property
    def children(self) -> tuple[XMLNode, ...]:
        return tuple(self._children)

    @property
    def no_children(self) -> bool:
        return not self._children

    @property
    def first_child(self) -> XMLNode | None:
        return self._children[0] if self._children else None

    @property
    def last_child(self) -> XMLNode | None:
        return self._children[-1] if self._children else None

    @property
    def next_sibling(self) -> XMLNode | None:
        if self.parent is None:
            return None
        siblings = self.parent._children
        index = _index_of(siblings, self) + 1
        return siblings[index] if index < len(siblings) else None

    @property
    def previous_sibling(self) -> XMLNode | None:
        if self.parent is None:
            return None
        siblings = self.parent._children
        index = _index_of(siblings, self)
        return siblings[index - 1] if index > 0 else None

    def _check_document(self, node: XMLNode) -> None:
        if node.document is not self.document:
            raise ValueError("node belongs to another document")

    def _unlink(self, child: XMLNode) -> None:
        del self._children[_index_of(self._children, child)]
        child.parent = None

    def _detach(self, node: XMLNode) -> None:
        if node.parent is not None:
            node.parent._unlink(node)

    def delete_children(self) -> None:
        """Remove every child."""
        for child in self._children:
            child.parent = None
        self._children.clear()

    def delete_child(self, node: XMLNode) -> None:
        """Remove one child; raises ValueError if it is not a child."""
        if node.parent is not self:
            raise ValueError("node is not a child of this node")
        self._unlink(node)

    def insert_end_child(self, node: XMLNode) -> XMLNode:
        """Append ``node``, moving it from its old parent if it has one."""
        self._check_document(node)
        self._detach(node)
        self._children.append(node)
        node.parent = self
        return node

    def insert_first_child(self, node: XMLNode) -> XMLNode:
        """Prepend ``node``, moving it from its old parent if it has one."""
        self._check_document(node)
        self._detach(node)
        self._children.insert(0, node)
        node.parent = self
        return node

    def insert_after_child(self, after: XMLNode, node: XMLNode) -> XMLNode:
        """Insert ``node`` right after the child ``after``."""
        self._check_document(node)
        if after.parent is not self:
            raise ValueError("the reference node is not a child of this node")
        if node is after:
            raise ValueError("a node cannot be inserted after itself")
        if after is self._children[-1]:
            return self.insert_end_child(node)
        self._detach(node)
        self._children.insert(_index_of(self._children, after) + 1, node)
        node.parent = self
        return node

    @staticmethod
    def _first_element(
        nodes: Iterator[XMLNode] | list[XMLNode], name: str | None
    ) -> XMLElement | None:
        for node in nodes:
            if isinstance(node, XMLElement) and (name is None or node.name == name):
                return node
        return None

    def first_child_element(self, name: str | None = None) -> XMLElement | None:
        """First child element, optionally with the given name."""
        return self._first_element(self._children, name)

    def last_child_element(self, name: str | None = None) -> XMLElement | None:
        """Last child element, optionally with the given name."""
        return self._first_element(reversed(self._children), name)

    def next_sibling_element(self, name: str | None = None) -> XMLElement | None:
        """Next sibling element, optionally with the given name."""
        if self.parent is None:
            return None
        siblings = self.parent._children
        return self._first_element(siblings[_index_of(siblings, self) + 1:], name)

    def previous_sibling_element(self, name: str | None = None) -> XMLElement | None:
        """Previous sibling element, optionally with the given name."""
        if self.parent is None:
            return None
        siblings = self.parent._children
        before = siblings[:_index_of(siblings, self)]
        return self._first_element(reversed(before), name)

    def parse_deep(self, text: str, pos: int) -> tuple[int, str | None]:
        """Parse child nodes from ``text`` starting at ``pos``.

        Returns the position reached and the name of the closing tag that
        ended this level, or None if the text ran out. Raises XMLException.
        """
        document = self.document
        while pos < len(text):
            node, pos = identify(document, text, pos)
            if node is None:
                break
            pos, end_tag = node.parse_deep(text, pos)

            if isinstance(node, XMLDeclaration) and not document.no_children:
                raise XMLException(XMLError.XML_ERROR_PARSING_DECLARATION, node.value)

            if isinstance(node, XMLElement):
                if node.closing_type is ClosingType.CLOSING:
                    return pos, node.name
                if end_tag is None:
                    mismatch = node.closing_type is ClosingType.OPEN
                else:
                    mismatch = (
                        node.closing_type is not ClosingType.OPEN
                        or end_tag != node.name
                    )
                if mismatch:
                    raise XMLException(XMLError.XML_ERROR_MISMATCHED_ELEMENT, node.name)
            self.insert_end_child(node)
        return pos, None

    def accept(self, visitor: XMLVisitor) -> bool:
        """Enter, visit the children in order, then exit."""
        if visitor.visit_enter(self):
            for child in tuple(self._children):
                if not child.accept(visitor):
                    break
        return visitor.visit_exit(self)

    def shallow_clone(self, document: XMLNode | None = None) -> XMLNode | None:
        """Copy of this node without children; a plain node has none."""
        return None

    def shallow_equal(self, other: XMLNode) -> bool:
        """Compare this node with ``other``, ignoring children."""
        return False


class XMLText(XMLNode):
    """Character data, plain or CDATA."""

    def __init__(self, document: XMLNode | None, text: str = "", cdata: bool = False) -> None:
        super().__init__(document, text)
        self.cdata = cdata

    def parse_deep(self, text: str, pos: int) -> tuple[int, str | None]:
        if self.cdata:
            parsed = parse_text(text, pos, "]]>")
            if parsed is None:
                raise XMLException(XMLError.XML_ERROR_PARSING_CDATA, text[pos:])
            raw, end = parsed
            self._value = decode_text(raw, TextFlags.NEEDS_NEWLINE_NORMALIZATION)
            return end, None

        document = self.document
        flags = (
            TextFlags.TEXT_ELEMENT
            if _process_entities(document)
            else TextFlags.TEXT_ELEMENT_LEAVE_ENTITIES
        )
        if _collapses_whitespace(document):
            flags |= TextFlags.NEEDS_WHITESPACE_COLLAPSING
        parsed = parse_text(text, pos, "<")
        if parsed is None:
            raise XMLException(XMLError.XML_ERROR_PARSING_TEXT, text[pos:])
        raw, end = parsed
        self._value = decode_text(raw, flags)
        if end < len(text):
            return end - 1, None
        raise XMLException(XMLError.XML_ERROR_PARSING)

    def accept(self, visitor: XMLVisitor) -> bool:
        return visitor.visit(self)

    def shallow_clone(self, document: XMLNode | None = None) -> XMLText:
        return XMLText(document or self.document, self._value, self.cdata)

    def shallow_equal(self, other: XMLNode) -> bool:
        return isinstance(other, XMLText) and other.value == self._value


class _Markup(XMLNode):
    """A node whose body runs to a fixed terminator."""

    _END: str
    _ERROR: XMLError
    _FLAGS = TextFlags.NEEDS_NEWLINE_NORMALIZATION

    def __init__(self, document: XMLNode | None, text: str = "") -> None:
        super().__init__(document, text)

    def parse_deep(self, text: str, pos: int) -> tuple[int, str | None]:
        parsed = parse_text(text, pos, self._END)
        if parsed is None:
            raise XMLException(self._ERROR, text[pos:])
        raw, end = parsed
        self._value = decode_text(raw, self._FLAGS)
        return end, None

    def accept(self, visitor: XMLVisitor) -> bool:
        return visitor.visit(self)

    def shallow_clone(self, document: XMLNode | None = None) -> XMLNode:
        return type(self)(document or self.document, self._value)

    def shallow_equal(self, other: XMLNode) -> bool:
        return isinstance(other, type(self)) and other.value == self._value


class XMLComment(_Markup):
    """A comment, ``<!-- ... -->``."""

    _END = "-->"
    _ERROR = XMLError.XML_ERROR_PARSING_COMMENT
    _FLAGS = TextFlags.COMMENT


class XMLDeclaration(_Markup):
    """A declaration, ``<? ... ?>``."""

    _END = "?>"
    _ERROR = XMLError.XML_ERROR_PARSING_DECLARATION


class XMLUnknown(_Markup):
    """Markup that is kept but not interpreted, such as ``<!DOCTYPE ...>``."""

    _END = ">"
    _ERROR = XMLError.XML_ERROR_PARSING_UNKNOWN


class XMLAttribute:
    """A name and value pair of an element."""

    def __init__(self, name: str = "", value: str = "") -> None:
        self.name = name
        self.value = value

    def __repr__(self) -> str:
        return f"XMLAttribute({self.name!r}, {self.value!r})"

    def parse_deep(self, text: str, pos: int, process_entities: bool) -> int:
        """Parse ``name="value"`` at ``pos``; returns the position after it."""
        start = pos
        parsed = parse_name(text, pos)
        if parsed is None or parsed[1] >= len(text):
            raise XMLException(XMLError.XML_ERROR_PARSING_ATTRIBUTE, text[start:])
        self.name, pos = parsed
        pos = skip_whitespace(text, pos)
        if text[pos:pos + 1] != "=":
            raise XMLException(XMLError.XML_ERROR_PARSING_ATTRIBUTE, text[start:])
        pos = skip_whitespace(text, pos + 1)
        quote = text[pos:pos + 1]
        if quote not in ('"', "'"):
            raise XMLException(XMLError.XML_ERROR_PARSING_ATTRIBUTE, text[start:])
        parsed = parse_text(text, pos + 1, quote)
        if parsed is None:
            raise XMLException(XMLError.XML_ERROR_PARSING_ATTRIBUTE, text[start:])
        raw, pos = parsed
        flags = (
            TextFlags.ATTRIBUTE_VALUE
            if process_entities
            else TextFlags.ATTRIBUTE_VALUE_LEAVE_ENTITIES
        )
        self.value = decode_text(raw, flags)
        return pos

    def set_attribute(self, value: str | bool | int | float) -> None:
        """Set the value from text or from a number or boolean."""
        self.value = _as_text(value)

    def int_value(self) -> int:
        return _convert(to_int, self.value, XMLError.XML_WRONG_ATTRIBUTE_TYPE)

    def unsigned_value(self) -> int:
        return _convert(to_unsigned, self.value, XMLError.XML_WRONG_ATTRIBUTE_TYPE)

    def bool_value(self) -> bool:
        return _convert(to_bool, self.value, XMLError.XML_WRONG_ATTRIBUTE_TYPE)

    def float_value(self) -> float:
        return _convert(to_float, self.value, XMLError.XML_WRONG_ATTRIBUTE_TYPE)

    def double_value(self) -> float:
        return _convert(to_double, self.value, XMLError.XML_WRONG_ATTRIBUTE_TYPE)


class XMLElement(XMLNode):
    """An element with a name, attributes and children."""

    def __init__(self, document: XMLNode | None, name: str = "") -> None:
        super().__init__(document, name)
        self.closing_type = ClosingType.OPEN
        self._attributes: dict[str, XMLAttribute] = {}

    @property
    def name(self) -> str:
        return self._value

    @name.setter
    def name(self, name: str) -> None:
        self._value = name

    @property
    def attributes(self) -> tuple[XMLAttribute, ...]:
        return tuple(self._attributes.values())

    def find_attribute(self, name: str) -> XMLAttribute | None:
        return self._attributes.get(name)

    def attribute(self, name: str, value: str | None = None) -> str | None:
        """Value of attribute ``name``; if ``value`` is given, only when it matches."""
        found = self._attributes.get(name)
        if found is None or (value is not None and found.value != value):
            return None
        return found.value

    def set_attribute(self, name: str, value: str | bool | int | float) -> None:
        """Set an attribute, creating it at the end if it is new."""
        found = self._attributes.get(name)
        if found is None:
            found = self._attributes[name] = XMLAttribute(name)
        found.set_attribute(value)

    def delete_attribute(self, name: str) -> None:
        self._attributes.pop(name, None)

    def get_text(self) -> str | None:
        """Text of the first child if that child is a text node."""
        first = self.first_child
        return first.value if isinstance(first, XMLText) else None

    def set_text(self, value: str | bool | int | float) -> None:
        """Replace the leading text node, or insert one."""
        text = _as_text(value)
        first = self.first_child
        if isinstance(first, XMLText):
            first.set_value(text)
        else:
            self.insert_first_child(XMLText(self.document, text))

    def _typed_text(self, converter: Callable[[str], _T]) -> _T:
        text = self.get_text()
        if text is None:
            raise XMLException(XMLError.XML_NO_TEXT_NODE)
        return _convert(converter, text, XMLError.XML_CAN_NOT_CONVERT_TEXT)

    def int_text(self) -> int:
        return self._typed_text(to_int)

    def unsigned_text(self) -> int:
        return self._typed_text(to_unsigned)

    def bool_text(self) -> bool:
        return self._typed_text(to_bool)

    def float_text(self) -> float:
        return self._typed_text(to_float)

    def double_text(self) -> float:
        return self._typed_text(to_double)

    def parse_attributes(self, text: str, pos: int) -> int:
        """Read attributes up to the end of the tag; returns the position after it."""
        start = pos
        process = _process_entities(self.document)
        while True:
            pos = skip_whitespace(text, pos)
            if pos >= len(text):
                raise XMLException(XMLError.XML_ERROR_PARSING_ELEMENT, text[start:], self.name)
            ch = text[pos]
            if is_name_start_char(ch):
                attribute = XMLAttribute()
                try:
                    pos = attribute.parse_deep(text, pos, process)
                except XMLException:
                    raise XMLException(
                        XMLError.XML_ERROR_PARSING_ATTRIBUTE, text[start:]
                    ) from None
                if attribute.name in self._attributes:
                    raise XMLException(
                        XMLError.XML_ERROR_PARSING_ATTRIBUTE, text[start:], text[pos:]
                    )
                self._attributes[attribute.name] = attribute
            elif ch == ">":
                return pos + 1
            elif text.startswith("/>", pos):
                self.closing_type = ClosingType.CLOSED
                return pos + 2
            else:
                raise XMLException(XMLError.XML_ERROR_PARSING_ELEMENT, text[start:], text[pos:])

    def parse_deep(self, text: str, pos: int) -> tuple[int, str | None]:
        pos = skip_whitespace(text, pos)
        if text.startswith("/", pos):
            self.closing_type = ClosingType.CLOSING
            pos += 1
        parsed = parse_name(text, pos)
        if parsed is None:
            raise XMLException(XMLError.XML_ERROR_PARSING)
        self._value, pos = parsed
        pos = self.parse_attributes(text, pos)
        if pos >= len(text) or self.closing_type is not ClosingType.OPEN:
            return pos, None
        pos, end_tag = super().parse_deep(text, pos)
        if end_tag is None:
            raise XMLException(XMLError.XML_ERROR_PARSING)
        return pos, end_tag

    def shallow_clone(self, document: XMLNode | None = None) -> XMLElement:
        clone = XMLElement(document or self.document, self.name)
        for attribute in self._attributes.values():
            clone.set_attribute(attribute.name, attribute.value)
        return clone

    def shallow_equal(self, other: XMLNode) -> bool:
        if not isinstance(other, XMLElement) or other.name != self.name:
            return False
        mine = [a.value for a in self._attributes.values()]
        theirs = [a.value for a in other._attributes.values()]
        return mine == theirs


def identify(document: XMLNode, text: str, pos: int) -> tuple[XMLNode | None, int]:
    """Create an empty node for the markup at ``pos`` and the position of its body.

    Leading whitespace is skipped to find the markup, but belongs to a text
    node. Returns (None, end) when only whitespace remains.
    """
    start = pos
    pos = skip_whitespace(text, pos)
    if pos >= len(text):
        return None, pos
    if text.startswith("<?", pos):
        return XMLDeclaration(document), pos + 2
    if text.startswith("<!--", pos):
        return XMLComment(document), pos + 4
    if text.startswith("<![CDATA[", pos):
        return XMLText(document, cdata=True), pos + 9
    if text.startswith("<!", pos):
        return XMLUnknown(document), pos + 2
    if text.startswith("<", pos):
        return XMLElement(document), pos + 1
    return XMLText(document), start