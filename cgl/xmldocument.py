"""XML documents: parsing, loading, saving and printing of node trees."""

from __future__ import annotations

import os
import sys
from typing import NoReturn, TextIO

from cgl.xmlnodes import (
    XMLComment,
    XMLDeclaration,
    XMLElement,
    XMLNode,
    XMLText,
    XMLUnknown,
    XMLVisitor,
)
from cgl.xmlutil import (
    BOM,
    ENTITIES,
    Whitespace,
    XMLError,
    XMLException,
    read_bom,
    skip_whitespace,
    to_str,
)

DEFAULT_DECLARATION = 'xml version="1.0" encoding="UTF-8"'

_ENTITY_NAMES = {char: name for name, char in ENTITIES}
_RESTRICTED = frozenset("&<>")
_ERROR_CONTEXT_LEN = 19


def _as_text(value: str | bool | int | float) -> str:
    return value if isinstance(value, str) else to_str(value)


class XMLDocument(XMLNode):
    """The root of a node tree; creates nodes and records the last error."""

    def __init__(
        self,
        process_entities: bool = True,
        whitespace: Whitespace = Whitespace.PRESERVE_WHITESPACE,
    ) -> None:
        super().__init__(None, None)
        self.process_entities = process_entities
        self.whitespace = whitespace
        self.write_bom = False
        self.error_id = XMLError.XML_SUCCESS
        self.error_str1: str | None = None
        self.error_str2: str | None = None

    @property
    def error(self) -> bool:
        """True if the last operation failed."""
        return self.error_id != XMLError.XML_SUCCESS

    def _set_error(
        self, error: XMLError, str1: str | None = None, str2: str | None = None
    ) -> None:
        self.error_id = XMLError(error)
        self.error_str1 = str1
        self.error_str2 = str2

    def _record(self, exc: XMLException) -> None:
        self._set_error(exc.error, exc.str1, exc.str2)

    def _fail(
        self, error: XMLError, str1: str | None = None, str2: str | None = None
    ) -> NoReturn:
        exc = XMLException(error, str1, str2)
        self._record(exc)
        raise exc

    def clear(self) -> None:
        """Remove every node and forget any error."""
        self.delete_children()
        self._set_error(XMLError.XML_SUCCESS)

    def new_element(self, name: str) -> XMLElement:
        """A new element of this document, not yet in the tree."""
        return XMLElement(self, name)

    def new_comment(self, text: str) -> XMLComment:
        """A new comment of this document, not yet in the tree."""
        return XMLComment(self, text)

    def new_text(self, text: str) -> XMLText:
        """A new text node of this document, not yet in the tree."""
        return XMLText(self, text)

    def new_declaration(self, text: str | None = None) -> XMLDeclaration:
        """A new declaration; without text, the standard XML 1.0 UTF-8 one."""
        return XMLDeclaration(self, text if text else DEFAULT_DECLARATION)

    def new_unknown(self, text: str) -> XMLUnknown:
        """A new node for uninterpreted markup, not yet in the tree."""
        return XMLUnknown(self, text)

    def delete_node(self, node: XMLNode) -> None:
        """Take ``node`` out of the tree, wherever it is."""
        if node.document is not self:
            raise ValueError("node belongs to another document")
        if node.parent is not None:
            node.parent.delete_child(node)

    def _parse_text(self, text: str) -> None:
        pos = skip_whitespace(text, 0)
        body, self.write_bom = read_bom(text[pos:])
        if not body:
            self._fail(XMLError.XML_ERROR_EMPTY_DOCUMENT)
        try:
            self.parse_deep(body, 0)
        except XMLException as exc:
            self.delete_children()
            self._record(exc)
            raise

    def parse(self, text: str | bytes) -> None:
        """Replace the document's content with the parsed ``text``.

        Raises XMLException; the error is also kept in ``error_id``.
        """
        self.clear()
        if isinstance(text, (bytes, bytearray, memoryview)):
            try:
                text = bytes(text).decode("utf-8")
            except UnicodeDecodeError:
                self._fail(XMLError.XML_ERROR_PARSING)
        if not text:
            self._fail(XMLError.XML_ERROR_EMPTY_DOCUMENT)
        self._parse_text(text)

    def load_file(self, path: str | os.PathLike[str]) -> None:
        """Parse the UTF-8 file at ``path``."""
        self.clear()
        try:
            handle = open(path, "rb")
        except OSError:
            self._fail(XMLError.XML_ERROR_FILE_NOT_FOUND, os.fspath(path))
        try:
            with handle:
                data = handle.read()
        except OSError:
            self._fail(XMLError.XML_ERROR_FILE_READ_ERROR)
        if not data:
            self._fail(XMLError.XML_ERROR_EMPTY_DOCUMENT)
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            self._fail(XMLError.XML_ERROR_FILE_READ_ERROR)
        self._parse_text(text)

    def save_file(self, path: str | os.PathLike[str], compact: bool = False) -> None:
        """Write the document to ``path`` as UTF-8 text."""
        self._set_error(XMLError.XML_SUCCESS)
        try:
            handle = open(path, "w", encoding="utf-8")
        except OSError:
            self._fail(XMLError.XML_ERROR_FILE_COULD_NOT_BE_OPENED, os.fspath(path))
        with handle:
            self.print_to(XMLPrinter(handle, compact))

    def print_to(self, printer: XMLPrinter | None = None) -> None:
        """Send the document through ``printer``, or to standard output."""
        if printer is None:
            printer = XMLPrinter(sys.stdout)
        self.accept(printer)

    def error_name(self) -> str:
        """Symbolic name of the current error code."""
        return XMLError(self.error_id).name

    def print_error(self, file: TextIO | None = None) -> None:
        """Print a one-line description of the current error, if any."""
        if not self.error:
            return
        str1 = (self.error_str1 or "")[:_ERROR_CONTEXT_LEN]
        str2 = (self.error_str2 or "")[:_ERROR_CONTEXT_LEN]
        print(
            f"XMLDocument error id={int(self.error_id)} '{self.error_name()}' "
            f"str1={str1} str2={str2}",
            file=file if file is not None else sys.stdout,
        )


class XMLPrinter(XMLVisitor):
    """Writes XML text, either to a file object or to an internal buffer."""

    def __init__(
        self, file: TextIO | None = None, compact: bool = False, depth: int = 0
    ) -> None:
        self._file = file
        self._buffer: list[str] = []
        self._compact_mode = compact
        self._depth = depth
        self._text_depth = -1
        self._element_just_opened = False
        self._first_element = True
        self._stack: list[str] = []
        self.process_entities = True

    def _print(self, text: str) -> None:
        if self._file is not None:
            self._file.write(text)
        else:
            self._buffer.append(text)

    def _print_space(self, depth: int) -> None:
        self._print("    " * depth)

    def _print_string(self, text: str, restricted: bool) -> None:
        if not self.process_entities:
            self._print(text)
            return
        flagged = _RESTRICTED if restricted else _ENTITY_NAMES.keys()
        self._print(
            "".join(f"&{_ENTITY_NAMES[c]};" if c in flagged else c for c in text)
        )

    def _seal_element_if_just_opened(self) -> None:
        if self._element_just_opened:
            self._element_just_opened = False
            self._print(">")

    def _element_compact(self, element: XMLElement) -> bool:
        return self._compact_mode

    def _separate(self) -> None:
        if self._text_depth < 0 and not self._first_element and not self._compact_mode:
            self._print("\n")
            self._print_space(self._depth)
        self._first_element = False

    def push_header(self, write_bom: bool, write_dec: bool) -> None:
        """Write a byte order mark and/or an XML declaration."""
        if write_bom:
            self._print(BOM)
        if write_dec:
            self.push_declaration('xml version="1.0"')

    def open_element(self, name: str, compact_mode: bool = False) -> None:
        """Start an element; attributes may follow until content is pushed."""
        self._seal_element_if_just_opened()
        self._stack.append(name)
        if self._text_depth < 0 and not self._first_element and not compact_mode:
            self._print("\n")
        if not compact_mode:
            self._print_space(self._depth)
        self._print(f"<{name}")
        self._element_just_opened = True
        self._first_element = False
        self._depth += 1

    def push_attribute(self, name: str, value: str | bool | int | float) -> None:
        """Add an attribute to the element just opened."""
        self._print(f' {name}="')
        self._print_string(_as_text(value), False)
        self._print('"')

    def close_element(self, compact_mode: bool = False) -> None:
        """Close the innermost open element."""
        self._depth -= 1
        name = self._stack.pop()
        if self._element_just_opened:
            self._print("/>")
        else:
            if self._text_depth < 0 and not compact_mode:
                self._print("\n")
                self._print_space(self._depth)
            self._print(f"</{name}>")
        if self._text_depth == self._depth:
            self._text_depth = -1
        if self._depth == 0 and not compact_mode:
            self._print("\n")
        self._element_just_opened = False

    def push_text(self, text: str | bool | int | float, cdata: bool = False) -> None:
        """Write character data, escaped or as a CDATA section."""
        self._text_depth = self._depth - 1
        self._seal_element_if_just_opened()
        text = _as_text(text)
        if cdata:
            self._print(f"<![CDATA[{text}]]>")
        else:
            self._print_string(text, True)

    def push_comment(self, comment: str) -> None:
        """Write a comment."""
        self._seal_element_if_just_opened()
        self._separate()
        self._print(f"<!--{comment}-->")

    def push_declaration(self, value: str) -> None:
        """Write a declaration."""
        self._seal_element_if_just_opened()
        self._separate()
        self._print(f"<?{value}?>")

    def push_unknown(self, value: str) -> None:
        """Write uninterpreted markup."""
        self._seal_element_if_just_opened()
        self._separate()
        self._print(f"<!{value}>")

    def visit_enter(self, node: XMLNode) -> bool:
        if isinstance(node, XMLDocument):
            self.process_entities = node.process_entities
            if node.write_bom:
                self.push_header(True, False)
        elif isinstance(node, XMLElement):
            parent = node.parent
            if isinstance(parent, XMLElement):
                compact = self._element_compact(parent)
            else:
                compact = self._compact_mode
            self.open_element(node.name, compact)
            for attribute in node.attributes:
                self.push_attribute(attribute.name, attribute.value)
        return True

    def visit_exit(self, node: XMLNode) -> bool:
        if isinstance(node, XMLElement):
            self.close_element(self._element_compact(node))
        return True

    def visit(self, node: XMLNode) -> bool:
        if isinstance(node, XMLText):
            self.push_text(node.value, node.cdata)
        elif isinstance(node, XMLComment):
            self.push_comment(node.value)
        elif isinstance(node, XMLDeclaration):
            self.push_declaration(node.value)
        elif isinstance(node, XMLUnknown):
            self.push_unknown(node.value)
        return True

    def getvalue(self) -> str:
        """Text written so far when printing to the internal buffer."""
        return "".join(self._buffer)