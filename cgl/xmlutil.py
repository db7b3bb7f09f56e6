"""Character classes, text decoding and value conversion for the XML reader."""

from __future__ import annotations

import enum
import re
import struct

_WHITESPACE = " \t\n\v\f\r"
_WHITESPACE_RUN = re.compile(r"[ \t\n\v\f\r]+")
_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_FLOAT = re.compile(
    r"[ \t\n\v\f\r]*([+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_DEC_DIGITS = frozenset("0123456789")

BOM = "\ufeff"

# Entity names and the characters they stand for, in lookup order.
ENTITIES: tuple[tuple[str, str], ...] = (
    ("quot", '"'),
    ("amp", "&"),
    ("apos", "'"),
    ("lt", "<"),
    ("gt", ">"),
)


class XMLError(enum.IntEnum):
    """Error codes reported by the XML reader and writer."""

    XML_SUCCESS = 0
    XML_NO_ATTRIBUTE = 1
    XML_WRONG_ATTRIBUTE_TYPE = 2
    XML_ERROR_FILE_NOT_FOUND = 3
    XML_ERROR_FILE_COULD_NOT_BE_OPENED = 4
    XML_ERROR_FILE_READ_ERROR = 5
    XML_ERROR_ELEMENT_MISMATCH = 6
    XML_ERROR_PARSING_ELEMENT = 7
    XML_ERROR_PARSING_ATTRIBUTE = 8
    XML_ERROR_IDENTIFYING_TAG = 9
    XML_ERROR_PARSING_TEXT = 10
    XML_ERROR_PARSING_CDATA = 11
    XML_ERROR_PARSING_COMMENT = 12
    XML_ERROR_PARSING_DECLARATION = 13
    XML_ERROR_PARSING_UNKNOWN = 14
    XML_ERROR_EMPTY_DOCUMENT = 15
    XML_ERROR_MISMATCHED_ELEMENT = 16
    XML_ERROR_PARSING = 17
    XML_CAN_NOT_CONVERT_TEXT = 18
    XML_NO_TEXT_NODE = 19
    XML_NO_ERROR = 0


class XMLException(Exception):
    """An XML error carrying its code and up to two context strings."""

    def __init__(
        self, error: XMLError, str1: str | None = None, str2: str | None = None
    ) -> None:
        self.error = XMLError(error)
        self.str1 = str1
        self.str2 = str2
        super().__init__(str(self))

    def __str__(self) -> str:
        return (
            f"XMLDocument error id={int(self.error)} '{self.error.name}' "
            f"str1={self.str1 or ''} str2={self.str2 or ''}"
        )


class Whitespace(enum.Enum):
    """How whitespace in text nodes is treated."""

    PRESERVE_WHITESPACE = enum.auto()
    COLLAPSE_WHITESPACE = enum.auto()


class TextFlags(enum.IntFlag):
    """Processing steps applied when raw text is decoded."""

    NONE = 0
    NEEDS_ENTITY_PROCESSING = 0x01
    NEEDS_NEWLINE_NORMALIZATION = 0x02
    NEEDS_WHITESPACE_COLLAPSING = 0x04
    TEXT_ELEMENT = NEEDS_ENTITY_PROCESSING | NEEDS_NEWLINE_NORMALIZATION
    TEXT_ELEMENT_LEAVE_ENTITIES = NEEDS_NEWLINE_NORMALIZATION
    ATTRIBUTE_NAME = 0
    ATTRIBUTE_VALUE = NEEDS_ENTITY_PROCESSING | NEEDS_NEWLINE_NORMALIZATION
    ATTRIBUTE_VALUE_LEAVE_ENTITIES = NEEDS_NEWLINE_NORMALIZATION
    COMMENT = NEEDS_NEWLINE_NORMALIZATION


def is_whitespace(ch: str) -> bool:
    """True for an ASCII whitespace character."""
    return len(ch) == 1 and ch in _WHITESPACE


def is_name_start_char(ch: str) -> bool:
    """True if ``ch`` may begin an element or attribute name."""
    if len(ch) != 1:
        return False
    return ord(ch) >= 128 or (ch.isascii() and ch.isalpha()) or ch in ":_"


def is_name_char(ch: str) -> bool:
    """True if ``ch`` may appear inside an element or attribute name."""
    if len(ch) != 1:
        return False
    return is_name_start_char(ch) or ch in _DEC_DIGITS or ch in ".-"


def skip_whitespace(text: str, pos: int) -> int:
    """Index of the first non-whitespace character at or after ``pos``."""
    n = len(text)
    while pos < n and text[pos] in _WHITESPACE:
        pos += 1
    return pos


def read_bom(text: str) -> tuple[str, bool]:
    """Strip a leading byte order mark; return the rest and whether one was there."""
    if text.startswith(BOM):
        return text[len(BOM):], True
    return text, False


def convert_utf32_to_utf8(code: int) -> bytes:
    """UTF-8 bytes of a code point; empty for values of 0x200000 and above."""
    if code < 0x80:
        length = 1
    elif code < 0x800:
        length = 2
    elif code < 0x10000:
        length = 3
    elif code < 0x200000:
        length = 4
    else:
        return b""
    first_mark = (0x00, 0x00, 0xC0, 0xE0, 0xF0)[length]
    tail = []
    for _ in range(length - 1):
        tail.append((code | 0x80) & 0xBF)
        code >>= 6
    return bytes([code | first_mark, *reversed(tail)])


def get_character_ref(text: str, pos: int) -> tuple[str, int] | None:
    """Decode a numeric character reference starting with ``&`` at ``pos``.

    Returns the decoded text and the index just past the reference, or None
    if the reference is malformed. Code points beyond Unicode decode to "".
    When ``pos`` does not start a numeric reference, returns ("", pos + 1).
    """
    if text[pos + 1:pos + 2] != "#" or pos + 2 >= len(text):
        return "", pos + 1
    if text[pos + 2] == "x":
        start, stop_char, base, allowed = pos + 3, "x", 16, _HEX_DIGITS
        if start >= len(text):
            return None
    else:
        start, stop_char, base, allowed = pos + 2, "#", 10, _DEC_DIGITS
    semicolon = text.find(";", start)
    if semicolon < 0:
        return None
    digits = text[start:semicolon].rsplit(stop_char, 1)[-1]
    if not set(digits) <= allowed:
        return None
    code = int(digits, base) if digits else 0
    value = chr(code) if code <= 0x10FFFF else ""
    return value, semicolon + 1


def parse_text(text: str, pos: int, end_tag: str) -> tuple[str, int] | None:
    """Raw text from ``pos`` up to ``end_tag`` and the index past the tag.

    Returns None if the end tag does not occur.
    """
    if not end_tag:
        raise ValueError("end_tag must not be empty")
    end = text.find(end_tag, pos)
    if end < 0:
        return None
    return text[pos:end], end + len(end_tag)


def parse_name(text: str, pos: int) -> tuple[str, int] | None:
    """A name starting at ``pos`` and the index after it, or None if none starts there."""
    if pos >= len(text) or not is_name_start_char(text[pos]):
        return None
    end = pos + 1
    n = len(text)
    while end < n and is_name_char(text[end]):
        end += 1
    return text[pos:end], end


def collapse_whitespace(text: str) -> str:
    """Trim whitespace at both ends and replace inner runs with one space."""
    return " ".join(part for part in _WHITESPACE_RUN.split(text) if part)


def _entity_at(raw: str, pos: int) -> tuple[str, int] | None:
    for name, char in ENTITIES:
        if raw.startswith(name + ";", pos + 1):
            return char, pos + len(name) + 2
    return None


def decode_text(raw: str, flags: TextFlags | int) -> str:
    """Apply newline normalization, entity decoding and whitespace collapsing."""
    flags = TextFlags(flags)
    normalize = bool(flags & TextFlags.NEEDS_NEWLINE_NORMALIZATION)
    entities = bool(flags & TextFlags.NEEDS_ENTITY_PROCESSING)
    out: list[str] = []
    i = 0
    n = len(raw)
    while i < n:
        c = raw[i]
        nxt = raw[i + 1:i + 2]
        if normalize and c == "\r":
            i += 2 if nxt == "\n" else 1
            out.append("\n")
        elif normalize and c == "\n":
            i += 2 if nxt == "\r" else 1
            out.append("\n")
        elif entities and c == "&":
            found = get_character_ref(raw, i) if nxt == "#" else _entity_at(raw, i)
            if found is None:
                out.append("&")
                i += 1
            else:
                value, i = found
                out.append(value)
        else:
            out.append(c)
            i += 1
    result = "".join(out)
    if flags & TextFlags.NEEDS_WHITESPACE_COLLAPSING:
        result = collapse_whitespace(result)
    return result


def to_str(value: bool | int | float) -> str:
    """Text form of a boolean, integer or floating-point value."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return "%d" % value
    if isinstance(value, float):
        return "%.17g" % value
    raise TypeError(f"cannot convert {type(value).__name__} to text")


def _leading_int(text: str) -> int:
    match = _INT.match(text)
    if match is None:
        raise ValueError(f"not an integer: {text!r}")
    return int(match.group(1))


def to_int(text: str) -> int:
    """Leading signed 32-bit integer of ``text``; trailing characters are ignored."""
    value = _leading_int(text)
    if not -(2**31) <= value < 2**31:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def to_unsigned(text: str) -> int:
    """Leading unsigned 32-bit integer of ``text``; a minus sign wraps around."""
    value = _leading_int(text)
    if abs(value) >= 2**32:
        raise ValueError(f"integer out of range: {text!r}")
    return value % 2**32


def to_bool(text: str) -> bool:
    """An integer (non-zero is true) or the words ``true`` and ``false``."""
    try:
        return to_int(text) != 0
    except ValueError:
        pass
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError(f"not a boolean: {text!r}")


def to_double(text: str) -> float:
    """Leading floating-point number of ``text``."""
    match = _FLOAT.match(text)
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    return float(match.group(1))


def to_float(text: str) -> float:
    """Leading floating-point number of ``text`` rounded to single precision."""
    value = to_double(text)
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return float("inf") if value > 0 else float("-inf")