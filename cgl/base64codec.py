"""Base64 encoding and a lenient base64 decoder."""

from __future__ import annotations

import base64
import string
from itertools import takewhile

_ALPHABET = frozenset(string.ascii_letters + string.digits + "+/")


def base64_encode(data: bytes | bytearray | memoryview) -> str:
    """Encode ``data`` with the standard alphabet and ``=`` padding."""
    return base64.b64encode(bytes(data)).decode("ascii")


def base64_decode(encoded: str | bytes) -> bytes:
    """Decode base64 text.

    Decoding stops at the first ``=`` or at the first character outside the
    base64 alphabet; everything after it is ignored. A trailing group of a
    single character carries no whole byte and is dropped.
    """
    if isinstance(encoded, (bytes, bytearray, memoryview)):
        encoded = bytes(encoded).decode("latin-1")
    valid = "".join(takewhile(_ALPHABET.__contains__, encoded))
    if len(valid) % 4 == 1:
        valid = valid[:-1]
    padded = valid + "=" * (-len(valid) % 4)
    return base64.b64decode(padded)