import base64

import pytest

from cgl.base64codec import base64_decode, base64_encode

SAMPLES = [
    b"",
    b"M",
    b"Ma",
    b"Man",
    b"hello, world",
    bytes(range(256)),
    b"\x00\xff\x00\xff\xfe",
]


def test_known_value():
    assert base64_encode(b"Man") == "TWFu"


@pytest.mark.parametrize("data", SAMPLES)
def test_encode_matches_standard(data):
    assert base64_encode(data) == base64.b64encode(data).decode("ascii")


@pytest.mark.parametrize("data", SAMPLES)
def test_round_trip(data):
    assert base64_decode(base64_encode(data)) == data


def test_encode_accepts_bytearray():
    data = bytearray(b"abcdef")
    assert base64_encode(data) == base64_encode(bytes(data))


def test_encode_empty_is_empty():
    assert base64_encode(b"") == ""


@pytest.mark.parametrize("data", SAMPLES)
def test_decode_without_padding(data):
    encoded = base64_encode(data).rstrip("=")
    assert base64_decode(encoded) == data


def test_decode_stops_at_padding():
    encoded = base64_encode(b"abc")
    assert base64_decode(encoded + "=" + encoded) == b"abc"


def test_decode_stops_at_invalid_character():
    encoded = base64_encode(b"abcdef")
    assert base64_decode(encoded + "!" + base64_encode(b"xyz")) == b"abcdef"


def test_decode_stops_at_whitespace():
    first = base64_encode(b"abc")
    assert base64_decode(first + "\n" + first) == b"abc"


def test_decode_drops_single_trailing_character():
    encoded = base64_encode(b"abc")
    assert base64_decode(encoded + "Q") == b"abc"


def test_decode_accepts_bytes():
    data = b"binary\x00data"
    assert base64_decode(base64_encode(data).encode("ascii")) == data


def test_decode_empty_and_garbage():
    assert base64_decode("") == b""
    assert base64_decode("!!!!") == b""