import pytest

from cgl.color import Color, Spectrum


def test_from_hex_white():
    assert Color.from_hex("#ffffff") == Color.WHITE


def test_from_hex_hash_optional():
    assert Color.from_hex("ff00ff") == Color.from_hex("#ff00ff")


def test_from_hex_red_channel():
    assert Color.from_hex("#ff0000") == Color(1.0, 0.0, 0.0)


def test_from_hex_channel_scaling():
    c = Color.from_hex("#336699")
    assert c.r * 255 == pytest.approx(0x33)
    assert c.g * 255 == pytest.approx(0x66)
    assert c.b * 255 == pytest.approx(0x99)


def test_from_hex_invalid():
    with pytest.raises(ValueError):
        Color.from_hex("#zzzzzz")


def test_to_hex_white_and_black():
    assert Color.WHITE.to_hex() == "ffffff"
    assert Color.BLACK.to_hex() == "000"


def test_to_hex_clamps_channels():
    assert Color(2.0, -1.0, 1.0).to_hex() == Color(1.0, 0.0, 1.0).to_hex()


def test_from_bytes():
    assert Color.from_bytes(bytes([255, 0, 255])) == Color(1.0, 0.0, 1.0)


def test_from_bytes_too_short():
    with pytest.raises(ValueError):
        Color.from_bytes(b"\x01\x02")


def test_color_str():
    assert str(Color(1, 0, 0.5)) == "(r=1 g=0 b=0.5)"


def test_spectrum_str():
    assert str(Spectrum(0.25, 1, 0)) == "(r=0.25 g=1 b=0)"