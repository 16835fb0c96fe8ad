import pytest

from aardvark_pay import compact_u16
from aardvark_pay.errors import InvalidLength


@pytest.mark.parametrize(
    "value, encoded",
    [
        (0, b"\x00"),
        (1, b"\x01"),
        (127, b"\x7f"),
        (128, b"\x80\x01"),
        (255, b"\xff\x01"),
        (16383, b"\xff\x7f"),
        (16384, b"\x80\x80\x01"),
        (0xFFFF, b"\xff\xff\x03"),
    ],
)
def test_known_encodings(value, encoded):
    assert compact_u16.encode(value) == encoded
    assert compact_u16.decode(encoded) == (value, len(encoded))


def test_round_trip_small_range():
    for value in range(20001):
        encoded = compact_u16.encode(value)
        expected_len = 1 if value < 128 else 2 if value < 16384 else 3
        assert len(encoded) == expected_len
        assert compact_u16.decode(encoded) == (value, expected_len)


def test_decode_at_offset_ignores_trailing_bytes():
    data = b"\xaa\xaa" + compact_u16.encode(300) + b"\x05"
    assert compact_u16.decode(data, 2) == (300, 2)


@pytest.mark.parametrize("value", [-1, 0x10000, 2**32])
def test_encode_rejects_out_of_range(value):
    with pytest.raises(InvalidLength):
        compact_u16.encode(value)


@pytest.mark.parametrize("data", [b"", b"\x80", b"\xff\xff", b"\x80\x80\x80", b"\xff\xff\x04"])
def test_decode_rejects_malformed(data):
    with pytest.raises(InvalidLength):
        compact_u16.decode(data)


@pytest.mark.parametrize("data", [b"\x80\x00", b"\xff\x00", b"\xff\x80\x00", b"\x80\x80\x00"])
def test_decode_rejects_alias_encodings(data):
    with pytest.raises(InvalidLength, match="alias encoding"):
        compact_u16.decode(data)
