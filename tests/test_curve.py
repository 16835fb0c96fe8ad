import hashlib

import pytest
from solders.pubkey import Pubkey

from aardvark_pay.curve import P, is_on_curve
from aardvark_pay.errors import InvalidKeyLength

# Compressed ed25519 base point (y = 4/5).
BASE_POINT = bytes.fromhex("5866666666666666666666666666666666666666666666666666666666666666")


def test_identity_point_is_on_curve():
    # y = 1 gives x^2 = 0.
    assert is_on_curve(b"\x01" + bytes(31))


def test_base_point_is_on_curve():
    assert is_on_curve(BASE_POINT)


def test_sign_bit_is_ignored_for_membership():
    flipped = bytearray(BASE_POINT)
    flipped[31] |= 0x80
    assert is_on_curve(bytes(flipped))


def test_non_canonical_y_is_rejected():
    assert not is_on_curve(P.to_bytes(32, "little"))
    assert not is_on_curve((P + 1).to_bytes(32, "little"))


def test_matches_reference_for_hashed_vectors():
    seen = set()
    for i in range(128):
        candidate = hashlib.sha256(b"curve-vector-%d" % i).digest()
        expected = Pubkey.from_bytes(candidate).is_on_curve()
        seen.add(expected)
        assert is_on_curve(candidate) is expected, candidate.hex()
    assert seen == {True, False}


def test_accepts_pubkey_objects():
    pubkey = Pubkey.from_bytes(BASE_POINT)
    assert is_on_curve(pubkey)


@pytest.mark.parametrize("size", [0, 31, 33])
def test_rejects_wrong_length(size):
    with pytest.raises(InvalidKeyLength):
        is_on_curve(bytes(size))
