import os

import pytest

from oracle_solver.core.errors import PaddingError
from oracle_solver.primitives import aes
from oracle_solver.primitives.aes import Mode


def test_pad_to_20():
    assert aes.pad(b"YELLOW SUBMARINE", 20) == b"YELLOW SUBMARINE\x04\x04\x04\x04"


def test_padding_valid():
    assert aes.padding_valid(b"ICE ICE BABY\x04\x04\x04\x04")
    assert not aes.padding_valid(b"ICE ICE BABY\x05\x05\x05\x05")
    assert not aes.padding_valid(b"ICE ICE BABY\x01\x02\x03\x04")
    assert not aes.padding_valid(b"ICE ICE BABY\x03\x03\x03")
    assert aes.padding_valid(b"ICE ICE BABY" + b"\x0c" * 12, 12)


def test_unpad_rejects_bad_padding():
    with pytest.raises(PaddingError):
        aes.unpad(b"ICE ICE BABY\x05\x05\x05\x05")


def test_cbc_known_block():
    key = b"YELLOW SUBMARINE"
    iv = bytes(16)
    data = b"ABCDEFGHIJKLMNOP"
    ciphertext = aes.encrypt(data, key, iv, Mode.CBC)
    assert len(ciphertext) == 32
    assert aes.decrypt(ciphertext, key, iv, Mode.CBC) == data


@pytest.mark.parametrize("mode", list(Mode))
def test_round_trip(mode):
    key = aes.random_key()
    iv = aes.random_iv()
    data = os.urandom(37)
    assert aes.decrypt(aes.encrypt(data, key, iv, mode), key, iv, mode) == data


def test_ctr_keeps_length():
    key = aes.random_key()
    assert len(aes.encrypt(b"x" * 21, key, None, Mode.CTR)) == 21


def test_ecb_leaks_equal_blocks():
    key = aes.random_key()
    ciphertext = aes.encrypt(b"A" * 32, key)
    assert ciphertext[:16] == ciphertext[16:32]
