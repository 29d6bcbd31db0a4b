"""
AES-128 in ECB, CBC and CTR mode, with PKCS#7 padding.
ECB and CBC pad on encryption and strip the padding on decryption;
CTR is a stream mode and leaves lengths untouched.
"""

import enum
import os

from Crypto.Cipher import AES
from Crypto.Util.Padding import pad as _pad

from ..core.errors import PaddingError

BLOCK_SIZE = AES.block_size
NONCE_SIZE = 8


class Mode(enum.Enum):
    ECB = "ECB"
    CBC = "CBC"
    CTR = "CTR"


def random_key(size=16):
    return os.urandom(size)


def random_iv():
    return os.urandom(BLOCK_SIZE)


def pad(data, block_size=BLOCK_SIZE):
    return _pad(data, block_size, style='pkcs7')


def padding_valid(data, block_size=BLOCK_SIZE):
    """True iff data ends with well-formed PKCS#7 padding for block_size."""
    if not data or len(data) % block_size != 0:
        return False
    n = data[-1]
    if n == 0 or n > block_size:
        return False
    return data[-n:] == bytes([n]) * n


def unpad(data, block_size=BLOCK_SIZE):
    if not padding_valid(data, block_size):
        raise PaddingError("invalid PKCS#7 padding")
    return data[:-data[-1]]


def _cipher(key, iv, mode):
    if mode is Mode.ECB:
        return AES.new(key, AES.MODE_ECB)
    if mode is Mode.CBC:
        if iv is None:
            raise ValueError("CBC mode needs an IV")
        return AES.new(key, AES.MODE_CBC, iv=iv)
    if mode is Mode.CTR:
        nonce = bytes(NONCE_SIZE) if iv is None else iv[:NONCE_SIZE]
        return AES.new(key, AES.MODE_CTR, nonce=nonce)
    raise ValueError(f"unknown mode {mode!r}")


def encrypt(plaintext, key, iv=None, mode=Mode.ECB):
    if mode is Mode.CTR:
        return _cipher(key, iv, mode).encrypt(plaintext)
    return _cipher(key, iv, mode).encrypt(pad(plaintext))


def decrypt(ciphertext, key, iv=None, mode=Mode.ECB):
    if mode is Mode.CTR:
        return _cipher(key, iv, mode).decrypt(ciphertext)
    if len(ciphertext) % BLOCK_SIZE != 0:
        raise PaddingError("ciphertext is not a whole number of blocks")
    return unpad(_cipher(key, iv, mode).decrypt(ciphertext))
