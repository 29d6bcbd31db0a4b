"""
Block-cipher encryption oracles.

Each oracle owns a hidden key and, depending on the variant, secret
material around the attacker's input. The secret is fixed at construction
and never changes afterwards, so every test builds its own instance.
"""

import abc
import os
import random

from ..primitives import aes
from ..primitives.aes import BLOCK_SIZE, Mode
from ..utils.serialize import from_base64
from .errors import VerificationMismatch

_DEFAULT_SUFFIX = (
    "Um9sbGluJyBpbiBteSA1LjAKV2l0aCBteSByYWctdG9wIGRvd24gc28gbXkg"
    "aGFpciBjYW4gYmxvdwpUaGUgZ2lybGllcyBvbiBzdGFuZGJ5IHdhdmluZyBq"
    "dXN0IHRvIHNheSBoaQpEaWQgeW91IHN0b3A/IE5vLCBJIGp1c3QgZHJvdmUg"
    "YnkK"
)


def _check_input(data):
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError(f"oracle input must be bytes, got {type(data).__name__}")
    return bytes(data)


class Oracle(abc.ABC):
    """
    The base oracle abstract class.
    Send it some bytes and it returns their encryption.
    """
    block_size = BLOCK_SIZE

    @abc.abstractmethod
    def encrypt(self, data: bytes) -> bytes:
        """
        Encrypt attacker-controlled data together with the hidden material.

        :param data: The attacker's input.
        :return: The ciphertext.
        """


class DeterministicOracle(Oracle):
    """
    An oracle whose encryption is a pure function of its input:
    no random IV, no random nonce, no per-call padding.
    Attacks that compare ciphertexts across calls only accept these.
    """


def require_deterministic(oracle, operation):
    if not isinstance(oracle, DeterministicOracle):
        raise TypeError(
            f"{operation} needs a DeterministicOracle, got {type(oracle).__name__}"
        )


class EcbDetectionOracle(Oracle):
    """
    Encrypts with AES ECB or AES CBC, chosen by tossing a coin at construction.
    5 to 10 random bytes are added before and after the input on every call,
    and CBC uses a fresh IV each time.
    """

    def __init__(self, mode=None):
        self._key = aes.random_key()
        self._mode = mode if mode is not None else random.choice((Mode.ECB, Mode.CBC))

    def encrypt(self, data: bytes) -> bytes:
        data = _check_input(data)
        plaintext = os.urandom(random.randint(5, 10)) + data + os.urandom(random.randint(5, 10))
        iv = aes.random_iv() if self._mode is Mode.CBC else None
        return aes.encrypt(plaintext, self._key, iv, self._mode)

    def verify_solution(self, uses_ecb: bool):
        if uses_ecb != (self._mode is Mode.ECB):
            raise VerificationMismatch(self._mode is Mode.ECB, uses_ecb)


class PrefixSuffixOracle(DeterministicOracle):
    """
    Encrypts prefix ++ input ++ suffix under a fixed key.
    CBC uses an IV fixed per instance and CTR a fixed nonce, so the output
    only depends on the input.
    """

    def __init__(self, key=None, prefix=b"", suffix=b"", mode=Mode.ECB, iv=None):
        self._key = key if key is not None else aes.random_key()
        self._prefix = bytes(prefix)
        self._suffix = bytes(suffix)
        self._mode = mode
        if iv is None and mode is not Mode.ECB:
            iv = aes.random_iv()
        self._iv = iv

    def encrypt(self, data: bytes) -> bytes:
        data = _check_input(data)
        return aes.encrypt(self._prefix + data + self._suffix, self._key, self._iv, self._mode)

    def _decrypt(self, ciphertext: bytes) -> bytes:
        return aes.decrypt(ciphertext, self._key, self._iv, self._mode)

    def verify_suffix(self, candidate: bytes):
        if candidate != self._suffix:
            raise VerificationMismatch(self._suffix, candidate)


class SuffixOracle(PrefixSuffixOracle):
    """Encrypts input ++ secret suffix with AES ECB under a random key."""

    def __init__(self, suffix=None):
        if suffix is None:
            suffix = from_base64(_DEFAULT_SUFFIX)
        super().__init__(suffix=suffix)


class RandomPrefixOracle(PrefixSuffixOracle):
    """
    Like SuffixOracle, but a random count of random bytes is prepended.
    The prefix is chosen once and need not be block aligned.
    """

    def __init__(self, suffix=None, max_prefix=2 * BLOCK_SIZE):
        if suffix is None:
            suffix = from_base64(_DEFAULT_SUFFIX)
        prefix = os.urandom(random.randint(0, max_prefix))
        super().__init__(prefix=prefix, suffix=suffix)


def encode_profile(profile, sep=b"&"):
    return sep.join(k + b"=" + v for k, v in profile.items())


def decode_profile(data, sep=b"&"):
    """Parse k1=v1&k2=v2 into a dict; a pair without '=' maps to b''."""
    profile = {}
    for pair in data.split(sep):
        key, _, value = pair.partition(b"=")
        profile[key] = value
    return profile


class ProfileOracle(PrefixSuffixOracle):
    """
    Builds the profile of a user from an email address, encodes it as
    key-values and encrypts it with AES ECB.
    The role is always user and the uid is fixed.
    """

    @staticmethod
    def profile_for(email: bytes) -> bytes:
        # Meta characters are removed so the email can't add fields.
        email = email.replace(b"&", b"").replace(b"=", b"")
        return encode_profile({b"email": email, b"uid": b"10", b"role": b"user"})

    def encrypt(self, data: bytes) -> bytes:
        data = _check_input(data)
        return aes.encrypt(self.profile_for(data), self._key, None, Mode.ECB)

    def decrypt_profile(self, ciphertext: bytes) -> dict:
        return decode_profile(self._decrypt(ciphertext))

    def verify_solution(self, ciphertext: bytes):
        role = self.decrypt_profile(ciphertext).get(b"role")
        if role != b"admin":
            raise VerificationMismatch(b"admin", role)


class CbcBitflipOracle(PrefixSuffixOracle):
    """
    Quotes the input into a cookie-like string and encrypts it with AES CBC.
    ';' and '=' are percent-quoted so the input cannot add fields directly.
    """
    PREFIX = b"comment1=cooking%20MCs;userdata="
    SUFFIX = b";comment2=%20like%20a%20pound%20of%20bacon"
    MARKER = b"admin=true"

    def __init__(self):
        super().__init__(prefix=self.PREFIX, suffix=self.SUFFIX, mode=Mode.CBC)

    def encrypt(self, data: bytes) -> bytes:
        data = _check_input(data).replace(b";", b"%3B").replace(b"=", b"%3D")
        return super().encrypt(data)

    def is_admin(self, ciphertext: bytes) -> bool:
        return self.MARKER in self._decrypt(ciphertext).split(b";")

    def verify_solution(self, ciphertext: bytes):
        if not self.is_admin(ciphertext):
            raise VerificationMismatch(self.MARKER, self._decrypt(ciphertext))
