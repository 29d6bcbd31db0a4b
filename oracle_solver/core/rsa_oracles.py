"""
RSA oracles: a PKCS#1 v1.5 conformance oracle and a decryption server
that refuses to decrypt its own ciphertext.
"""

import secrets
import threading

from Crypto.Util.number import getRandomNBitInteger

from ..primitives.rsa import Rsa
from ..utils.helpers import bytes_to_int, int_to_bytes
from .errors import OracleRejectedInput, PaddingError, VerificationMismatch

DEFAULT_MESSAGE = b"kick it, CC"


def pkcs1_pad(message, k):
    """
    PKCS#1 v1.5 encryption padding: 00 02 || nonzero random || 00 || message.
    At least 8 random bytes are required, so message may be at most k - 11 bytes.
    """
    if len(message) > k - 11:
        raise PaddingError(f"message too long for a {k}-byte modulus")
    filler = bytes(secrets.choice(range(1, 256)) for _ in range(k - 3 - len(message)))
    return b"\x00\x02" + filler + b"\x00" + message


def pkcs1_unpad(data):
    if len(data) < 11 or data[:2] != b"\x00\x02":
        raise PaddingError("missing 00 02 header")
    sep = data.find(b"\x00", 2)
    if sep < 10:
        raise PaddingError("padding string too short or unterminated")
    return data[sep + 1:]


class RsaPaddingOracle:
    """
    Holds an RSA keypair and the encryption of a padded secret message.
    accepts() only reveals whether a ciphertext decrypts to a value whose
    two leading bytes are 00 02.
    """

    def __init__(self, bits=256, message=DEFAULT_MESSAGE, e=3):
        self._rsa = Rsa.generate(bits, e)
        self._padded = bytes_to_int(pkcs1_pad(message, self._rsa.k))
        self.ciphertext = self._rsa.encrypt(self._padded)
        self.queries = 0
        self._lock = threading.Lock()

    @property
    def n(self):
        return self._rsa.n

    @property
    def e(self):
        return self._rsa.e

    @property
    def k(self):
        return self._rsa.k

    def encrypt(self, m):
        return self._rsa.encrypt(m)

    def accepts(self, c):
        # Called from the speculative search workers
        with self._lock:
            self.queries += 1
        # 2B <= m < 3B
        return self._rsa.decrypt(c) >> (8 * (self.k - 2)) == 2

    __call__ = accepts

    def verify_solution(self, m):
        if m != self._padded:
            raise VerificationMismatch(self._padded, m)

    @staticmethod
    def unpad(m, k):
        return pkcs1_unpad(int_to_bytes(m, k))


class UnpaddedRsaServer:
    """
    Decrypts any ciphertext it is given, except the one holding its secret.
    """

    def __init__(self, bits=512, e=3):
        self._rsa = Rsa.generate(bits, e)
        self._cleartext = getRandomNBitInteger(bits - 1)
        self.ciphertext = self._rsa.encrypt(self._cleartext)

    @property
    def n(self):
        return self._rsa.n

    @property
    def e(self):
        return self._rsa.e

    def encrypt(self, m):
        return self._rsa.encrypt(m)

    def decrypt(self, c):
        # Reject ciphertext itself
        if c % self.n == self.ciphertext:
            raise OracleRejectedInput("refusing to decrypt the secret ciphertext")
        return self._rsa.decrypt(c)

    def verify_solution(self, candidate):
        if candidate != self._cleartext:
            raise VerificationMismatch(self._cleartext, candidate)
