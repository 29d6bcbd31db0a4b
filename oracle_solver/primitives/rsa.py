"""
Textbook RSA on Python integers.
"""

import math

import gmpy2
from Crypto.Util.number import getPrime


class Rsa:
    """
    An RSA keypair. Encryption and decryption are raw modular
    exponentiation, without any padding.
    """

    def __init__(self, p, q, e=3):
        self.p = p
        self.q = q
        self.e = e
        self.n = p * q
        phi = (p - 1) * (q - 1)
        self.d = int(gmpy2.invert(e, phi))
        # Byte length of the modulus
        self.k = (self.n.bit_length() + 7) // 8

    @classmethod
    def generate(cls, bits, e=3):
        """Generate a keypair whose modulus has exactly `bits` bits."""
        while True:
            p = getPrime(bits // 2)
            q = getPrime(bits - bits // 2)
            if p == q or (p * q).bit_length() != bits:
                continue
            if math.gcd(e, (p - 1) * (q - 1)) == 1:
                return cls(p, q, e)

    def encrypt(self, m):
        return int(gmpy2.powmod(m, self.e, self.n))

    def decrypt(self, c):
        return int(gmpy2.powmod(c, self.d, self.n))
