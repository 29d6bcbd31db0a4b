"""
Byte-at-a-time recovery of the secret suffix of an ECB encryption oracle,
and ECB detection.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

from ..config import AttackConfig
from ..core.errors import OracleInconsistent
from ..core.oracles import DeterministicOracle, require_deterministic
from ..utils.helpers import CANDIDATE_BYTES, block_ceil, chunks
from .lengths import prefix_length, suffix_length


def uses_ecb(oracle, block_size=16):
    """
    Encrypts three identical blocks and compares the second and third
    ciphertext blocks.
    Assumes the oracle prepends at most one block of unknown bytes.
    """
    ciphertext = oracle.encrypt(bytes(3 * block_size))
    blocks = chunks(ciphertext, block_size)[1:3]
    return len(blocks) == 2 and blocks[0] == blocks[1]


class _CountingOracle(DeterministicOracle):
    """Forwards to a deterministic oracle and counts the calls."""

    def __init__(self, oracle):
        self._oracle = oracle
        self.block_size = oracle.block_size
        self.calls = 0
        self._lock = threading.Lock()

    def encrypt(self, data: bytes) -> bytes:
        with self._lock:
            self.calls += 1
        return self._oracle.encrypt(data)


class ByteAtATimeSolver:
    """
    Recovers the suffix of a DeterministicOracle one byte at a time.

    The attacker input is chosen so that the plaintext looks like:

                   input start      input end
                       |                |
        <-- prefix --> 0 ... 0 || 0 ... 0 suffix[0] || suffix[1] ...
                       |          |
                   prefix_len  prefix_blocks * block_size

    The block holding suffix[i] is compared with the same block of
    oracle(input ++ guess); the guess yielding a match is suffix[i].

    queries counts every oracle call, length discovery included.
    """

    def __init__(self, config=None):
        self.config = config or AttackConfig()
        self.queries = 0

    def uses_ecb(self, oracle):
        self.queries += 1
        return uses_ecb(oracle, oracle.block_size)

    def _encrypt_all(self, oracle, inputs, executor):
        if executor is None:
            return [oracle.encrypt(data) for data in inputs]
        return list(executor.map(oracle.encrypt, inputs))

    def _guess(self, oracle, base, target, block, executor):
        bs = oracle.block_size
        window = slice(block * bs, (block + 1) * bs)
        if executor is None:
            for u in CANDIDATE_BYTES:
                if oracle.encrypt(base + bytes([u]))[window] == target:
                    return u
            return None

        # Trials are independent; the first match in candidate order wins.
        batch = self.config.workers * 8
        for start in range(0, len(CANDIDATE_BYTES), batch):
            candidates = CANDIDATE_BYTES[start:start + batch]
            trials = [base + bytes([u]) for u in candidates]
            for u, ciphertext in zip(candidates, self._encrypt_all(oracle, trials, executor)):
                if ciphertext[window] == target:
                    return u
        return None

    def decrypt_suffix(self, oracle):
        require_deterministic(oracle, "decrypt_suffix")
        bs = oracle.block_size
        log = self.config.log
        oracle = _CountingOracle(oracle)

        try:
            known = self._recover(oracle, bs, log)
        finally:
            self.queries += oracle.calls

        log(f"[+] Recovered {len(known)} bytes with {self.queries} queries")
        return known

    def _recover(self, oracle, bs, log):
        prefix_len = prefix_length(oracle)
        prefix_blocks, prefix_padding = block_ceil(prefix_len, bs)
        suffix_len = suffix_length(oracle)
        log(f"[*] Prefix is {prefix_len} bytes, suffix is {suffix_len} bytes")

        executor = None
        if self.config.workers > 1:
            executor = ThreadPoolExecutor(max_workers=self.config.workers)
        try:
            filler = bytes(prefix_padding + bs - 1)
            # references[s] holds every suffix byte i with i % bs == s at the
            # end of a block, so one call per shift covers the whole suffix.
            references = self._encrypt_all(
                oracle, [filler[shift:] for shift in range(bs)], executor
            )

            known = bytearray()
            for i in range(suffix_len):
                block = prefix_blocks + i // bs
                left_shift = i % bs
                target = references[left_shift][block * bs:(block + 1) * bs]
                base = filler[left_shift:] + bytes(known)
                u = self._guess(oracle, base, target, block, executor)
                if u is None:
                    raise OracleInconsistent(
                        f"no candidate matched suffix byte {i}, is the oracle deterministic?"
                    )
                known.append(u)
        finally:
            if executor is not None:
                executor.shutdown(wait=True)
        return bytes(known)

    def solve(self, oracle):
        """Recovers the suffix and checks it against the oracle when possible."""
        suffix = self.decrypt_suffix(oracle)
        if hasattr(oracle, "verify_suffix"):
            oracle.verify_suffix(suffix)
        return suffix


def decrypt_suffix(oracle, config=None):
    return ByteAtATimeSolver(config).decrypt_suffix(oracle)
