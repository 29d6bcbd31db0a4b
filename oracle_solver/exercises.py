"""
Exercise runners. Each one either checks a primitive against known values or
builds a fresh oracle, attacks it and lets the oracle verify the result.
A failed check raises.
"""

import time
from pathlib import Path

from .config import AttackConfig
from .core.errors import OracleSolverError, VerificationMismatch
from .core.oracles import (
    CbcBitflipOracle, EcbDetectionOracle, ProfileOracle, RandomPrefixOracle, SuffixOracle,
)
from .core.rsa_oracles import RsaPaddingOracle, UnpaddedRsaServer
from .modules import (
    BleichenbacherSolver, ByteAtATimeSolver, forge_admin_bitflip, forge_admin_profile,
    recover_unpadded_message, uses_ecb,
)
from .primitives import aes
from .primitives.aes import BLOCK_SIZE, Mode
from .utils.serialize import from_base64_file


KEY = b"YELLOW SUBMARINE"
CBC_SAMPLE = (
    b"I'm back and I'm ringin' the bell \n"
    b"A rockin' on the mike while the fly girls yell \n"
    b"In ecstasy in the back of me \n"
)
PADDING_CASES = [
    (b"ICE ICE BABY\x04\x04\x04\x04", BLOCK_SIZE, True),
    (b"ICE ICE BABY\x05\x05\x05\x05", BLOCK_SIZE, False),
    (b"ICE ICE BABY\x01\x02\x03\x04", BLOCK_SIZE, False),
    (b"ICE ICE BABY\x03\x03\x03", BLOCK_SIZE, False),
    (b"ICE ICE BABY" + b"\x0c" * 12, 12, True),
]


def compare(expected, actual):
    if expected != actual:
        raise VerificationMismatch(expected, actual)


def pkcs7_pad(config):
    compare(b"YELLOW SUBMARINE\x04\x04\x04\x04", aes.pad(KEY, 20))


def _cbc_sample(config):
    """
    The base64 ciphertext file 10.txt and its cleartext 10.ref.txt from
    config.data_dir, or CBC_SAMPLE encrypted here when no directory is set.
    """
    if config.data_dir is None:
        return aes.encrypt(CBC_SAMPLE, KEY, bytes(BLOCK_SIZE), Mode.CBC), CBC_SAMPLE
    data_dir = Path(config.data_dir)
    return from_base64_file(data_dir / "10.txt"), (data_dir / "10.ref.txt").read_bytes()


def cbc_decrypt(config):
    ciphertext, reference = _cbc_sample(config)
    compare(reference, aes.decrypt(ciphertext, KEY, bytes(BLOCK_SIZE), Mode.CBC))


def padding_validation(config):
    for data, block_size, expected in PADDING_CASES:
        compare(expected, aes.padding_valid(data, block_size))


def detect_ecb(config):
    oracle = EcbDetectionOracle()
    oracle.verify_solution(uses_ecb(oracle, config.block_size))


def byte_at_a_time_simple(config):
    ByteAtATimeSolver(config).solve(SuffixOracle())


def cut_and_paste_profile(config):
    oracle = ProfileOracle()
    oracle.verify_solution(forge_admin_profile(oracle))


def byte_at_a_time_prefix(config):
    ByteAtATimeSolver(config).solve(RandomPrefixOracle())


def cbc_bitflip(config):
    oracle = CbcBitflipOracle()
    oracle.verify_solution(forge_admin_bitflip(oracle))


def unpadded_rsa(config):
    server = UnpaddedRsaServer()
    server.verify_solution(recover_unpadded_message(server))


def _bleichenbacher(config, bits):
    oracle = RsaPaddingOracle(bits)
    solver = BleichenbacherSolver(oracle.n, oracle.e, config)
    m = solver.decrypt(oracle.ciphertext, oracle)
    oracle.verify_solution(m)
    config.log(f"[*] Message: {RsaPaddingOracle.unpad(m, oracle.k)!r}")


def bleichenbacher_simple(config):
    _bleichenbacher(config, config.rsa_bits)


def bleichenbacher_complete(config):
    _bleichenbacher(config, max(config.rsa_bits, 768))


EXERCISES = {
    9: pkcs7_pad,
    10: cbc_decrypt,
    11: detect_ecb,
    12: byte_at_a_time_simple,
    13: cut_and_paste_profile,
    14: byte_at_a_time_prefix,
    15: padding_validation,
    16: cbc_bitflip,
    41: unpadded_rsa,
    47: bleichenbacher_simple,
    48: bleichenbacher_complete,
}


def run_exercise(number, config=None):
    """Runs one exercise, prints the outcome and returns True on success."""
    config = config or AttackConfig()
    exercise = EXERCISES[number]
    start_time = time.time()
    try:
        exercise(config)
    except (OracleSolverError, OSError) as err:
        print(f"[-] Challenge {number}: {type(err).__name__}: {err}")
        return False
    print(f"[+] Challenge {number} ({time.time() - start_time:.2f}s)")
    return True


def run(numbers=None, config=None):
    """Runs the given exercises (all by default); returns the failed numbers."""
    numbers = numbers or sorted(EXERCISES)
    return [number for number in numbers if not run_exercise(number, config)]
