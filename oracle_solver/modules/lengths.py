"""
Length probing for oracles that wrap the attacker's input in hidden
material: encrypt(prefix ++ input ++ suffix).

All probes read the block size from the oracle.
"""

from ..core.errors import OracleInconsistent
from ..core.oracles import require_deterministic
from ..utils.helpers import chunks, nth_block


def prefix_plus_suffix_length(oracle):
    """
    len(prefix) + len(suffix), from the smallest input that makes the
    ciphertext grow by a block. Needs a padded mode (ECB, CBC): in CTR the
    output length follows the input length byte by byte.
    """
    bs = oracle.block_size
    initial = len(oracle.encrypt(b""))
    filler = bytes(bs)
    for i in range(1, bs + 1):
        grown = len(oracle.encrypt(filler[bs - i:])) - initial
        if grown == 0:
            continue
        if grown != bs:
            raise OracleInconsistent(
                f"oracle output grew by {grown} bytes instead of a whole block, is it a padded block mode?"
            )
        return initial - i
    raise OracleInconsistent(
        "length of oracle output did not change, something is wrong with the provided oracle"
    )


def prefix_blocks_count(oracle):
    """
    len(prefix) // block_size, the number of blocks fully occupied by the
    prefix: two different one-byte inputs share exactly those leading blocks.
    """
    require_deterministic(oracle, "prefix_blocks_count")
    bs = oracle.block_size
    pairs = zip(chunks(oracle.encrypt(b"\x00"), bs), chunks(oracle.encrypt(b"\x01"), bs))
    for index, (x, y) in enumerate(pairs):
        if x != y:
            return index
    raise OracleInconsistent(
        "no differing blocks found, something is wrong with the provided oracle"
    )


def _offset_in_block(oracle, n, k):
    # Fill block n with a run of byte k starting right after the prefix,
    # then shorten the run from the front. Block n stays the same while the
    # run still reaches its end; the first change tells how many prefix
    # bytes sit in block n.
    bs = oracle.block_size
    run = bytes([k]) * bs
    prev = nth_block(oracle.encrypt(run), n, bs)
    for i in range(bs):
        cur = nth_block(oracle.encrypt(run[i + 1:]), n, bs)
        if cur != prev:
            return i
        prev = cur
    return bs


def prefix_length(oracle):
    """
    Exact length of the hidden prefix.

    The probe runs with two different fill bytes and keeps the smaller
    offset: the first suffix byte may equal the fill byte, which hides the
    transition for that one.
    """
    require_deterministic(oracle, "prefix_length")
    n = prefix_blocks_count(oracle)
    offset = min(_offset_in_block(oracle, n, 0), _offset_in_block(oracle, n, 1))
    return n * oracle.block_size + offset


def suffix_length(oracle):
    require_deterministic(oracle, "suffix_length")
    return prefix_plus_suffix_length(oracle) - prefix_length(oracle)
