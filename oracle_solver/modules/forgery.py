"""
Ciphertext forgeries against structured-record oracles.
"""

from ..core.errors import OracleInconsistent
from ..core.oracles import require_deterministic
from ..primitives.aes import pad
from ..utils.helpers import block_ceil, xor_bytes
from .lengths import prefix_length, prefix_plus_suffix_length


def forge_admin_profile(oracle, role=b"user", target=b"admin"):
    """
    ECB cut-and-paste: encrypt pad(target) aligned on its own block, then
    encrypt a profile whose last block holds only the role value, and
    swap that last block for the aligned one.
    Works as long as the role is the last field of the record.
    """
    require_deterministic(oracle, "forge_admin_profile")
    bs = oracle.block_size

    prefix_blocks, prefix_padding = block_ceil(prefix_length(oracle), bs)
    aligned = oracle.encrypt(bytes(prefix_padding) + pad(target, bs))
    target_block = aligned[prefix_blocks * bs:(prefix_blocks + 1) * bs]

    blocks, padding = block_ceil(prefix_plus_suffix_length(oracle), bs)
    ciphertext = oracle.encrypt(bytes(padding + len(role)))
    if len(ciphertext) != (blocks + 1) * bs:
        raise OracleInconsistent(
            f"expected {(blocks + 1) * bs} ciphertext bytes, got {len(ciphertext)}"
        )
    return ciphertext[:blocks * bs] + target_block


def forge_admin_bitflip(oracle, payload=b";admin=true"):
    """
    CBC bit flipping: pad the input so the hidden material ends on a block
    boundary, which leaves a full padding block at the end. Flipping the
    next-to-last ciphertext block turns that padding block into
    pad(payload).
    """
    require_deterministic(oracle, "forge_admin_bitflip")
    bs = oracle.block_size
    if len(payload) >= bs:
        raise ValueError("payload must fit in a single block with padding")

    blocks, padding = block_ceil(prefix_plus_suffix_length(oracle), bs)
    ciphertext = bytearray(oracle.encrypt(bytes(padding)))
    if len(ciphertext) != (blocks + 1) * bs:
        raise OracleInconsistent(
            f"expected {(blocks + 1) * bs} ciphertext bytes, got {len(ciphertext)}"
        )
    if blocks == 0:
        raise OracleInconsistent("no ciphertext block to flip before the padding block")

    flip = xor_bytes(pad(payload, bs), bytes([bs]) * bs)
    start = (blocks - 1) * bs
    ciphertext[start:start + bs] = xor_bytes(ciphertext[start:start + bs], flip)
    return bytes(ciphertext)
