from .helpers import (
    CANDIDATE_BYTES, block_ceil, bytes_to_int, ceil_div, chunks, floor_div,
    int_to_bytes, nth_block, xor_bytes,
)
from .serialize import from_base64, from_hex, to_base64, to_hex

__all__ = [
    'CANDIDATE_BYTES', 'block_ceil', 'bytes_to_int', 'ceil_div', 'chunks',
    'floor_div', 'int_to_bytes', 'nth_block', 'xor_bytes',
    'from_base64', 'from_hex', 'to_base64', 'to_hex',
]
