from .bleichenbacher import BleichenbacherSolver
from .byte_at_a_time import ByteAtATimeSolver, decrypt_suffix, uses_ecb
from .forgery import forge_admin_bitflip, forge_admin_profile
from .lengths import (
    prefix_blocks_count, prefix_length, prefix_plus_suffix_length, suffix_length,
)
from .unpadded_rsa import recover_unpadded_message

__all__ = [
    'BleichenbacherSolver', 'ByteAtATimeSolver', 'decrypt_suffix', 'uses_ecb',
    'forge_admin_bitflip', 'forge_admin_profile', 'prefix_blocks_count',
    'prefix_length', 'prefix_plus_suffix_length', 'suffix_length',
    'recover_unpadded_message',
]
