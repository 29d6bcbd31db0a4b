from .aes import BLOCK_SIZE, Mode
from .rsa import Rsa

__all__ = ['BLOCK_SIZE', 'Mode', 'Rsa']
