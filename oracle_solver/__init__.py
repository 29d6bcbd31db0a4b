"""
Adaptive oracle cryptanalysis toolkit.
Recovers secrets from block-cipher and RSA oracles through chosen queries.
"""

from .config import AttackConfig

__version__ = "0.3.0"

__all__ = ['AttackConfig', '__version__']
