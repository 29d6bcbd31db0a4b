"""
Oracles, their transport, and the error types shared by the attacks.
Oracle classes live in .oracles, .rsa_oracles and .remote.
"""

from .errors import (
    DecodeError, OracleConnectionError, OracleInconsistent, OracleRejectedInput,
    OracleSolverError, PaddingError, SearchExhausted, VerificationMismatch,
)

__all__ = [
    'DecodeError', 'OracleConnectionError', 'OracleInconsistent',
    'OracleRejectedInput', 'OracleSolverError', 'PaddingError',
    'SearchExhausted', 'VerificationMismatch',
]
