"""
Error types raised by the oracles and the attack engines.
"""


class OracleSolverError(Exception):
    """Base class for every error raised by oracle_solver."""
    pass


class OracleInconsistent(OracleSolverError):
    """
    The oracle did not behave the way the attack requires.
    Raised when no length jump is observed, no differing block is found,
    every candidate byte was rejected, or the interval set became empty.
    """
    pass


class SearchExhausted(OracleInconsistent):
    """An iteration or query cap was reached before the attack finished."""

    def __init__(self, message, queries=0, iterations=0):
        super().__init__(message)
        self.queries = queries
        self.iterations = iterations


class OracleRejectedInput(OracleSolverError):
    """The oracle refused to process a submission."""
    pass


class VerificationMismatch(OracleSolverError):
    """A recovered value does not match the oracle's secret."""

    def __init__(self, expected, actual):
        super().__init__(f"expected {expected!r}, got {actual!r}")
        self.expected = expected
        self.actual = actual


class PaddingError(OracleSolverError, ValueError):
    """Malformed PKCS#7 or PKCS#1 padding."""
    pass


class DecodeError(OracleSolverError, ValueError):
    """Malformed base64 or hex input."""
    pass


class OracleConnectionError(OracleSolverError):
    """Transport failure while talking to a remote oracle."""
    pass
