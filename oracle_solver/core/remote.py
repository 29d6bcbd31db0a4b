import threading

from ..utils.serialize import from_hex, to_hex
from .errors import DecodeError, OracleRejectedInput
from .oracles import DeterministicOracle, _check_input


class RemoteOracle(DeterministicOracle):
    """
    An encryption oracle served over TCP.
    Each query is one hex-encoded line; the reply is the hex-encoded
    ciphertext on one line. A reply starting with "error" is a refusal.
    The service is assumed to be deterministic.
    """

    def __init__(self, conn, block_size=16):
        self.conn = conn
        self.block_size = block_size
        # One request/response pair in flight at a time.
        self._lock = threading.Lock()

    def encrypt(self, data: bytes) -> bytes:
        data = _check_input(data)
        with self._lock:
            self.conn.send(to_hex(data))
            reply = self.conn.recvline().decode(errors='replace').strip()
        if reply.lower().startswith("error"):
            raise OracleRejectedInput(reply)
        try:
            return from_hex(reply)
        except DecodeError as err:
            raise OracleRejectedInput(f"unexpected reply: {reply!r}") from err
