import socket

from .errors import OracleConnectionError


class Connection:
    """
    Line-based TCP connection to a remote oracle.
    Mimics the send/recvline part of pwntools' remote.
    """
    def __init__(self, host, port, timeout=5):
        self.host = host
        self.port = int(port)
        self.timeout = timeout
        self.sock = None
        self.connected = False
        self._buffer = b""

    def connect(self):
        """Establishes the connection."""
        try:
            self.sock = socket.create_connection((self.host, self.port), self.timeout)
        except OSError as e:
            raise OracleConnectionError(f"connection to {self.host}:{self.port} failed: {e}") from e
        self.connected = True
        return self

    def send(self, data):
        """Sends data to the server. Adds newline if not present."""
        if not self.connected:
            raise OracleConnectionError("not connected")

        if isinstance(data, str):
            data = data.encode()

        if not data.endswith(b'\n'):
            data += b'\n'

        try:
            self.sock.sendall(data)
        except OSError as e:
            self.close()
            raise OracleConnectionError(f"send failed: {e}") from e

    def recvline(self):
        """Receives one line, without its trailing newline."""
        if not self.connected:
            raise OracleConnectionError("not connected")

        while b'\n' not in self._buffer:
            try:
                chunk = self.sock.recv(4096)
            except OSError as e:
                self.close()
                raise OracleConnectionError(f"recv failed: {e}") from e
            if not chunk:
                self.close()
                raise OracleConnectionError("connection closed by remote host")
            self._buffer += chunk

        line, _, self._buffer = self._buffer.partition(b'\n')
        return line.rstrip(b'\r')

    def close(self):
        """Closes the connection."""
        if self.sock:
            self.sock.close()
            self.sock = None
        self.connected = False

    def __enter__(self):
        if not self.connected:
            self.connect()
        return self

    def __exit__(self, *exc):
        self.close()
