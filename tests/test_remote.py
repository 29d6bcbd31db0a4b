import socketserver
import threading

import pytest

from oracle_solver.core.connection import Connection
from oracle_solver.core.errors import OracleConnectionError, OracleRejectedInput
from oracle_solver.core.oracles import SuffixOracle
from oracle_solver.core.remote import RemoteOracle
from oracle_solver.modules.byte_at_a_time import ByteAtATimeSolver

SECRET = b"remote secret, 25 bytes!!"


def make_handler(oracle):
    class Handler(socketserver.StreamRequestHandler):
        def handle(self):
            for line in self.rfile:
                line = line.strip()
                try:
                    reply = oracle.encrypt(bytes.fromhex(line.decode())).hex()
                except ValueError:
                    reply = "error: bad hex"
                self.wfile.write(reply.encode() + b"\n")
    return Handler


@pytest.fixture
def server():
    socketserver.ThreadingTCPServer.allow_reuse_address = True
    srv = socketserver.ThreadingTCPServer(("127.0.0.1", 0), make_handler(SuffixOracle(SECRET)))
    srv.daemon_threads = True
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    yield srv.server_address
    srv.shutdown()
    srv.server_close()


def test_remote_suffix_recovery(server):
    host, port = server
    with Connection(host, port) as conn:
        oracle = RemoteOracle(conn)
        solver = ByteAtATimeSolver()
        assert solver.uses_ecb(oracle)
        assert solver.decrypt_suffix(oracle) == SECRET


def test_remote_refusal(server):
    host, port = server
    with Connection(host, port) as conn:
        conn.send("zz")
        assert conn.recvline().startswith(b"error")


def test_remote_error_reply_raises():
    class FakeConn:
        def send(self, data):
            pass

        def recvline(self):
            return b"error: nope"

    with pytest.raises(OracleRejectedInput):
        RemoteOracle(FakeConn()).encrypt(b"a")


def test_connection_refused():
    with pytest.raises(OracleConnectionError):
        Connection("127.0.0.1", 1, timeout=1).connect()


def test_send_requires_connection():
    with pytest.raises(OracleConnectionError):
        Connection("127.0.0.1", 1).send(b"00")
