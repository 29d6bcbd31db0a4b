import pytest

from oracle_solver.core.errors import OracleInconsistent
from oracle_solver.core.oracles import CbcBitflipOracle, DeterministicOracle, ProfileOracle
from oracle_solver.modules.forgery import forge_admin_bitflip, forge_admin_profile


def test_cut_and_paste_profile():
    oracle = ProfileOracle()
    forged = forge_admin_profile(oracle)
    profile = oracle.decrypt_profile(forged)
    assert profile[b"role"] == b"admin"
    assert profile[b"uid"] == b"10"
    oracle.verify_solution(forged)


def test_cbc_bitflip():
    oracle = CbcBitflipOracle()
    forged = forge_admin_bitflip(oracle)
    assert oracle.is_admin(forged)
    oracle.verify_solution(forged)


def test_bitflip_payload_must_fit_one_block():
    with pytest.raises(ValueError):
        forge_admin_bitflip(CbcBitflipOracle(), b";admin=true;role=root")


class StreamLikeOracle(DeterministicOracle):
    """Output length follows the input byte by byte, like CTR."""

    def encrypt(self, data):
        return bytes(16 + len(data))


def test_bitflip_rejects_unexpected_length():
    with pytest.raises(OracleInconsistent):
        forge_admin_bitflip(StreamLikeOracle())
