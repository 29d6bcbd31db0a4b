import gmpy2
import pytest

from oracle_solver.config import AttackConfig
from oracle_solver.core.errors import OracleInconsistent, PaddingError, SearchExhausted
from oracle_solver.core.rsa_oracles import RsaPaddingOracle, pkcs1_pad, pkcs1_unpad
from oracle_solver.modules.bleichenbacher import BleichenbacherSolver


def test_pkcs1_pad_round_trip():
    padded = pkcs1_pad(b"kick it, CC", 32)
    assert len(padded) == 32
    assert padded[:2] == b"\x00\x02"
    assert b"\x00" not in padded[2:20]
    assert pkcs1_unpad(padded) == b"kick it, CC"


def test_pkcs1_rejects():
    with pytest.raises(PaddingError):
        pkcs1_pad(b"x" * 22, 32)
    with pytest.raises(PaddingError):
        pkcs1_unpad(b"\x00\x01" + b"\xff" * 30)
    with pytest.raises(PaddingError):
        pkcs1_unpad(b"\x00\x02" + b"\xff" * 3 + b"\x00" + b"x" * 26)


def test_oracle_accepts_own_ciphertext(padding_oracle):
    assert padding_oracle.accepts(padding_oracle.ciphertext)
    assert not padding_oracle.accepts(padding_oracle.encrypt(1))


def test_recovers_padded_plaintext(padding_oracle):
    solver = BleichenbacherSolver(padding_oracle.n, padding_oracle.e)
    m = solver.decrypt(padding_oracle.ciphertext, padding_oracle)
    padding_oracle.verify_solution(m)
    assert RsaPaddingOracle.unpad(m, padding_oracle.k) == b"kick it, CC"
    assert solver.iterations < 1000


def test_parallel_search_recovers_same_plaintext(padding_oracle):
    before = padding_oracle.queries
    solver = BleichenbacherSolver(padding_oracle.n, padding_oracle.e, AttackConfig(workers=4))
    padding_oracle.verify_solution(solver.decrypt(padding_oracle.ciphertext, padding_oracle.accepts))
    # Every speculative query reaches the oracle and is counted once.
    assert padding_oracle.queries - before == solver.queries


def test_blinds_non_conforming_ciphertext(padding_oracle):
    n, e = padding_oracle.n, padding_oracle.e
    blinded = (padding_oracle.ciphertext * pow(3, e, n)) % n
    assert not padding_oracle.accepts(blinded)

    m3 = BleichenbacherSolver(n, e).decrypt(blinded, padding_oracle)
    padding_oracle.verify_solution((m3 * int(gmpy2.invert(3, n))) % n)


def test_query_cap(padding_oracle):
    config = AttackConfig(max_queries=100)
    solver = BleichenbacherSolver(padding_oracle.n, padding_oracle.e, config)
    with pytest.raises(SearchExhausted) as info:
        solver.decrypt(padding_oracle.ciphertext, padding_oracle)
    assert info.value.queries <= 100
    assert isinstance(info.value, OracleInconsistent)


def test_iteration_cap(padding_oracle):
    config = AttackConfig(max_iterations=2)
    solver = BleichenbacherSolver(padding_oracle.n, padding_oracle.e, config)
    with pytest.raises(SearchExhausted):
        solver.decrypt(padding_oracle.ciphertext, padding_oracle)


def test_oracle_that_never_accepts(padding_oracle):
    config = AttackConfig(max_queries=1000)
    solver = BleichenbacherSolver(padding_oracle.n, padding_oracle.e, config)
    with pytest.raises(SearchExhausted):
        solver.decrypt(padding_oracle.ciphertext, lambda c: False)


# n = 2^24 + 3 has k = 4 bytes, so B = 2^16, 2B = 131072 and 3B = 196608.
TOY_N = 2 ** 24 + 3


def accept_on_call(count):
    calls = []

    def oracle(c):
        calls.append(c)
        return len(calls) == count

    return oracle, calls


def test_toy_bounds():
    solver = BleichenbacherSolver(TOY_N, 3)
    assert solver.k == 4
    assert solver.B == 2 ** 16


def test_narrow_splits_interval():
    solver = BleichenbacherSolver(TOY_N, 3)
    # r runs over 4 and 5; both give a non-empty interval.
    assert solver._narrow([(131072, 196607)], 512) == [(131329, 131456), (164097, 164224)]


def test_narrow_drops_empty_intervals():
    # n = 65537: k = 3 and B = 256. For s = 600, r runs over 5..7 and only
    # r = 5 leaves an integer in [2B, 3B).
    assert BleichenbacherSolver(65537, 3)._narrow([(512, 767)], 600) == [(547, 547)]


def test_narrow_keeps_compatible_interval():
    solver = BleichenbacherSolver(TOY_N, 3)
    assert solver._narrow([(131329, 131456)], 512) == [(131329, 131456)]


def test_narrow_without_compatible_r_is_empty():
    assert BleichenbacherSolver(65537, 3)._narrow([(512, 767)], 86) == []


def test_first_multiplier_starts_at_n_over_3b():
    solver = BleichenbacherSolver(TOY_N, 3)
    oracle, calls = accept_on_call(1)
    assert solver._next_multiplier(1, oracle, [(131072, 196607)], 1, 1) == 86
    assert calls == [pow(86, 3, TOY_N)]


def test_several_intervals_search_from_next_multiplier():
    solver = BleichenbacherSolver(TOY_N, 3)
    oracle, calls = accept_on_call(3)
    M = [(131329, 131456), (164097, 164224)]
    assert solver._next_multiplier(1, oracle, M, 512, 2) == 515
    assert calls == [pow(si, 3, TOY_N) for si in (513, 514, 515)]
    assert solver.queries == 3


def test_single_interval_walks_r():
    solver = BleichenbacherSolver(TOY_N, 3)
    oracle, calls = accept_on_call(3)
    # r = 9 gives s in [1150, 1152), both rejected; r = 10 gives [1278, 1279).
    assert solver._next_multiplier(1, oracle, [(131329, 131456)], 512, 2) == 1278
    assert calls == [pow(si, 3, TOY_N) for si in (1150, 1151, 1278)]


def test_intervals_always_hold_plaintext(padding_oracle):
    solver = BleichenbacherSolver(padding_oracle.n, padding_oracle.e)
    m = padding_oracle._padded
    narrow = solver._narrow
    sizes = []

    def checked(M, s):
        Mi = narrow(M, s)
        assert Mi == sorted(set(Mi))
        assert all(a <= b for a, b in Mi)
        assert any(a <= m <= b for a, b in Mi)
        sizes.append(sum(b - a + 1 for a, b in Mi))
        return Mi

    solver._narrow = checked
    padding_oracle.verify_solution(solver.decrypt(padding_oracle.ciphertext, padding_oracle))
    assert sizes[-1] == 1
    assert len(sizes) == solver.iterations
