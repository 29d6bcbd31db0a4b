import os

import pytest

from oracle_solver.core.rsa_oracles import RsaPaddingOracle


@pytest.fixture
def key():
    return os.urandom(16)


@pytest.fixture(scope="module")
def padding_oracle():
    return RsaPaddingOracle(bits=256)
