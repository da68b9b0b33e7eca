import pytest
import z3


def _assert_z3_equivalent(actual, expected):
    """Check if two Z3 expressions are equivalent using a solver"""
    s = z3.Solver()
    s.add(actual != expected)
    result = s.check()
    assert result == z3.unsat, f"Expressions not equivalent: {actual} != {expected}"


@pytest.fixture
def assert_z3_equivalent():
    return _assert_z3_equivalent
