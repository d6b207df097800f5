"""
Tests for the polynomial commitment engine (aggvote.kzg).

Covers:
- commit_single_value in G1/G2 and index bounds
- commit: homomorphism (sum and scale), length bounds
- shift_equation: shape, validity, delta bounds
- single-value consistency proof: valid artifacts, wrong index, wrong last term
"""

import pytest

from aggvote.errors import IndexOutOfRangeError, ShiftTooLargeError
from aggvote.field import FR, P1, ec_add, ec_mul, ec_neg
from aggvote.kzg import (
    G1_GROUP, G2_GROUP,
    commit, commit_single_value,
    shift_equation, single_value_equations,
    verify_shift_equations, verify_single_value,
)
from aggvote.pairing import verify_equation
from aggvote.wallet import SimulatedBLSWallet

from conftest import MAX_DEGREE


@pytest.fixture(scope="module")
def srs(updated_setup):
    return updated_setup.srs


@pytest.fixture(scope="module")
def alice():
    return SimulatedBLSWallet("Alice")


# ─────────────────────────────────────────────────────────────────────
# commit_single_value
# ─────────────────────────────────────────────────────────────────────

class TestCommitSingleValue:
    """단일 값 커밋먼트 테스트."""

    def test_g1(self, srs):
        assert commit_single_value(1000, 1, G1_GROUP, srs) == ec_mul(srs.g1_powers[1], 1000)

    def test_g2(self, srs):
        assert commit_single_value(FR(42), 3, G2_GROUP, srs) == ec_mul(srs.g2_powers[3], 42)

    def test_index_zero_is_plain_value(self, srs):
        assert commit_single_value(9, 0, G1_GROUP, srs) == ec_mul(P1, 9)

    def test_last_valid_index(self, srs):
        index = srs.data_array_size - 1
        assert commit_single_value(1, index, G1_GROUP, srs) == srs.g1_powers[index]

    def test_index_at_data_array_size_rejected(self, srs):
        with pytest.raises(IndexOutOfRangeError):
            commit_single_value(1, srs.data_array_size, G1_GROUP, srs)

    def test_negative_index_rejected(self, srs):
        with pytest.raises(IndexOutOfRangeError):
            commit_single_value(1, -1, G2_GROUP, srs)

    def test_unknown_group(self, srs):
        with pytest.raises(ValueError):
            commit_single_value(1, 1, "GT", srs)

    def test_value_reduced_modulo_order(self, srs):
        assert commit_single_value(-1, 2, G1_GROUP, srs) == ec_neg(srs.g1_powers[2])


# ─────────────────────────────────────────────────────────────────────
# commit (homomorphism)
# ─────────────────────────────────────────────────────────────────────

class TestCommitHomomorphism:
    """커밋먼트 준동형성: commit(X) + commit(Y) == commit(X + Y)."""

    X = [3, 0, 7, 1, 0, 5]
    Y = [1, 4, 0, 2, 9, 0]

    @pytest.mark.parametrize("group", [G1_GROUP, G2_GROUP])
    def test_sum(self, srs, group):
        summed = [x + y for x, y in zip(self.X, self.Y)]
        assert ec_add(commit(self.X, group, srs), commit(self.Y, group, srs)) == commit(summed, group, srs)

    def test_scale(self, srs):
        scaled = [5 * x for x in self.X]
        assert ec_mul(commit(self.X, G1_GROUP, srs), 5) == commit(scaled, G1_GROUP, srs)

    def test_matches_single_values(self, srs):
        expected = ec_add(
            commit_single_value(3, 0, G1_GROUP, srs),
            commit_single_value(7, 2, G1_GROUP, srs),
        )
        assert commit([3, 0, 7], G1_GROUP, srs) == expected

    def test_zero_array_is_infinity(self, srs):
        assert commit([0, 0, 0], G1_GROUP, srs) is None

    def test_array_too_long(self, srs):
        with pytest.raises(IndexOutOfRangeError):
            commit([1] * (srs.data_array_size + 1), G1_GROUP, srs)


# ─────────────────────────────────────────────────────────────────────
# shift_equation
# ─────────────────────────────────────────────────────────────────────

class TestShiftEquation:
    """shift 방정식 테스트."""

    def test_shape(self, srs, alice):
        eq = shift_equation(alice.public_key, alice.public_key, 2, srs)
        assert eq.a == srs.g1_powers[2]
        assert eq.b == alice.public_key
        assert eq.c == ec_neg(P1)

    def test_valid_shift(self, srs, alice):
        shifted = alice.sign_point(srs.g2_powers[3])
        assert verify_equation(shift_equation(alice.public_key, shifted, 3, srs))

    def test_wrong_shift_amount(self, srs, alice):
        shifted = alice.sign_point(srs.g2_powers[3])
        assert not verify_equation(shift_equation(alice.public_key, shifted, 2, srs))

    def test_shift_of_array(self, srs):
        """[3, 7] shifted by 2 is [0, 0, 3, 7]."""
        left = commit([3, 7], G2_GROUP, srs)
        right = commit([0, 0, 3, 7], G2_GROUP, srs)
        assert verify_equation(shift_equation(left, right, 2, srs))

    def test_max_shift_allowed(self, srs, alice):
        last = alice.sign_point(srs.g2_powers[MAX_DEGREE])
        assert verify_equation(shift_equation(alice.public_key, last, MAX_DEGREE, srs))

    def test_shift_too_large(self, srs, alice):
        with pytest.raises(ShiftTooLargeError):
            shift_equation(alice.public_key, alice.public_key, MAX_DEGREE + 1, srs)

    def test_negative_shift(self, srs, alice):
        with pytest.raises(ShiftTooLargeError):
            shift_equation(alice.public_key, alice.public_key, -1, srs)


# ─────────────────────────────────────────────────────────────────────
# Single-value consistency proof
# ─────────────────────────────────────────────────────────────────────

class TestSingleValueProof:
    """단일 값 일관성 증명 테스트."""

    def test_valid_proof(self, srs, alice):
        encoded = alice.sign_point(srs.g2_powers[2])
        last = alice.sign_point(srs.g2_powers[MAX_DEGREE])
        assert verify_single_value(encoded, alice.public_key, last, 2, srs)

    def test_two_equations(self, srs, alice):
        encoded = alice.sign_point(srs.g2_powers[2])
        last = alice.sign_point(srs.g2_powers[MAX_DEGREE])
        equations = single_value_equations(encoded, alice.public_key, last, 2, srs)
        assert len(equations) == 2
        assert equations[0].a == srs.g1_powers[2]
        assert equations[1].a == srs.g1_powers[MAX_DEGREE]

    def test_artifacts_for_other_index_rejected(self, srs, alice):
        """Encoding derived for index j must not verify at index i != j."""
        encoded_for_1 = alice.sign_point(srs.g2_powers[1])
        last = alice.sign_point(srs.g2_powers[MAX_DEGREE])
        assert not verify_single_value(encoded_for_1, alice.public_key, last, 2, srs)

    def test_wrong_last_term_rejected(self, srs, alice):
        encoded = alice.sign_point(srs.g2_powers[2])
        wrong_last = alice.sign_point(srs.g2_powers[MAX_DEGREE - 1])
        assert not verify_single_value(encoded, alice.public_key, wrong_last, 2, srs)

    def test_extra_term_rejected(self, srs, alice):
        """A commitment with a second nonzero slot does not verify."""
        encoded = ec_add(
            alice.sign_point(srs.g2_powers[2]),
            alice.sign_point(srs.g2_powers[3]),
        )
        last = alice.sign_point(srs.g2_powers[MAX_DEGREE])
        assert not verify_single_value(encoded, alice.public_key, last, 2, srs)

    def test_verify_shift_equations_is_batched(self, srs, alice):
        encoded = alice.sign_point(srs.g2_powers[4])
        last = alice.sign_point(srs.g2_powers[MAX_DEGREE])
        equations = single_value_equations(encoded, alice.public_key, last, 4, srs)
        assert verify_shift_equations(equations)
