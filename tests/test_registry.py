"""
Tests for the commitment-backed registry (aggvote.registry).

Covers:
- initial state and registration artifacts
- successful registrations (Alice, Bob) and commitment updates
- AlreadyRegistered / RegistryFull / InvalidRegistrationProof without state changes
- transfers keeping the balances commitment consistent
"""

import pytest

from aggvote.errors import (
    AlreadyRegisteredError,
    InsufficientBalanceError,
    InvalidRegistrationProofError,
    RegistryFullError,
    StatePreconditionError,
)
from aggvote.field import FR, ec_add, ec_mul, sum_points
from aggvote.registry import CommitmentRegistry
from aggvote.wallet import SimulatedBLSWallet

from conftest import MAX_DEGREE


INITIAL_SUPPLY = 1000 * 10 ** 18


@pytest.fixture(scope="module")
def wallets():
    return {name: SimulatedBLSWallet(name) for name in ("Alice", "Bob")}


@pytest.fixture
def registry(updated_setup):
    return CommitmentRegistry(updated_setup, "alice", INITIAL_SUPPLY)


def _register(registry, identity, wallet):
    encoding_point, artifact_point = registry.registration_artifacts()
    return registry.register(
        identity,
        wallet.public_key,
        wallet.sign_point(encoding_point),
        wallet.sign_point(artifact_point),
    )


# ─────────────────────────────────────────────────────────────────────
# Initialization
# ─────────────────────────────────────────────────────────────────────

class TestInitialization:
    """레지스트리 초기 상태 테스트."""

    def test_initial_supply(self, registry):
        assert registry.balance_of("alice") == INITIAL_SUPPLY
        assert registry.total_supply == INITIAL_SUPPLY

    def test_first_free_index_is_one(self, registry):
        assert registry.next_index == 1

    def test_commitments_start_empty(self, registry):
        assert registry.keys_commitment is None
        assert registry.balances_commitment is None

    def test_unregistered_index_is_zero(self, registry):
        assert registry.index_of_identity("alice") == 0

    def test_artifacts(self, registry, updated_setup):
        encoding_point, artifact_point = registry.registration_artifacts()
        assert encoding_point == updated_setup.s2(1)
        assert artifact_point == updated_setup.s2(MAX_DEGREE)


# ─────────────────────────────────────────────────────────────────────
# Registration
# ─────────────────────────────────────────────────────────────────────

class TestRegister:
    """키 등록 테스트."""

    def test_alice_registers(self, registry, wallets, updated_setup, secret_k):
        index = _register(registry, "alice", wallets["Alice"])
        assert index == 1
        assert registry.index_of_identity("alice") == 1
        assert registry.next_index == 2
        assert registry.keys_commitment == ec_mul(wallets["Alice"].public_key, secret_k)

    def test_balances_commitment_after_registration(self, registry, wallets, updated_setup, secret_k):
        """Balances commitment matches the array [0, 1000e18, 0, ...]."""
        _register(registry, "alice", wallets["Alice"])
        expected = ec_mul(updated_setup.s1(1), INITIAL_SUPPLY)
        assert registry.balances_commitment == expected
        assert registry.balances_commitment == ec_mul(updated_setup.s1(0), FR(INITIAL_SUPPLY) * secret_k)

    def test_zero_balance_leaves_values_commitment(self, registry, wallets):
        _register(registry, "bob", wallets["Bob"])
        assert registry.balances_commitment is None
        assert registry.keys_commitment is not None

    def test_second_registration_adds_key(self, registry, wallets):
        _register(registry, "alice", wallets["Alice"])
        previous = registry.keys_commitment
        encoding_point, artifact_point = registry.registration_artifacts()
        encoded_key = wallets["Bob"].sign_point(encoding_point)
        registry.register("bob", wallets["Bob"].public_key, encoded_key,
                          wallets["Bob"].sign_point(artifact_point))
        assert registry.index_of_identity("bob") == 2
        assert registry.next_index == 3
        assert registry.keys_commitment == sum_points([previous, encoded_key])

    def test_double_registration_rejected(self, registry, wallets):
        _register(registry, "alice", wallets["Alice"])
        keys_before = registry.keys_commitment
        balances_before = registry.balances_commitment

        with pytest.raises(AlreadyRegisteredError):
            _register(registry, "alice", wallets["Alice"])

        assert registry.keys_commitment == keys_before
        assert registry.balances_commitment == balances_before
        assert registry.next_index == 2

    def test_wrong_position_rejected(self, registry, wallets, updated_setup):
        """Bob encodes his key at index 1 while slot 2 is assigned."""
        _register(registry, "alice", wallets["Alice"])
        keys_before = registry.keys_commitment
        _, artifact_point = registry.registration_artifacts()
        bob = wallets["Bob"]
        shifted = bob.sign_point(updated_setup.s2(1))

        with pytest.raises(InvalidRegistrationProofError):
            registry.register("bob", bob.public_key, shifted, bob.sign_point(artifact_point))

        assert registry.index_of_identity("bob") == 0
        assert registry.next_index == 2
        assert registry.keys_commitment == keys_before

    def test_someone_elses_key_rejected(self, registry, wallets):
        """Artifacts signed by Alice cannot register Bob's public key."""
        encoding_point, artifact_point = registry.registration_artifacts()
        alice = wallets["Alice"]
        with pytest.raises(InvalidRegistrationProofError):
            registry.register("bob", wallets["Bob"].public_key,
                              alice.sign_point(encoding_point), alice.sign_point(artifact_point))

    def test_registry_full(self, registry, wallets):
        registry.next_index = registry.setup.data_array_size - 1
        _register(registry, "alice", wallets["Alice"])
        assert registry.next_index == registry.setup.data_array_size

        with pytest.raises(RegistryFullError):
            registry.register("bob", wallets["Bob"].public_key, None, None)

    def test_artifacts_when_full(self, registry):
        registry.next_index = registry.setup.data_array_size
        with pytest.raises(RegistryFullError):
            registry.registration_artifacts()

    def test_infinity_key_rejected(self, registry):
        """A slot cannot be claimed with points at infinity."""
        with pytest.raises(InvalidRegistrationProofError):
            registry.register("alice", None, None, None)

        assert registry.index_of_identity("alice") == 0
        assert registry.next_index == 1
        assert registry.keys_commitment is None
        assert registry.balances_commitment is None

    def test_infinity_artifact_rejected(self, registry, wallets):
        encoding_point, _ = registry.registration_artifacts()
        alice = wallets["Alice"]
        with pytest.raises(InvalidRegistrationProofError):
            registry.register("alice", alice.public_key, alice.sign_point(encoding_point), None)
        assert registry.next_index == 1

    def test_state_errors_are_distinguishable(self):
        assert issubclass(AlreadyRegisteredError, StatePreconditionError)
        assert issubclass(RegistryFullError, StatePreconditionError)
        assert not issubclass(InvalidRegistrationProofError, StatePreconditionError)


# ─────────────────────────────────────────────────────────────────────
# Transfers
# ─────────────────────────────────────────────────────────────────────

class TestTransfer:
    """송금 테스트."""

    def test_balances_move(self, registry):
        registry.transfer("alice", "bob", 100)
        assert registry.balance_of("alice") == INITIAL_SUPPLY - 100
        assert registry.balance_of("bob") == 100

    def test_insufficient_balance(self, registry):
        with pytest.raises(InsufficientBalanceError):
            registry.transfer("bob", "alice", 1)

    def test_negative_amount(self, registry):
        with pytest.raises(ValueError):
            registry.transfer("alice", "bob", -1)

    def test_unregistered_parties_leave_commitment(self, registry):
        registry.transfer("alice", "bob", 100)
        assert registry.balances_commitment is None

    def test_registered_parties_update_commitment(self, registry, wallets, updated_setup):
        _register(registry, "alice", wallets["Alice"])
        _register(registry, "bob", wallets["Bob"])
        registry.transfer("alice", "bob", 100)
        expected = ec_add(
            ec_mul(updated_setup.s1(1), INITIAL_SUPPLY - 100),
            ec_mul(updated_setup.s1(2), 100),
        )
        assert registry.balances_commitment == expected

    def test_balance_registered_after_transfer(self, registry, wallets, updated_setup):
        registry.transfer("alice", "bob", 250)
        _register(registry, "bob", wallets["Bob"])
        assert registry.balances_commitment == ec_mul(updated_setup.s1(1), 250)
