"""
집계 투표 E2E 데모
====================

실행:
    python -m aggvote.example

흐름:
    1. 신뢰 설정 초기화 (s = 1)
    2. k = H("secret")로 로컬에서 갱신 증명 생성 후 적용
    3. Alice가 1000 토큰을 가진 레지스트리 생성
    4. Alice, Bob 키 등록 (Bob은 먼저 잘못된 위치로 시도)
    5. 투표 스냅샷
"""

from aggvote.errors import InvalidRegistrationProofError
from aggvote.field import FR, P1, ec_mul, hash_to_fr
from aggvote.registry import CommitmentRegistry
from aggvote.srs import TrustedSetup
from aggvote.voting import AggregateVoting
from aggvote.wallet import SimulatedBLSWallet


def main(max_degree=10):
    print("=" * 60)
    print("  Commitment-based Aggregate Voting Demo")
    print("=" * 60)

    # ── 1. 신뢰 설정 ──
    print(f"\n[1] 신뢰 설정 초기화 (MAX_DEGREE = {max_degree})...")
    setup = TrustedSetup(max_degree=max_degree)
    print(f"    DATA_ARRAY_SIZE: {setup.data_array_size}")

    # ── 2. 갱신 ──
    print("\n[2] 갱신 증명 생성 및 적용 (k = H(\"secret\"))...")
    k = hash_to_fr("secret")
    setup.update(*setup.generate_update_proof(k))
    ok = setup.s1(1) == ec_mul(P1, k)
    print(f"    S1[1] == k·P1: {'✓' if ok else '✗'}")

    # ── 3. 레지스트리 ──
    print("\n[3] 레지스트리 생성 (Alice: 1000)...")
    registry = CommitmentRegistry(setup, "alice", 1000)
    registry.transfer("alice", "bob", 100)
    print(f"    Alice: {registry.balance_of('alice')}, Bob: {registry.balance_of('bob')}")

    # ── 4. 등록 ──
    print("\n[4] 키 등록...")
    alice = SimulatedBLSWallet("Alice")
    artifacts = registry.registration_artifacts()
    registry.register("alice", alice.public_key,
                      alice.sign_point(artifacts[0]), alice.sign_point(artifacts[1]))
    expected = ec_mul(setup.s1(1), FR(900))
    print(f"    Alice 인덱스: {registry.index_of_identity('alice')}, "
          f"잔액 커밋먼트 == 900·S1[1]: {'✓' if registry.balances_commitment == expected else '✗'}")

    bob = SimulatedBLSWallet("Bob")
    artifacts = registry.registration_artifacts()
    try:
        # 인덱스 2 대신 1 위치로 인코딩
        registry.register("bob", bob.public_key,
                          bob.sign_point(setup.s2(1)), bob.sign_point(artifacts[1]))
        print("    Bob 잘못된 위치 등록: 성공 ✗")
    except InvalidRegistrationProofError:
        print("    Bob 잘못된 위치 등록: 거부 ✓ (예상대로)")
    registry.register("bob", bob.public_key,
                      bob.sign_point(artifacts[0]), bob.sign_point(artifacts[1]))
    print(f"    Bob 인덱스: {registry.index_of_identity('bob')}")

    # ── 5. 스냅샷 ──
    print("\n[5] 투표 스냅샷...")
    voting = AggregateVoting(registry, "Is Pluto a planet?")
    print(f"    {voting}")

    print("\n" + "=" * 60)
    return voting


if __name__ == "__main__":
    main()
