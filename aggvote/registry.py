"""
커밋먼트 기반 레지스트리 (토큰 + BLS 키)
==========================================

ERC20 스타일의 잔액 장부 위에 두 개의 누적 커밋먼트를 유지한다:

  balances_commitment (G1) = Σ balance(u) · S1[index(u)]
  keys_commitment     (G2) = Σ pk(u)      · s^index(u)

**등록 흐름**:
  1. registration_artifacts() → (S2[next_index], S2[MAX_DEGREE])
  2. 사용자가 자신의 비밀키 sk로 두 점에 서명(스칼라 곱)한다:
       encoded_key       = sk·S2[next_index]  (pk를 index 위치로 민 것)
       encoding_artifact = sk·S2[MAX_DEGREE]  (pk를 끝까지 민 것)
  3. register(caller, pk, encoded_key, encoding_artifact)
       단일 값 일관성 증명 (kzg.single_value_equations)으로 검증한 뒤
       두 커밋먼트에 더한다.

인덱스 0은 "미등록"을 뜻하며, 인덱스는 1부터 DATA_ARRAY_SIZE - 1까지 부여된다.

**알려진 한계**:
  일부 사용자만의 집계 공개키를 내적으로 뽑아내려면 제외된 사용자의
  협조가 필요하다. 이는 프로토콜 수준의 미해결 문제이며 여기서 다루지 않는다.

사용 예시:
    >>> registry = CommitmentRegistry(setup, "alice", 1000)
    >>> artifacts = registry.registration_artifacts()
    >>> registry.register("alice", wallet.public_key,
    ...                   wallet.sign_point(artifacts[0]),
    ...                   wallet.sign_point(artifacts[1]))
"""

import logging

from aggvote.config import INITIAL_SUPPLY
from aggvote.errors import (
    AlreadyRegisteredError,
    InsufficientBalanceError,
    InvalidRegistrationProofError,
    RegistryFullError,
)
from aggvote.field import ec_add, ec_neg, sum_points, validate_g2
from aggvote.kzg import G1_GROUP, commit_single_value, single_value_equations, verify_shift_equations

logger = logging.getLogger(__name__)


class CommitmentRegistry:
    """잔액과 BLS 키를 커밋먼트로 유지하는 레지스트리.

    속성:
        setup: TrustedSetup (현재 SRS를 호출 시점에 읽는다)
        balances: identity → 잔액
        index_of: identity → 인덱스 (미등록이면 없음)
        keys: identity → 등록된 공개키 (G2)
        next_index: 다음에 부여할 인덱스 (1부터 시작)
        keys_commitment: G2 누적 커밋먼트
        balances_commitment: G1 누적 커밋먼트
    """

    def __init__(self, setup, initial_holder=None, initial_supply=INITIAL_SUPPLY):
        self.setup = setup
        self.balances = {}
        self.index_of = {}
        self.keys = {}
        self.next_index = 1
        self.keys_commitment = None
        self.balances_commitment = None
        self.total_supply = 0

        if initial_holder is not None and initial_supply:
            self.balances[initial_holder] = initial_supply
            self.total_supply = initial_supply

    # ─── 조회 ───

    def balance_of(self, identity):
        return self.balances.get(identity, 0)

    def index_of_identity(self, identity):
        """등록된 인덱스를 반환한다. 미등록이면 0."""
        return self.index_of.get(identity, 0)

    def registration_artifacts(self):
        """다음 등록자가 서명할 두 점 (S2[next_index], S2[MAX_DEGREE]).

        Raises:
            RegistryFullError: 더 이상 부여할 인덱스가 없을 때
        """
        srs = self.setup.srs
        self._check_capacity(srs)
        return srs.g2_powers[self.next_index], srs.g2_powers[srs.max_degree]

    def _check_capacity(self, srs):
        if self.next_index >= srs.data_array_size:
            raise RegistryFullError(
                f"레지스트리가 가득 찼습니다 (DATA_ARRAY_SIZE={srs.data_array_size})"
            )

    # ─── 등록 ───

    def register(self, caller, key, encoded_key, encoding_artifact):
        """caller의 BLS 키를 다음 인덱스에 등록한다.

        Args:
            caller: 등록자 식별자
            key: 공개키 pk (G2, 위치 0의 값)
            encoded_key: pk를 next_index만큼 민 커밋먼트 (G2)
            encoding_artifact: pk를 MAX_DEGREE만큼 민 커밋먼트 (G2)

        Returns:
            int: 부여된 인덱스

        Raises:
            AlreadyRegisteredError: caller가 이미 인덱스를 가지고 있을 때
            RegistryFullError: 다음 인덱스가 DATA_ARRAY_SIZE에 도달했을 때
            InvalidRegistrationProofError: 단일 값 증명이 성립하지 않거나
                                           무한원점이 주어졌을 때
            InvalidPointError: G2 부분군의 점이 아닐 때
        """
        if caller in self.index_of:
            raise AlreadyRegisteredError(f"{caller}은(는) 이미 BLS 키를 가지고 있습니다")

        srs = self.setup.srs
        self._check_capacity(srs)
        index = self.next_index

        validate_g2(key, "key")
        validate_g2(encoded_key, "encoded_key")
        validate_g2(encoding_artifact, "encoding_artifact")
        # 무한원점이면 두 shift 방정식이 자명하게 성립한다
        if key is None or encoded_key is None or encoding_artifact is None:
            raise InvalidRegistrationProofError("키와 증명 점은 무한원점일 수 없습니다")

        equations = single_value_equations(encoded_key, key, encoding_artifact, index, srs)
        if not verify_shift_equations(equations):
            logger.info("rejected registration of %s at index %d", caller, index)
            raise InvalidRegistrationProofError("키를 등록할 수 없습니다. 증명이 유효하지 않습니다")

        # 모든 계산을 마친 뒤 상태를 한 번에 갱신한다
        keys_commitment = sum_points([self.keys_commitment, encoded_key])
        balances_commitment = self.balances_commitment
        balance = self.balance_of(caller)
        if balance:
            balances_commitment = ec_add(
                balances_commitment, commit_single_value(balance, index, G1_GROUP, srs)
            )

        self.index_of[caller] = index
        self.keys[caller] = key
        self.next_index = index + 1
        self.keys_commitment = keys_commitment
        self.balances_commitment = balances_commitment

        logger.info("registered %s at index %d", caller, index)
        return index

    # ─── 송금 ───

    def transfer(self, sender, recipient, amount):
        """sender에서 recipient로 amount를 옮긴다.

        등록된 당사자의 잔액이 바뀌면 balances_commitment도 함께 갱신한다:
          - amount·S1[index(sender)]
          + amount·S1[index(recipient)]

        Raises:
            ValueError: amount가 음수일 때
            InsufficientBalanceError: 잔액이 부족할 때
        """
        if amount < 0:
            raise ValueError(f"송금액은 음수일 수 없습니다: {amount}")
        sender_balance = self.balance_of(sender)
        if sender_balance < amount:
            raise InsufficientBalanceError(
                f"{sender}의 잔액 {sender_balance}이(가) 송금액 {amount}보다 작습니다"
            )

        srs = self.setup.srs
        balances_commitment = self.balances_commitment
        if amount and sender in self.index_of:
            delta = commit_single_value(amount, self.index_of[sender], G1_GROUP, srs)
            balances_commitment = ec_add(balances_commitment, ec_neg(delta))
        if amount and recipient in self.index_of:
            delta = commit_single_value(amount, self.index_of[recipient], G1_GROUP, srs)
            balances_commitment = ec_add(balances_commitment, delta)

        self.balances[sender] = sender_balance - amount
        self.balances[recipient] = self.balance_of(recipient) + amount
        self.balances_commitment = balances_commitment

        logger.debug("transfer %s -> %s: %d", sender, recipient, amount)
        return True
