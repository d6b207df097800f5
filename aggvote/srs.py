"""
Structured Reference String (SRS) 및 신뢰 설정 관리자
=======================================================

**SRS란?**
  비밀 스칼라 s의 거듭제곱을 두 군 모두에 담은 공개 파라미터이다.

  SRS = {
      S1: [P1, s·P1, s²·P1, ..., s^d·P1]
      S2: [P2, s·P2, s²·P2, ..., s^d·P2]
  }

  0차 항은 항상 생성자이다 (s⁰ = 1, 비밀에 의존하지 않음).
  초기 상태는 s = 1, 즉 두 배열 모두 생성자로 채워진다.

**갱신 가능한(updatable) 설정**:
  누구든지 새 비밀 k를 골라 모든 항을 kⁱ배 하여 s를 k·s로 바꿀 수 있다.
  기여자 중 한 명이라도 자신의 k를 폐기하면 전체 비밀 k₁·k₂·…·s는
  아무도 알 수 없다.

  1. generate_update_proof(k): (로컬 계산) 갱신된 S1, S2와 증명 점 k·P1 생성
  2. update(S1', S2', proof): 2·MAX_DEGREE개의 페어링 방정식으로 검증 후 교체

**보안**:
  generate_update_proof는 k를 입력으로 받으므로, 공유되거나 관찰되는
  환경(공개 노드, 트랜잭션)에서 실행하면 k가 노출된다. 반드시 기여자
  자신의 로컬 환경에서만 실행해야 한다.

**버전 관리**:
  SRS 객체는 불변이다. update가 성공하면 version + 1인 새 SRS가 만들어져
  한 번에 교체되며, 갱신 도중의 부분 상태는 관찰되지 않는다.

사용 예시:
    >>> setup = TrustedSetup(max_degree=10)
    >>> k = hash_to_fr("secret")
    >>> update_proof = setup.generate_update_proof(k)
    >>> setup.update(*update_proof)
    >>> setup.srs.g1_powers[1] == ec_mul(P1, k)
    True
"""

import logging
from collections import namedtuple

from aggvote.config import MAX_DEGREE, data_array_size
from aggvote.errors import (
    InvalidDegreeZeroTermError,
    InvalidUpdateProofError,
    SRSLengthError,
)
from aggvote.field import FR, P1, P2, ec_mul, ec_neg, to_int, validate_g1, validate_g2
from aggvote.pairing import PairingEquation, verify_batch

logger = logging.getLogger(__name__)


UpdateProof = namedtuple("UpdateProof", ["g1_powers", "g2_powers", "proof"])
UpdateProof.__doc__ = """generate_update_proof의 결과: 갱신된 S1, S2와 증명 점 k·P1."""


class SRS:
    """Structured Reference String (불변, 버전 있음).

    속성:
        g1_powers: (P1, s·P1, ..., s^d·P1)
        g2_powers: (P2, s·P2, ..., s^d·P2)
        max_degree: 최대 차수 d
        version: 적용된 갱신 횟수
    """

    def __init__(self, g1_powers, g2_powers, max_degree, version=0):
        self.g1_powers = tuple(g1_powers)
        self.g2_powers = tuple(g2_powers)
        self.max_degree = max_degree
        self.version = version

    @classmethod
    def initial(cls, max_degree=MAX_DEGREE):
        """s = 1인 초기 SRS를 만든다 (모든 항이 생성자).

        Args:
            max_degree: 최대 차수 (1 이상)
        """
        if max_degree < 1:
            raise ValueError(f"max_degree는 1 이상이어야 합니다: {max_degree}")
        return cls([P1] * (max_degree + 1), [P2] * (max_degree + 1), max_degree)

    @property
    def data_array_size(self):
        return data_array_size(self.max_degree)

    def __eq__(self, other):
        if not isinstance(other, SRS):
            return NotImplemented
        return (
            self.max_degree == other.max_degree
            and self.g1_powers == other.g1_powers
            and self.g2_powers == other.g2_powers
        )

    def __repr__(self):
        return f"SRS(max_degree={self.max_degree}, version={self.version})"


def scale_powers(powers, k):
    """i번째 항에 kⁱ를 곱한 새 리스트를 반환한다."""
    scaled = []
    k_power = FR(1)  # k^0
    for point in powers:
        scaled.append(ec_mul(point, k_power))
        k_power = k_power * k
    return scaled


def update_equations(srs, updated_s1, updated_s2, proof):
    """SRS 갱신을 검증하는 2·d개의 페어링 방정식을 만든다.

    k·s를 새 비밀이라 하면:

      (1) S2'[1] = k·S2[1]
          e(k·P1, s·P2) · e(-P1, S2'[1]) = 1
      (2) d = 1..MAX: S1'[d] = (ks)·S1'[d-1]    (G1 사슬)
          e(S1'[d-1], S2'[1]) · e(-S1'[d], P2) = 1
      (3) d = 2..MAX: S2'[d]와 S1'[d]가 같은 지수   (교차 군 일관성)
          e(S1'[d], P2) · e(-P1, S2'[d]) = 1

    (1)은 증명 점 하나로 새 1차 항을 확정하고, (2)는 귀납적으로
    모든 G1 항을 연결한다. G2는 사슬을 만들 수 없으므로 (3)으로
    각 항을 대응하는 G1 항에 묶는다.

    Args:
        srs: 현재 SRS
        updated_s1, updated_s2: 후보 배열 (길이 검사는 호출자가 먼저 수행)
        proof: 증명 점 k·P1

    Returns:
        list[PairingEquation]: 길이 2·max_degree
    """
    d = srs.max_degree
    neg_p1 = ec_neg(P1)

    equations = [PairingEquation(proof, srs.g2_powers[1], neg_p1, updated_s2[1])]

    for degree in range(1, d + 1):
        equations.append(PairingEquation(
            updated_s1[degree - 1], updated_s2[1],
            ec_neg(updated_s1[degree]), P2,
        ))

    for degree in range(2, d + 1):
        equations.append(PairingEquation(
            updated_s1[degree], P2,
            neg_p1, updated_s2[degree],
        ))

    return equations


class TrustedSetup:
    """갱신 가능한 신뢰 설정 상태 기계.

    상태는 "초기화됨"(s = 1)과 "갱신됨"(임의 횟수)뿐이다.
    현재 SRS는 self.srs로 참조하며, update 성공 시에만 교체된다.
    """

    def __init__(self, max_degree=MAX_DEGREE, srs=None):
        self.srs = srs if srs is not None else SRS.initial(max_degree)

    @property
    def max_degree(self):
        return self.srs.max_degree

    @property
    def data_array_size(self):
        return self.srs.data_array_size

    def s1(self, i):
        """S1[i] = sⁱ·P1"""
        return self.srs.g1_powers[i]

    def s2(self, i):
        """S2[i] = sⁱ·P2"""
        return self.srs.g2_powers[i]

    def generate_update_proof(self, k):
        """새 비밀 k로 갱신된 SRS 후보와 증명을 만든다 (로컬 전용).

        경고:
            k를 알게 된 사람은 이 갱신의 기여를 무효화할 수 있다.
            공유 인프라나 트랜잭션 안에서 호출하지 말 것.

        Args:
            k: 0이 아닌 정수 또는 FR 원소

        Returns:
            UpdateProof: (S1'[i] = kⁱ·S1[i], S2'[i] = kⁱ·S2[i], k·P1)

        Raises:
            ValueError: k ≡ 0 (mod CURVE_ORDER)일 때
        """
        if to_int(k) == 0:
            raise ValueError("k는 0이 아니어야 합니다")
        k = FR(to_int(k))

        return UpdateProof(
            scale_powers(self.srs.g1_powers, k),
            scale_powers(self.srs.g2_powers, k),
            ec_mul(P1, k),
        )

    def check_update(self, updated_s1, updated_s2, proof):
        """갱신 후보를 검증한다. 실패하면 예외를 던지고 상태는 바꾸지 않는다.

        Raises:
            SRSLengthError: 배열 길이가 max_degree + 1이 아닐 때
            InvalidDegreeZeroTermError: 0차 항이 생성자가 아닐 때
            InvalidPointError: 곡선 밖의 점이 있을 때
            InvalidUpdateProofError: 페어링 배치 검사가 실패할 때
        """
        d = self.max_degree
        expected = d + 1
        if len(updated_s1) != expected or len(updated_s2) != expected:
            raise SRSLengthError(
                f"갱신 배열의 길이는 {expected}이어야 합니다: "
                f"S1={len(updated_s1)}, S2={len(updated_s2)}"
            )

        if updated_s1[0] != P1 or updated_s2[0] != P2:
            raise InvalidDegreeZeroTermError("0차 항은 생성자여야 합니다")

        for i in range(expected):
            validate_g1(updated_s1[i], f"S1[{i}]")
            validate_g2(updated_s2[i], f"S2[{i}]")
        validate_g1(proof, "proof")

        # 무한원점을 허용하면 k = 0으로 SRS를 붕괴시킬 수 있다
        if proof is None or any(p is None for p in updated_s1) or any(p is None for p in updated_s2):
            raise InvalidUpdateProofError("갱신 증명에 무한원점이 포함되어 있습니다")

        equations = update_equations(self.srs, updated_s1, updated_s2, proof)
        if not verify_batch(equations):
            raise InvalidUpdateProofError("신뢰 설정 갱신 증명이 유효하지 않습니다")

    def update(self, updated_s1, updated_s2, proof):
        """검증된 갱신을 원자적으로 적용한다.

        Returns:
            SRS: 새로 적용된 SRS
        """
        current = self.srs
        try:
            self.check_update(updated_s1, updated_s2, proof)
        except Exception:
            logger.info("rejected SRS update against version %d", current.version)
            raise

        self.srs = SRS(updated_s1, updated_s2, current.max_degree, current.version + 1)
        logger.info("applied SRS update: version %d -> %d", current.version, self.srs.version)
        return self.srs
