"""
페어링 방정식 검증
====================

시스템의 모든 일관성 검사는 다음 형태의 방정식 하나 이상으로 환원된다:

    1 = e(A, B) · e(C, D)        (A, C ∈ G1,  B, D ∈ G2)

예를 들어 "X = k·Y" 를 확인하려면 e(k·P1, Y)·e(-P1, X) = 1 을 쓴다.
음수 부호는 항상 G1 쪽 인자(C)에 붙인다.

**배치 검증**:
  방정식 n개를 각각 검사하면 페어링 2n번과 최종 거듭제곱(final
  exponentiation) 2n번이 필요하다. 대신

    1 = Π e(rᵢ·Aᵢ, Bᵢ) · e(rᵢ·Cᵢ, Dᵢ)

  를 한 번에 검사한다. Miller loop 결과를 곱한 뒤 최종 거듭제곱은
  한 번만 수행한다.

  - r₀ = 1 (0번 방정식은 무작위화하지 않는다)
  - rᵢ (i ≥ 1) = transcript.equation_randomizer(방정식 i)

  0번 방정식의 계수를 1로 고정하면 결합이 모두 0이 되는 퇴화 사례를 피한다.

사용 예시:
    >>> eq = PairingEquation(ec_mul(P1, 3), P2, ec_neg(P1), ec_mul(P2, 3))
    >>> verify_equation(eq)
    True
"""

import logging
from collections import namedtuple

from py_ecc import optimized_bn128
from py_ecc.fields import optimized_bn128_FQ12 as FQ12

from aggvote.errors import EmptyBatchError
from aggvote.field import (
    P2, ec_mul, ec_neg, hash_to_g1,
    to_optimized_g1, to_optimized_g2,
    validate_g1, validate_g2,
)
from aggvote.transcript import equation_randomizer

logger = logging.getLogger(__name__)


PairingEquation = namedtuple("PairingEquation", ["a", "b", "c", "d"])
PairingEquation.__doc__ = """1 = e(a, b)·e(c, d)를 주장하는 방정식. a, c ∈ G1, b, d ∈ G2."""


def ec_pairing(g2_point, g1_point, final_exponentiate=True):
    """쌍선형 페어링 e(G1, G2) → GT.

    주의:
        py_ecc 페어링의 인자 순서는 (G2, G1)이다.
        final_exponentiate 인자는 optimized_bn128.pairing에만 있으므로
        아핀 점을 사영 좌표로 바꿔서 호출한다. 반환값은 optimized FQ12이다.

    Args:
        g2_point: G2 위의 점
        g1_point: G1 위의 점
        final_exponentiate: False이면 Miller loop 결과만 반환한다
                            (배치 검증에서 곱한 뒤 한 번에 거듭제곱).
    """
    if g1_point is None or g2_point is None:
        return FQ12.one()
    return optimized_bn128.pairing(
        to_optimized_g2(g2_point),
        to_optimized_g1(g1_point),
        final_exponentiate=final_exponentiate,
    )


def validate_equation(equation):
    """방정식의 네 점이 올바른 군에 속하는지 확인한다."""
    validate_g1(equation.a, "A")
    validate_g2(equation.b, "B")
    validate_g1(equation.c, "C")
    validate_g2(equation.d, "D")


def randomize(equations):
    """0번을 제외한 각 방정식의 G1 인자에 내용 기반 계수를 곱한다.

    Returns:
        list[PairingEquation]: 무작위화된 방정식들 (원본은 변경하지 않음)
    """
    randomized = []
    for i, eq in enumerate(equations):
        if i == 0:
            randomized.append(eq)
            continue
        r = equation_randomizer(eq)
        randomized.append(PairingEquation(ec_mul(eq.a, r), eq.b, ec_mul(eq.c, r), eq.d))
    return randomized


def verify_batch(equations):
    """페어링 방정식들을 무작위 선형결합으로 한 번에 검증한다.

    Args:
        equations: PairingEquation 시퀀스

    Returns:
        bool: 모든 방정식이 (압도적 확률로) 성립하면 True

    Raises:
        EmptyBatchError: 방정식이 하나도 없을 때
        InvalidPointError: 점이 올바른 곡선 위에 있지 않을 때
    """
    equations = list(equations)
    if not equations:
        raise EmptyBatchError("검증할 페어링 방정식이 없습니다")

    for eq in equations:
        validate_equation(eq)

    # Π e(rᵢ·Aᵢ, Bᵢ)·e(rᵢ·Cᵢ, Dᵢ)  (Miller loop만)
    product = FQ12.one()
    for eq in randomize(equations):
        product = product * ec_pairing(eq.b, eq.a, final_exponentiate=False)
        product = product * ec_pairing(eq.d, eq.c, final_exponentiate=False)

    result = optimized_bn128.final_exponentiate(product) == FQ12.one()
    logger.debug("batch of %d pairing equations: %s", len(equations), result)
    return result


def verify_equation(equation):
    """단일 페어링 방정식을 검증한다."""
    return verify_batch([equation])


def signature_equation(message, signature, public_key):
    """BLS 서명 검증 방정식: 1 = e(σ, -P2)·e(H(m), pk).

    e(σ, P2) = e(sk·H(m), P2) = e(H(m), sk·P2) = e(H(m), pk)
    """
    return PairingEquation(signature, ec_neg(P2), hash_to_g1(message), public_key)


def verify_signature(message, signature, public_key):
    """BLS 서명을 검증한다.

    Args:
        message: 서명된 메시지 (bytes 또는 str)
        signature: G1 점 σ = sk·H(m)
        public_key: G2 점 pk = sk·P2

    Returns:
        bool: 서명이 유효하면 True
    """
    return verify_equation(signature_equation(message, signature, public_key))
