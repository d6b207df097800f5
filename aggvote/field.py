"""
군 연산 어댑터: 스칼라 필드 및 타원곡선 연산
==============================================

bn128 (alt_bn128, BN254) 곡선 위의 원시 연산을 서술적인 API로 감싼다.
다른 모든 모듈은 py_ecc를 직접 호출하지 않고 이 모듈을 거친다.

**스칼라 FR**:
  bn128 곡선 위수(≈ 2^254) 위의 소수체. 모든 지수와 곱셈 인자는
  이 위수로 축소된다.

**G1 / G2**:
  비대칭으로 사용되는 두 곡선 군.
  - G1: "값" 커밋먼트 (잔액, 서명)
  - G2: "키" 커밋먼트 (공개키)
  점은 불변 튜플이며, 무한원점은 None으로 표현된다.

**해시-투-커브**:
  메시지를 G1 점으로 보내는 try-and-increment 방식.
  sha256(message ‖ counter)를 x좌표 후보로 보고 y² = x³ + 3의 제곱근이
  존재하는 첫 후보를 사용한다. 최대 256번 시도한다.

사용 예시:
    >>> from aggvote.field import P1, P2, ec_mul, sum_points
    >>> Q = ec_mul(P1, 5)                  # 5·P1
    >>> sum_points([P1, P1]) == ec_mul(P1, 2)
    True
"""

import hashlib
import logging

from py_ecc import bn128, optimized_bn128
from py_ecc.fields import bn128_FQ as FQ
from py_ecc.fields import bn128_FQ2 as FQ2

from aggvote.errors import EmptyInputError, InvalidPointError, NoValidPointError

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# 유한체(Finite Field) FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    예시:
        >>> FR(3) * FR(7)   # FR(21)
        >>> FR(1) / FR(3)   # 3의 모듈러 역원
    """
    field_modulus = bn128.curve_order


# 곡선 위수 (EIP-197의 q)
CURVE_ORDER = bn128.curve_order

# 베이스 필드 소수 (p ≡ 3 mod 4)
FIELD_MODULUS = bn128.field_modulus

# 해시-투-커브 최대 시도 횟수
HASH_TO_CURVE_ATTEMPTS = 256


# ─────────────────────────────────────────────────────────────────────
# 생성자 (Generators)
# ─────────────────────────────────────────────────────────────────────

# G1 생성자
P1 = bn128.G1

# G2 생성자
P2 = bn128.G2


def to_int(scalar):
    """정수 또는 FR 원소를 [0, CURVE_ORDER) 범위의 정수로 변환한다."""
    if isinstance(scalar, FQ):
        scalar = int(scalar)
    return scalar % CURVE_ORDER


# ─────────────────────────────────────────────────────────────────────
# 타원곡선 연산
# ─────────────────────────────────────────────────────────────────────

def ec_mul(point, scalar):
    """타원곡선 스칼라 곱셈: scalar · point.

    스칼라는 CURVE_ORDER로 축소된다.

    Args:
        point: G1 또는 G2 위의 점
        scalar: 정수 또는 FR 원소

    Returns:
        scalar · point (같은 그룹의 점)

    예시:
        >>> P = ec_mul(P1, FR(5))  # 5·P1
        >>> Q = ec_mul(P2, 3)       # 3·P2
    """
    if point is None:
        return None
    return bn128.multiply(point, to_int(scalar))


def ec_add(p1, p2):
    """타원곡선 점 덧셈: p1 + p2. (무한원점은 항등원)"""
    if p1 is None:
        return p2
    if p2 is None:
        return p1
    return bn128.add(p1, p2)


def ec_neg(point):
    """타원곡선 점의 역원 (negation): -point."""
    if point is None:
        return None
    return bn128.neg(point)


def sum_points(points):
    """같은 그룹 점들의 순서 있는 시퀀스를 모두 더한다.

    Args:
        points: G1 점들 또는 G2 점들의 시퀀스 (비어 있으면 안 됨)

    Returns:
        Σ points

    Raises:
        EmptyInputError: 점이 하나도 없을 때

    예시:
        >>> sum_points([P1, ec_mul(P1, 2)]) == ec_mul(P1, 3)
        True
    """
    points = list(points)
    if not points:
        raise EmptyInputError("합할 점이 없습니다")

    result = points[0]
    for point in points[1:]:
        result = ec_add(result, point)
    return result


def is_g1(point):
    """point가 G1 곡선 위의 점(또는 무한원점)인지 확인한다."""
    if point is None:
        return True
    if not isinstance(point, tuple) or len(point) != 2:
        return False
    if not all(isinstance(c, FQ) for c in point):
        return False
    return bn128.is_on_curve(point, bn128.b)


def is_g2(point):
    """point가 G2 부분군의 점(또는 무한원점)인지 확인한다.

    twist 곡선의 cofactor가 1이 아니므로 곡선 위에 있다는 것만으로는
    부족하다. CURVE_ORDER·point가 무한원점인지도 확인한다.
    """
    if point is None:
        return True
    if not isinstance(point, tuple) or len(point) != 2:
        return False
    if not all(isinstance(c, FQ2) for c in point):
        return False
    if not bn128.is_on_curve(point, bn128.b2):
        return False
    return optimized_bn128.is_inf(optimized_bn128.multiply(to_optimized_g2(point), CURVE_ORDER))


# ─── py_ecc optimized (사영 좌표) 변환 ───

def to_optimized_g1(point):
    """아핀 G1 점 → optimized_bn128 사영 좌표 (x, y, 1)."""
    if point is None:
        return optimized_bn128.Z1
    x, y = point
    return (optimized_bn128.FQ(int(x)), optimized_bn128.FQ(int(y)), optimized_bn128.FQ.one())


def to_optimized_g2(point):
    """아핀 G2 점 → optimized_bn128 사영 좌표 (x, y, 1)."""
    if point is None:
        return optimized_bn128.Z2
    x, y = point
    return (
        optimized_bn128.FQ2([int(c) for c in x.coeffs]),
        optimized_bn128.FQ2([int(c) for c in y.coeffs]),
        optimized_bn128.FQ2.one(),
    )


def validate_g1(point, name="point"):
    """G1 점이 아니면 InvalidPointError를 던진다."""
    if not is_g1(point):
        raise InvalidPointError(f"{name}이(가) G1 곡선 위의 점이 아닙니다")
    return point


def validate_g2(point, name="point"):
    """G2 점이 아니면 InvalidPointError를 던진다."""
    if not is_g2(point):
        raise InvalidPointError(f"{name}이(가) G2 곡선 위의 점이 아닙니다")
    return point


# ─────────────────────────────────────────────────────────────────────
# 해시 (Hashing)
# ─────────────────────────────────────────────────────────────────────

def _to_bytes(message):
    if isinstance(message, str):
        return message.encode()
    return bytes(message)


def hash_to_fr(message):
    """메시지를 sha256으로 해싱하여 FR 원소로 축소한다.

    신뢰 설정 기여자의 비밀 값 k = H("secret")과 같은
    결정론적 스칼라를 만드는 데 사용한다.

    Args:
        message: bytes 또는 str

    Returns:
        FR: sha256(message) mod CURVE_ORDER
    """
    h = hashlib.sha256(_to_bytes(message)).digest()
    return FR(int.from_bytes(h, "big") % CURVE_ORDER)


def hash_to_g1(message):
    """메시지를 G1 점으로 매핑한다 (try-and-increment).

    counter = 0, 1, ..., 255에 대해:
      x = sha256(message ‖ counter) mod p
      y² = x³ + 3 의 제곱근이 있으면 (x, y) 반환

    p ≡ 3 (mod 4)이므로 제곱근 후보는 (x³+3)^((p+1)/4)이다.
    각 시도는 대략 1/2 확률로 성공한다.

    Args:
        message: bytes 또는 str

    Returns:
        G1 점

    Raises:
        NoValidPointError: 256번의 시도 모두 실패했을 때
    """
    data = _to_bytes(message)
    for counter in range(HASH_TO_CURVE_ATTEMPTS):
        h = hashlib.sha256(data + bytes([counter])).digest()
        x = FQ(int.from_bytes(h, "big") % FIELD_MODULUS)
        rhs = x ** 3 + bn128.b
        y = rhs ** ((FIELD_MODULUS + 1) // 4)
        if y * y == rhs:
            return (x, y)

    logger.warning("hash_to_g1 exhausted %d attempts", HASH_TO_CURVE_ATTEMPTS)
    raise NoValidPointError(
        f"{HASH_TO_CURVE_ATTEMPTS}번의 시도 안에 유효한 점을 찾지 못했습니다"
    )
