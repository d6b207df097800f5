"""
다항식 커밋먼트 엔진
=====================

계수 배열 [c₀, c₁, ..., c_n]을 s에서 평가한 다항식으로 보고,
하나의 군 원소로 커밋한다:

    C = Σᵢ cᵢ · S[i] = p(s)·P

커밋먼트 연산은 다항식 연산을 그대로 따른다 (준동형성):
  commit(X) + commit(Y) = commit(X + Y)
  k·commit(X)          = commit(k·X)

**단일 값 커밋먼트**:
  인덱스 i에만 value가 있고 나머지는 0인 배열의 커밋먼트 = value·S[i].

**Shift 방정식**:
  left의 계수 배열을 delta칸 오른쪽으로 민 것이 right의 계수 배열임을 증명한다:

      1 = e(S1[delta], left) · e(-P1, right)

  즉 s^delta · left(s) = right(s). 배열 밖으로 밀려나는 항은 없어야 한다.

**단일 값 일관성 증명**:
  G2 커밋먼트 value_commitment가 정확히 index 위치에 하나의 값만 가짐을 증명한다.
  보조 커밋먼트:
    first: 같은 값이 위치 0에 있는 커밋먼트 (= 공개키 pk)
    last:  같은 값이 위치 MAX_DEGREE에 있는 커밋먼트
  두 shift 방정식:
    (first → value_commitment, shift = index)
    (first → last,             shift = MAX_DEGREE)
  첫 번째는 index 앞에 0이 아닌 항이 없음을, 두 번째는 값을 끝까지 밀어도
  last가 정확히 재현됨을 보인다.

사용 예시:
    >>> C = commit_single_value(FR(1000), 1, G1_GROUP, srs)   # 1000·S1[1]
    >>> eqs = single_value_equations(encoded_key, pk, artifact, 1, srs)
    >>> verify_shift_equations(eqs)
    True
"""

from aggvote.errors import IndexOutOfRangeError, ShiftTooLargeError
from aggvote.field import FR, P1, ec_add, ec_mul, ec_neg
from aggvote.pairing import PairingEquation, verify_batch


# 커밋먼트 군 식별자
G1_GROUP = "G1"
G2_GROUP = "G2"


def _powers(srs, group):
    if group == G1_GROUP:
        return srs.g1_powers
    if group == G2_GROUP:
        return srs.g2_powers
    raise ValueError(f"알 수 없는 군입니다: {group}")


def commit_single_value(value, index, group, srs):
    """인덱스 index에만 value가 있는 배열의 커밋먼트 value·S[index]를 만든다.

    Args:
        value: 정수 또는 FR 원소 (CURVE_ORDER로 축소)
        index: 계수 위치, 0 ≤ index < DATA_ARRAY_SIZE
        group: G1_GROUP 또는 G2_GROUP
        srs: SRS

    Returns:
        G1 또는 G2 점

    Raises:
        IndexOutOfRangeError: index가 범위를 벗어날 때
    """
    if not 0 <= index < srs.data_array_size:
        raise IndexOutOfRangeError(
            f"인덱스 {index}가 범위 [0, {srs.data_array_size})를 벗어났습니다"
        )
    return ec_mul(_powers(srs, group)[index], value)


def commit(coefficients, group, srs):
    """계수 배열 전체를 커밋한다: C = Σ cᵢ · S[i].

    Args:
        coefficients: 정수 또는 FR 원소의 리스트 (길이 ≤ DATA_ARRAY_SIZE)
        group: G1_GROUP 또는 G2_GROUP
        srs: SRS

    Returns:
        점 (모든 계수가 0이면 무한원점 None)

    Raises:
        IndexOutOfRangeError: 배열이 DATA_ARRAY_SIZE보다 길 때
    """
    if len(coefficients) > srs.data_array_size:
        raise IndexOutOfRangeError(
            f"계수 배열 길이 {len(coefficients)}가 {srs.data_array_size}를 초과합니다"
        )

    result = None
    for i, coeff in enumerate(coefficients):
        if FR(coeff) == FR(0):
            continue
        result = ec_add(result, commit_single_value(coeff, i, group, srs))
    return result


def shift_equation(left, right, delta, srs):
    """right = left를 delta칸 민 것 임을 주장하는 페어링 방정식.

        1 = e(S1[delta], left) · e(-P1, right)

    Args:
        left, right: G2 커밋먼트
        delta: 0 ≤ delta ≤ MAX_DEGREE
        srs: SRS

    Raises:
        ShiftTooLargeError: delta가 범위를 벗어날 때
    """
    if not 0 <= delta <= srs.max_degree:
        raise ShiftTooLargeError(
            f"shift {delta}가 범위 [0, {srs.max_degree}]를 벗어났습니다"
        )
    return PairingEquation(srs.g1_powers[delta], left, ec_neg(P1), right)


def single_value_equations(value_commitment, first, last, index, srs):
    """value_commitment가 index 위치에 단 하나의 값만 가짐을 증명하는 방정식들.

    Args:
        value_commitment: 검증 대상 G2 커밋먼트 (값이 index에 있음)
        first: 같은 값이 위치 0에 있는 G2 커밋먼트
        last: 같은 값이 위치 MAX_DEGREE에 있는 G2 커밋먼트
        index: 주장하는 위치
        srs: SRS

    Returns:
        list[PairingEquation]: 두 shift 방정식
    """
    return [
        shift_equation(first, value_commitment, index, srs),
        shift_equation(first, last, srs.max_degree, srs),
    ]


def verify_shift_equations(equations):
    """shift 방정식들을 배치 검증한다."""
    return verify_batch(equations)


def verify_single_value(value_commitment, first, last, index, srs):
    """단일 값 일관성 증명을 검증한다.

    Returns:
        bool: 증명이 성립하면 True
    """
    return verify_shift_equations(
        single_value_equations(value_commitment, first, last, index, srs)
    )
