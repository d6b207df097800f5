"""
예외 분류 (Error taxonomy)
===========================

모든 오류는 호출자에게 동기적으로 전달되며, 내부 재시도는 없다.

  - MalformedInputError:     잘못된 입력 (빈 배열, 범위 밖 인덱스, 곡선 밖의 점).
                             암호학적 검사 이전에 거부된다.
  - ProofVerificationError:  페어링 방정식이 성립하지 않음 (변조 또는 호출자 버그).
  - StatePreconditionError:  상태 선행조건 위반 (이미 등록됨, 레지스트리 가득 참).
                             호출자가 분기할 수 있도록 구분 가능한 타입으로 전달된다.
"""


class AggVoteError(Exception):
    """aggvote 예외의 최상위 클래스."""


# ─── 잘못된 입력 ───

class MalformedInputError(AggVoteError, ValueError):
    pass


class EmptyInputError(MalformedInputError):
    """빈 점 시퀀스의 합."""


class EmptyBatchError(MalformedInputError):
    """빈 페어링 방정식 배치."""


class IndexOutOfRangeError(MalformedInputError):
    """커밋 인덱스가 [0, DATA_ARRAY_SIZE) 밖에 있음."""


class ShiftTooLargeError(MalformedInputError):
    """shift 값이 [0, MAX_DEGREE] 밖에 있음."""


class SRSLengthError(MalformedInputError):
    """갱신된 SRS 배열의 길이가 MAX_DEGREE + 1이 아님."""


class InvalidPointError(MalformedInputError):
    """곡선 위에 있지 않은 점."""


class InvalidDegreeZeroTermError(MalformedInputError):
    """갱신된 SRS의 0차 항이 생성자가 아님."""


# ─── 해시-투-커브 ───

class NoValidPointError(AggVoteError):
    """제한된 시도 횟수 안에 유효한 곡선 점을 찾지 못함."""


# ─── 증명 검증 실패 ───

class ProofVerificationError(AggVoteError):
    pass


class InvalidUpdateProofError(ProofVerificationError):
    """신뢰 설정 갱신 증명이 유효하지 않음."""


class InvalidRegistrationProofError(ProofVerificationError):
    """키 등록 증명이 유효하지 않음."""


# ─── 상태 선행조건 ───

class StatePreconditionError(AggVoteError):
    pass


class AlreadyRegisteredError(StatePreconditionError):
    """이미 인덱스를 가진 사용자의 재등록."""


class RegistryFullError(StatePreconditionError):
    """다음 인덱스가 DATA_ARRAY_SIZE에 도달함."""


class InsufficientBalanceError(StatePreconditionError):
    """송금액이 잔액보다 큼."""
