"""
페어링 방정식 트랜스크립트
============================

배치 검증에서 사용하는 의사난수 계수를 만들기 위한 SHA-256 해싱.

**왜 필요한가?**
  여러 방정식 1 = e(Aᵢ,Bᵢ)·e(Cᵢ,Dᵢ)를 하나의 페어링 곱으로 합칠 때,
  단순히 곱하기만 하면 공격자가 서로 상쇄되는 거짓 방정식들을 만들 수 있다.
  각 방정식에 rᵢ를 곱하면 (Aᵢ ← rᵢ·Aᵢ, Cᵢ ← rᵢ·Cᵢ)
  참인 방정식의 선형결합은 여전히 1이지만,
  거짓 방정식은 rᵢ를 미리 예측해야만 상쇄될 수 있다.

  rᵢ는 방정식 자신의 내용에서 유도되므로 입력을 바꾸면 rᵢ도 바뀐다.
  비밀 값이 아니므로 사이드 채널에 민감하지 않다.

**정규 직렬화 (Canonical serialization)**:
  G1: x ‖ y
  G2: x.imag ‖ x.real ‖ y.imag ‖ y.real   (EIP-197 순서)
  각 좌표는 32바이트 빅엔디안, 무한원점은 같은 길이의 0 바이트.

사용 예시:
    >>> t = Transcript()
    >>> t.append_g1(b"A", P1)
    >>> t.append_g2(b"B", P2)
    >>> r = t.challenge_scalar(b"r")
"""

import hashlib

from aggvote.field import FR, CURVE_ORDER


class Transcript:
    """SHA-256 기반 트랜스크립트.

    속성:
        state: 현재까지 누적된 해시 입력 바이트열
    """

    def __init__(self, label=b"aggvote"):
        """트랜스크립트를 초기화한다.

        Args:
            label: 도메인 분리용 레이블
        """
        self.state = bytearray()
        self.state.extend(label)

    def append_scalar(self, label, scalar):
        """FR 스칼라 값을 32바이트 빅엔디안으로 추가한다."""
        self.state.extend(label)
        val = int(scalar) % CURVE_ORDER
        self.state.extend(val.to_bytes(32, "big"))

    def append_g1(self, label, point):
        """G1 점을 추가한다. 무한원점(None)은 64바이트의 0."""
        self.state.extend(label)
        if point is None:
            self.state.extend(b"\x00" * 64)
        else:
            x, y = point
            self.state.extend(int(x).to_bytes(32, "big"))
            self.state.extend(int(y).to_bytes(32, "big"))

    def append_g2(self, label, point):
        """G2 점을 추가한다. 무한원점(None)은 128바이트의 0.

        FQ2 원소 a + b·i는 coeffs = (a, b)로 저장된다.
        EIP-197 순서에 따라 허수부(b)를 먼저 쓴다.
        """
        self.state.extend(label)
        if point is None:
            self.state.extend(b"\x00" * 128)
        else:
            x, y = point
            for coord in (x, y):
                real, imag = coord.coeffs
                self.state.extend(int(imag).to_bytes(32, "big"))
                self.state.extend(int(real).to_bytes(32, "big"))

    def challenge_scalar(self, label):
        """현재 상태를 SHA-256으로 해싱하여 FR 챌린지를 생성한다.

        생성된 해시는 상태에 다시 추가된다 (체이닝).
        """
        self.state.extend(label)
        h = hashlib.sha256(bytes(self.state)).digest()
        challenge = FR(int.from_bytes(h, "big") % CURVE_ORDER)
        self.state.extend(h)
        return challenge


def equation_randomizer(equation):
    """페어링 방정식 (A, B, C, D)의 내용으로부터 배치 계수 r을 유도한다.

    Args:
        equation: PairingEquation

    Returns:
        FR: sha256(label ‖ A ‖ B ‖ C ‖ D) mod CURVE_ORDER
    """
    t = Transcript(b"pairing-batch")
    t.append_g1(b"A", equation.a)
    t.append_g2(b"B", equation.b)
    t.append_g1(b"C", equation.c)
    t.append_g2(b"D", equation.d)
    return t.challenge_scalar(b"r")
