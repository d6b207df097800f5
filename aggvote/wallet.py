"""
시뮬레이션 BLS 지갑 (테스트 전용)
==================================

이름에서 결정론적으로 유도한 비밀키로 서명하는 장난감 지갑이다.
실제 키 관리에 사용하면 안 된다.

  sk = sha256(name) mod CURVE_ORDER
  pk = sk·P2
  sign(m)       = sk·H(m)      (G1, BLS 서명)
  sign_point(Q) = sk·Q         (G2, 등록 아티팩트를 키 인코딩으로 바꿈)

사용 예시:
    >>> alice = SimulatedBLSWallet("Alice")
    >>> sig = alice.sign(b"A sample message")
    >>> verify_signature(b"A sample message", sig, alice.public_key)
    True
"""

from aggvote.field import P2, ec_mul, hash_to_fr, hash_to_g1


class SimulatedBLSWallet:
    """이름 기반 결정론적 BLS 지갑."""

    def __init__(self, name):
        self.name = name
        self._secret = hash_to_fr(name)
        self.public_key = ec_mul(P2, self._secret)

    def sign(self, message):
        """메시지에 대한 BLS 서명 sk·H(m)을 만든다."""
        return ec_mul(hash_to_g1(message), self._secret)

    def sign_point(self, point):
        """G2 점에 비밀키를 곱한다."""
        return ec_mul(point, self._secret)

    def __repr__(self):
        return f"SimulatedBLSWallet({self.name!r})"
