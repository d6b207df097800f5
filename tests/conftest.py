import sys
import os
import pytest

# 프로젝트 루트를 sys.path에 추가 (app.py, serializers.py 등 최상위 모듈)
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from aggvote.field import hash_to_fr
from aggvote.srs import TrustedSetup


# ── 테스트 상수 ──
MAX_DEGREE = 10
SMALL_DEGREE = 4


@pytest.fixture(scope="session")
def secret_k():
    """k = H("secret")"""
    return hash_to_fr("secret")


@pytest.fixture(scope="session")
def updated_setup(secret_k):
    """MAX_DEGREE=10, k = H("secret")로 한 번 갱신된 신뢰 설정.

    갱신 검증(20개 방정식)이 느리므로 세션 전체에서 공유한다.
    테스트에서 이 객체의 SRS를 갱신하면 안 된다.
    """
    setup = TrustedSetup(max_degree=MAX_DEGREE)
    setup.update(*setup.generate_update_proof(secret_k))
    return setup


@pytest.fixture
def small_setup():
    """s = 1로 초기화된 작은 신뢰 설정 (max_degree=4)."""
    return TrustedSetup(max_degree=SMALL_DEGREE)
