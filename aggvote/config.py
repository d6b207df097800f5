"""
설정 (Configuration)
=====================

프로토콜 상수와 실행 환경 설정을 정의한다.

**MAX_DEGREE**:
  SRS가 담는 s의 최고 차수. 테스트 구성은 10을 사용한다.
  실제 시스템에서는 수백만 단위의 값이 필요하다.

**DATA_ARRAY_SIZE**:
  커밋먼트가 담을 수 있는 계수 배열의 길이 = MAX_DEGREE // 2 + 1.
  두 커밋된 다항식의 곱(차수 최대 2·(DATA_ARRAY_SIZE-1))도
  MAX_DEGREE를 넘지 않도록 절반으로 제한한다.

환경 변수로 값을 덮어쓸 수 있다:
    AGGVOTE_MAX_DEGREE, AGGVOTE_INITIAL_SUPPLY, AGGVOTE_INITIAL_HOLDER,
    AGGVOTE_DB_PATH, AGGVOTE_LOG_LEVEL, AGGVOTE_HOST, AGGVOTE_PORT
"""

import os


def data_array_size(max_degree):
    """max_degree에 대응하는 DATA_ARRAY_SIZE를 반환한다."""
    return max_degree // 2 + 1


# 기본값
MAX_DEGREE = int(os.getenv('AGGVOTE_MAX_DEGREE', 10))
DATA_ARRAY_SIZE = data_array_size(MAX_DEGREE)

# 기본 초기 발행량: 1000e18
INITIAL_SUPPLY = int(os.getenv('AGGVOTE_INITIAL_SUPPLY', 1000 * 10 ** 18))

INITIAL_HOLDER = os.getenv('AGGVOTE_INITIAL_HOLDER', 'deployer')

DEFAULT_DB_PATH = os.getenv('AGGVOTE_DB_PATH', 'db.json')
DEFAULT_LOG_LEVEL = os.getenv('AGGVOTE_LOG_LEVEL', 'INFO')
DEFAULT_HOST = os.getenv('AGGVOTE_HOST', 'localhost')
DEFAULT_PORT = int(os.getenv('AGGVOTE_PORT', 5000))


class Config:
    """실행 설정"""

    def __init__(self):
        self.max_degree = MAX_DEGREE
        self.initial_supply = INITIAL_SUPPLY
        self.initial_holder = INITIAL_HOLDER
        self.db_path = DEFAULT_DB_PATH
        self.log_level = DEFAULT_LOG_LEVEL
        self.host = DEFAULT_HOST
        self.port = DEFAULT_PORT

    @property
    def data_array_size(self):
        return data_array_size(self.max_degree)


# 전역 설정 인스턴스
config = Config()
