"""
집계 투표 (Aggregate Voting)
=============================

투표 주제마다 레지스트리의 두 누적 커밋먼트를 스냅샷한다.

점은 불변 튜플이므로 스냅샷은 복사 의미론을 가진다. 스냅샷 이후
레지스트리에 등록이나 송금이 일어나도 이미 찍힌 스냅샷은 바뀌지 않는다.

집계 서명 검증과 개표는 이 모듈의 범위 밖이다.

**알려진 한계**:
  참여자 일부만의 집계 공개키를 keys_commitment에서 내적으로 뽑으려면
  참여하지 않은 사용자의 협조가 필요하다. 해결되지 않은 프로토콜 문제이다.
"""

import logging

logger = logging.getLogger(__name__)


class AggregateVoting:
    """한 투표 라운드의 커밋먼트 스냅샷.

    속성:
        topic: 투표 주제
        keys_commitment: 스냅샷 시점의 키 커밋먼트 (G2)
        balances_commitment: 스냅샷 시점의 잔액 커밋먼트 (G1)
        voter_count: 스냅샷 시점의 등록자 수
        srs_version: 스냅샷 시점의 SRS 버전
    """

    def __init__(self, registry, topic):
        self.topic = topic
        self.keys_commitment = registry.keys_commitment
        self.balances_commitment = registry.balances_commitment
        self.voter_count = registry.next_index - 1
        self.srs_version = registry.setup.srs.version
        logger.info("voting snapshot %r with %d voters", topic, self.voter_count)

    def __repr__(self):
        return f"AggregateVoting(topic={self.topic!r}, voter_count={self.voter_count})"
