"""
aggvote: 커밋먼트 기반 집계 투표
===================================

  field       스칼라 필드, G1/G2 연산, 해시-투-커브
  transcript  페어링 방정식 정규 직렬화 및 계수 유도
  pairing     페어링 방정식, 배치 검증, BLS 서명 검증
  srs         갱신 가능한 신뢰 설정 (SRS)
  kzg         단일 값 커밋먼트, shift 방정식
  registry    잔액/키 커밋먼트 레지스트리
  voting      투표 라운드 스냅샷
  wallet      시뮬레이션 BLS 지갑 (테스트 전용)
"""
