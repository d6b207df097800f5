"""
Ledger Flask Blueprint: 호스팅 원장 HTTP 엔드포인트
======================================================

신뢰 설정, 레지스트리, 투표 스냅샷을 JSON API로 노출한다.

상태를 바꾸는 모든 요청은 하나의 전역 락(LOCK)으로 직렬화되며,
성공한 변경 이후에만 TinyDB에 스냅샷이 기록된다. 실패한 요청은
어떤 상태도 바꾸지 않는다.

generate_update_proof는 비밀 k를 입력으로 받으므로 엔드포인트로
제공하지 않는다. 기여자는 로컬에서 증명을 만든 뒤 /setup/update로 제출한다.

오류 응답:
  MalformedInputError     → 400
  ProofVerificationError  → 422
  StatePreconditionError  → 409
  그 외 AggVoteError       → 500
"""

import logging
import threading

from flask import Blueprint, jsonify, request
from tinydb import Query

from aggvote.errors import (
    AggVoteError,
    MalformedInputError,
    ProofVerificationError,
    StatePreconditionError,
)
from aggvote.registry import CommitmentRegistry
from aggvote.srs import SRS, TrustedSetup
from aggvote.voting import AggregateVoting

from serializers import (
    serialize_g1, serialize_g2,
    deserialize_g2,
    serialize_srs, deserialize_srs,
    deserialize_update_proof,
    serialize_registry, deserialize_registry,
    serialize_voting,
    parse_or_reject,
    g1_short, g2_short,
)

logger = logging.getLogger(__name__)

ledger_bp = Blueprint('ledger', __name__)

DATA = Query()

# app.py에서 주입
DB = None
SETUP = None
REGISTRY = None
VOTINGS = []

# 전역 직렬화 지점
LOCK = threading.Lock()


def init_ledger_bp(db, max_degree, initial_holder, initial_supply):
    """app.py에서 DB를 주입받고 저장된 상태를 복원한다."""
    global DB, SETUP, REGISTRY, VOTINGS
    DB = db

    srs_data = db_get("srs")
    if srs_data is not None:
        SETUP = TrustedSetup(srs=deserialize_srs(srs_data))
        logger.info("restored SRS version %d", SETUP.srs.version)
    else:
        SETUP = TrustedSetup(srs=SRS.initial(max_degree))

    registry_data = db_get("registry")
    if registry_data is not None:
        REGISTRY = deserialize_registry(registry_data, SETUP)
    else:
        REGISTRY = CommitmentRegistry(SETUP, initial_holder, initial_supply)

    VOTINGS = db_get("votings") or []
    persist()


# ─── DB 헬퍼 ───

def db_get(key):
    """DB에서 키로 데이터를 조회한다."""
    result = DB.search(DATA.type == key)
    if not result:
        return None
    return result[0].get("data")


def db_set(key, data):
    """DB에 키로 데이터를 저장한다."""
    DB.upsert({"type": key, "data": data}, DATA.type == key)


def persist():
    """현재 원장 상태 전체를 DB에 기록한다."""
    db_set("srs", serialize_srs(SETUP.srs))
    db_set("registry", serialize_registry(REGISTRY))
    db_set("votings", VOTINGS)


def request_json():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise MalformedInputError("JSON 객체 본문이 필요합니다")
    return data


# ─── 오류 처리 ───

@ledger_bp.app_errorhandler(AggVoteError)
def handle_error(e):
    if isinstance(e, MalformedInputError):
        status = 400
    elif isinstance(e, ProofVerificationError):
        status = 422
    elif isinstance(e, StatePreconditionError):
        status = 409
    else:
        status = 500
    logger.info("%s: %s", type(e).__name__, e)
    return jsonify({'success': False, 'error': type(e).__name__, 'message': str(e)}), status


# ──────────────────────────────────────────────────────────────
# 헬스 체크
# ──────────────────────────────────────────────────────────────

@ledger_bp.route('/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok', 'srs_version': SETUP.srs.version})


# ──────────────────────────────────────────────────────────────
# 신뢰 설정
# ──────────────────────────────────────────────────────────────

@ledger_bp.route('/setup/srs', methods=['GET'])
def get_srs():
    """현재 SRS를 반환한다."""
    return jsonify(serialize_srs(SETUP.srs))


@ledger_bp.route('/setup/update', methods=['POST'])
def update_srs():
    """로컬에서 생성된 갱신 증명을 검증하고 적용한다."""
    update_proof = parse_or_reject(deserialize_update_proof, request_json())
    with LOCK:
        srs = SETUP.update(*update_proof)
        persist()
    logger.info("S1[1] is now %s", g1_short(srs.g1_powers[1]))
    return jsonify({'success': True, 'version': srs.version})


# ──────────────────────────────────────────────────────────────
# 레지스트리
# ──────────────────────────────────────────────────────────────

@ledger_bp.route('/registry/artifacts', methods=['GET'])
def registration_artifacts():
    """다음 등록자가 서명할 두 G2 점."""
    with LOCK:
        artifacts = REGISTRY.registration_artifacts()
        index = REGISTRY.next_index
    return jsonify({
        'index': index,
        'encoding_point': serialize_g2(artifacts[0]),
        'artifact_point': serialize_g2(artifacts[1]),
    })


def _parse_registration(data):
    return (
        str(data['identity']),
        deserialize_g2(data['key']),
        deserialize_g2(data['encoded_key']),
        deserialize_g2(data['encoding_artifact']),
    )


@ledger_bp.route('/registry/register', methods=['POST'])
def register():
    identity, key, encoded_key, encoding_artifact = parse_or_reject(
        _parse_registration, request_json()
    )
    with LOCK:
        index = REGISTRY.register(identity, key, encoded_key, encoding_artifact)
        persist()
    logger.info("keys commitment is now %s", g2_short(REGISTRY.keys_commitment))
    return jsonify({'success': True, 'index': index})


def _parse_transfer(data):
    return str(data['sender']), str(data['recipient']), int(data['amount'])


@ledger_bp.route('/registry/transfer', methods=['POST'])
def transfer():
    sender, recipient, amount = parse_or_reject(_parse_transfer, request_json())
    with LOCK:
        try:
            REGISTRY.transfer(sender, recipient, amount)
        except AggVoteError:
            raise
        except ValueError as e:
            raise MalformedInputError(str(e)) from e
        persist()
    return jsonify({
        'success': True,
        'sender_balance': str(REGISTRY.balance_of(sender)),
        'recipient_balance': str(REGISTRY.balance_of(recipient)),
    })


@ledger_bp.route('/registry/commitments', methods=['GET'])
def commitments():
    with LOCK:
        return jsonify({
            'keys_commitment': serialize_g2(REGISTRY.keys_commitment),
            'balances_commitment': serialize_g1(REGISTRY.balances_commitment),
            'next_index': REGISTRY.next_index,
        })


@ledger_bp.route('/registry/balance/<identity>', methods=['GET'])
def balance(identity):
    return jsonify({
        'identity': identity,
        'balance': str(REGISTRY.balance_of(identity)),
        'index': REGISTRY.index_of_identity(identity),
    })


# ──────────────────────────────────────────────────────────────
# 투표
# ──────────────────────────────────────────────────────────────

@ledger_bp.route('/voting', methods=['POST'])
def create_voting():
    """현재 커밋먼트로 투표 스냅샷을 만든다."""
    topic = parse_or_reject(lambda data: str(data['topic']), request_json())
    with LOCK:
        voting = AggregateVoting(REGISTRY, topic)
        VOTINGS.append(serialize_voting(voting))
        voting_id = len(VOTINGS) - 1
        persist()
    return jsonify({'success': True, 'id': voting_id})


@ledger_bp.route('/voting/<int:voting_id>', methods=['GET'])
def get_voting(voting_id):
    if voting_id >= len(VOTINGS):
        return jsonify({'success': False, 'error': 'NotFound'}), 404
    return jsonify(VOTINGS[voting_id])
