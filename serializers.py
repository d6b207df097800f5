"""
직렬화/역직렬화 헬퍼
======================

JSON과 TinyDB에 저장 가능한 형태로 aggvote 객체를 변환한다.
G1, G2, SRS, UpdateProof, CommitmentRegistry, AggregateVoting.

모든 정수는 10진수 문자열로 표현한다 (JSON 정수 정밀도 문제 회피).
  G1: [x, y]
  G2: [[x.real, x.imag], [y.real, y.imag]]
  무한원점: null
"""

from py_ecc import bn128
from py_ecc.fields import bn128_FQ as FQ

from aggvote.errors import MalformedInputError
from aggvote.registry import CommitmentRegistry
from aggvote.srs import SRS, UpdateProof


# ─── G1 point ───

def serialize_g1(point):
    """G1 point → [str, str] or None"""
    if point is None:
        return None
    return [str(int(point[0])), str(int(point[1]))]


def deserialize_g1(data):
    """[str, str] or None → G1 point"""
    if data is None:
        return None
    return (FQ(int(data[0])), FQ(int(data[1])))


# ─── G2 point ───

def serialize_g2(point):
    """G2 point → [[str,str],[str,str]] or None"""
    if point is None:
        return None
    return [
        [str(int(point[0].coeffs[0])), str(int(point[0].coeffs[1]))],
        [str(int(point[1].coeffs[0])), str(int(point[1].coeffs[1]))]
    ]


def deserialize_g2(data):
    """[[str,str],[str,str]] or None → G2 point"""
    if data is None:
        return None
    return (
        bn128.FQ2([int(data[0][0]), int(data[0][1])]),
        bn128.FQ2([int(data[1][0]), int(data[1][1])])
    )


# ─── SRS ───

def serialize_srs(srs):
    """SRS → dict"""
    return {
        "g1_powers": [serialize_g1(p) for p in srs.g1_powers],
        "g2_powers": [serialize_g2(p) for p in srs.g2_powers],
        "max_degree": srs.max_degree,
        "version": srs.version,
    }


def deserialize_srs(data):
    """dict → SRS"""
    g1_powers = [deserialize_g1(p) for p in data["g1_powers"]]
    g2_powers = [deserialize_g2(p) for p in data["g2_powers"]]
    return SRS(g1_powers, g2_powers, data["max_degree"], data.get("version", 0))


# ─── UpdateProof ───

def serialize_update_proof(update_proof):
    """UpdateProof → dict"""
    return {
        "g1_powers": [serialize_g1(p) for p in update_proof.g1_powers],
        "g2_powers": [serialize_g2(p) for p in update_proof.g2_powers],
        "proof": serialize_g1(update_proof.proof),
    }


def deserialize_update_proof(data):
    """dict → UpdateProof"""
    return UpdateProof(
        [deserialize_g1(p) for p in data["g1_powers"]],
        [deserialize_g2(p) for p in data["g2_powers"]],
        deserialize_g1(data["proof"]),
    )


# ─── CommitmentRegistry ───

def serialize_registry(registry):
    """CommitmentRegistry → dict"""
    return {
        "balances": {k: str(v) for k, v in registry.balances.items()},
        "index_of": dict(registry.index_of),
        "keys": {k: serialize_g2(v) for k, v in registry.keys.items()},
        "next_index": registry.next_index,
        "keys_commitment": serialize_g2(registry.keys_commitment),
        "balances_commitment": serialize_g1(registry.balances_commitment),
        "total_supply": str(registry.total_supply),
    }


def deserialize_registry(data, setup):
    """dict → CommitmentRegistry (setup에 연결)"""
    registry = CommitmentRegistry(setup)
    registry.balances = {k: int(v) for k, v in data["balances"].items()}
    registry.index_of = {k: int(v) for k, v in data["index_of"].items()}
    registry.keys = {k: deserialize_g2(v) for k, v in data["keys"].items()}
    registry.next_index = data["next_index"]
    registry.keys_commitment = deserialize_g2(data["keys_commitment"])
    registry.balances_commitment = deserialize_g1(data["balances_commitment"])
    registry.total_supply = int(data["total_supply"])
    return registry


# ─── AggregateVoting ───

def serialize_voting(voting):
    """AggregateVoting → dict"""
    return {
        "topic": voting.topic,
        "keys_commitment": serialize_g2(voting.keys_commitment),
        "balances_commitment": serialize_g1(voting.balances_commitment),
        "voter_count": voting.voter_count,
        "srs_version": voting.srs_version,
    }


# ─── 요청 파싱 ───

def parse_or_reject(fn, data):
    """fn(data)를 호출하고 형식 오류를 MalformedInputError로 바꾼다."""
    try:
        return fn(data)
    except MalformedInputError:
        raise
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise MalformedInputError(f"요청 형식이 잘못되었습니다: {e!r}") from e


# ─── 표시 헬퍼 ───

def _shorten(s):
    if len(s) <= 8:
        return s
    return s[:4] + "..." + s[-4:]


def g1_short(point):
    """G1 point → 축약 문자열 (로그 표시용)"""
    if point is None:
        return "∞"
    return f"({_shorten(str(int(point[0])))}, {_shorten(str(int(point[1])))})"


def g2_short(point):
    """G2 point → 축약 문자열 (로그 표시용)"""
    if point is None:
        return "∞"
    x0 = str(int(point[0].coeffs[0]))
    x1 = str(int(point[0].coeffs[1]))
    return f"({_shorten(x0)}+{_shorten(x1)}i, ...)"
