"""
aggvote 호스팅 원장 (Flask)
============================

실행:
    python app.py

설정은 aggvote.config의 환경 변수를 따른다.
테스트에서는 create_app(storage=MemoryStorage)으로 메모리 DB를 사용한다.
"""

import logging

from flask import Flask
from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from aggvote.config import config
from ledger_routes import ledger_bp, init_ledger_bp


def configure_logging(level=None):
    logging.basicConfig(
        level=getattr(logging, (level or config.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(db_path=None, storage=None, max_degree=None,
               initial_holder=None, initial_supply=None):
    """Flask 앱을 만들고 원장 상태를 DB에서 복원한다.

    Args:
        db_path: TinyDB 파일 경로 (기본값: config.db_path)
        storage: MemoryStorage를 주면 파일 대신 메모리에 저장
        max_degree: 저장된 SRS가 없을 때 사용할 최대 차수
        initial_holder, initial_supply: 저장된 레지스트리가 없을 때의 초기 발행
    """
    if storage is MemoryStorage:
        db = TinyDB(storage=MemoryStorage)
    else:
        db = TinyDB(db_path or config.db_path)
    ledger = db.table("ledger")

    init_ledger_bp(
        ledger,
        max_degree if max_degree is not None else config.max_degree,
        initial_holder if initial_holder is not None else config.initial_holder,
        initial_supply if initial_supply is not None else config.initial_supply,
    )

    app = Flask(__name__)
    app.register_blueprint(ledger_bp)
    return app


if __name__ == "__main__":
    configure_logging()
    app = create_app()
    app.run(host=config.host, port=config.port)
