"""
server
------

Cloud Run 에 올라가는 정적 파일 서버.
public 디렉토리의 파일을 그대로 서빙하고, /healthz 로 liveness 를 노출한다.
"""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, send_from_directory

from .logging_utils import setup_logging, get_logger


logger = get_logger(__name__)


DEFAULT_PUBLIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "public")
DEFAULT_PORT = 8080
INDEX_DOCUMENT = "index.html"


def create_app(public_dir: Optional[str] = None) -> Flask:
    """
    정적 파일 서버 앱을 만든다.
    컨테이너에서는 gunicorn 이 `cloudrun_kit.server:create_app()` 으로 직접 호출한다.
    """
    root = os.path.abspath(public_dir or os.getenv("PUBLIC_DIR") or DEFAULT_PUBLIC_DIR)
    app = Flask(__name__, static_folder=None)

    @app.get("/healthz")
    def healthz():
        return jsonify(status="ok"), 200

    @app.get("/")
    def index():
        return send_from_directory(root, INDEX_DOCUMENT)

    @app.get("/<path:filename>")
    def static_files(filename: str):
        # 디렉토리 경로면 그 안의 index.html 을 찾는다.
        if os.path.isdir(os.path.join(root, filename)):
            filename = filename.rstrip("/") + "/" + INDEX_DOCUMENT
        return send_from_directory(root, filename)

    logger.debug("정적 파일 루트: %s", root)
    return app


def _port_from_env() -> int:
    raw = os.getenv("APP_PORT") or os.getenv("PORT")
    if not raw:
        return DEFAULT_PORT
    return int(raw)


def main() -> None:
    """로컬 실행용 엔트리포인트 (Flask 개발 서버)."""
    # 운영(Cloud Run)에서는 .env.gcr.yml 로 주입된 환경변수만 사용한다.
    if os.getenv("APP_ENV") != "production":
        load_dotenv()

    setup_logging(0)
    port = _port_from_env()
    app = create_app()
    logger.info("서버 시작: 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
