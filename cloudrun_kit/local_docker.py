"""
local_docker
------------

로컬 테스트용 Docker 이미지 빌드/실행을 담당하는 모듈.
클라우드와는 통신하지 않는다.
"""

from __future__ import annotations

from .config import LOCAL_ENV_FILE
from .logging_utils import get_logger
from . import subprocess_utils


logger = get_logger(__name__)


LOCAL_IMAGE_NAME = "cloudrun-template-local"
SERVICE_PORT = 8080


def build_image(base_dir: str = ".", image_name: str = LOCAL_IMAGE_NAME) -> None:
    logger.info("[dev-launch] 로컬 테스트용 Docker 이미지를 빌드합니다: %s", image_name)
    subprocess_utils.run_command(
        ["docker", "build", "-t", image_name, "."],
        cwd=base_dir,
        timeout=None,
        stream_output=True,
    )


def run_container(base_dir: str = ".", image_name: str = LOCAL_IMAGE_NAME, port: int = SERVICE_PORT) -> None:
    """
    .env 를 컨테이너 환경변수로 주입하고 서비스 포트를 publish 하여 실행한다.
    컨테이너가 종료될 때까지 블록되며, 출력은 터미널로 그대로 흘린다.
    """
    logger.info("[dev-launch] Docker 컨테이너를 실행합니다: http://localhost:%d", port)
    subprocess_utils.run_command(
        [
            "docker",
            "run",
            "--env-file",
            LOCAL_ENV_FILE,
            "-p",
            f"{port}:{port}",
            image_name,
        ],
        cwd=base_dir,
        timeout=None,
        stream_output=True,
    )
