"""
preflight
---------

배포 전에 필요한 도구와 설정 파일이 있는지 확인하는 모듈.
외부 상태를 바꾸지 않으며, 첫 번째 실패에서 PreconditionError 로 중단한다.
"""

from __future__ import annotations

import os
from typing import List, Tuple

from . import subprocess_utils
from .config import DEPLOY_ENV_FILE, LOCAL_ENV_FILE, RUNTIME_ENV_VARS_FILE, env_file_path
from .errors import PreconditionError
from .logging_utils import get_logger


logger = get_logger(__name__)


# (실행 파일, 표시 이름)
LOCAL_TOOLS: List[Tuple[str, str]] = [
    ("docker", "Docker"),
    ("pip", "pip"),
]

PRODUCTION_TOOLS: List[Tuple[str, str]] = [
    ("gcloud", "gcloud CLI"),
    ("docker", "Docker"),
]

# (파일 이름, 누락 시 안내)
LOCAL_FILES: List[Tuple[str, str]] = [
    (LOCAL_ENV_FILE, ".env.example 을 복사한 뒤 값을 채워 주세요."),
]

PRODUCTION_FILES: List[Tuple[str, str]] = [
    (DEPLOY_ENV_FILE, ".env.deploy.example 을 복사한 뒤 값을 채워 주세요."),
    (RUNTIME_ENV_VARS_FILE, "운영 환경 변수를 채워 주세요. (.env.gcr.yml.example 참고)"),
]


def _require_tools(tools: List[Tuple[str, str]]) -> None:
    for executable, label in tools:
        if not subprocess_utils.command_exists(executable):
            raise PreconditionError(f"{label} 가 설치되어 있지 않습니다. ({executable} 를 PATH 에서 찾을 수 없음)")
        logger.debug("도구 확인: %s", executable)


def _require_files(base_dir: str, files: List[Tuple[str, str]]) -> None:
    for name, hint in files:
        if not os.path.isfile(env_file_path(base_dir, name)):
            raise PreconditionError(f"{name} 파일이 없습니다. {hint}")
        logger.debug("파일 확인: %s", name)


def check_local(base_dir: str = ".") -> None:
    """로컬 Docker 테스트에 필요한 도구/파일을 확인한다."""
    logger.info("[dev-check] 로컬 배포에 필요한 의존성을 확인합니다...")
    _require_tools(LOCAL_TOOLS)
    _require_files(base_dir, LOCAL_FILES)
    logger.info("로컬 의존성이 모두 준비되어 있습니다.")


def check_production(base_dir: str = ".") -> None:
    """Cloud Run 배포에 필요한 도구/파일을 확인한다."""
    logger.info("[prod-check] 원격 배포에 필요한 의존성을 확인합니다...")
    _require_tools(PRODUCTION_TOOLS)
    _require_files(base_dir, PRODUCTION_FILES)
    logger.info("원격 배포 의존성이 모두 준비되어 있습니다.")
