"""
gcp_project
-----------

gcloud 의 활성 프로젝트 컨텍스트를 설정하는 모듈.
"""

from __future__ import annotations

from . import subprocess_utils
from .config import DeployConfig
from .logging_utils import get_logger


logger = get_logger(__name__)


def set_active_project(cfg: DeployConfig) -> None:
    """
    이후 gcloud 호출이 모두 cfg.project 를 대상으로 하도록
    `gcloud config set project` 를 실행한다.
    """
    logger.info("[prod-init] gcloud 프로젝트를 %s 로 설정합니다...", cfg.project)
    subprocess_utils.run_command(
        ["gcloud", "config", "set", "project", cfg.project],
        stream_output=True,
    )
