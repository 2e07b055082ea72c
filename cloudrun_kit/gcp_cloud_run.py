"""
gcp_cloud_run
-------------

Cloud Run 서비스 배포 책임을 가지는 모듈.
"""

from __future__ import annotations

import os
from typing import List

from .config import RUNTIME_ENV_VARS_FILE, DeployConfig, env_file_path
from .logging_utils import get_logger
from . import subprocess_utils


logger = get_logger(__name__)


# 저트래픽 단일 목적 서비스용 고정 리소스 구성.
# concurrency=1 이면 인스턴스당 요청 하나만 처리하므로 로컬 실행과 동작이 같다.
SERVICE_CPU = "0.25"
SERVICE_MEMORY = "128Mi"
SERVICE_CONCURRENCY = "1"
SERVICE_EXECUTION_ENVIRONMENT = "gen1"


def build_deploy_command(cfg: DeployConfig, image_url: str, env_vars_file: str) -> List[str]:
    return [
        "gcloud",
        "run",
        "deploy",
        cfg.app_name,
        "--image",
        image_url,
        "--region",
        cfg.region,
        "--platform",
        "managed",
        "--cpu",
        SERVICE_CPU,
        "--memory",
        SERVICE_MEMORY,
        "--concurrency",
        SERVICE_CONCURRENCY,
        "--execution-environment",
        SERVICE_EXECUTION_ENVIRONMENT,
        "--env-vars-file",
        env_vars_file,
    ]


def deploy_service(cfg: DeployConfig, image_url: str, *, base_dir: str = ".") -> None:
    """
    이미지를 Cloud Run 서비스(cfg.app_name)의 새 리비전으로 배포한다.
    런타임 환경변수는 .env.gcr.yml 을 그대로 전달한다.
    """
    env_vars_file = os.path.abspath(env_file_path(base_dir, RUNTIME_ENV_VARS_FILE))
    logger.info("[prod-launch] Cloud Run 배포: service=%s image=%s", cfg.app_name, image_url)
    subprocess_utils.run_command(
        build_deploy_command(cfg, image_url, env_vars_file),
        cwd=base_dir,
        timeout=None,
        stream_output=True,
    )
    logger.info("Cloud Run 배포 완료: %s", cfg.app_name)
