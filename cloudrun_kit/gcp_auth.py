"""
gcp_auth
--------

배포용 서비스 계정 생성/권한 부여와
서비스 계정 키를 이용한 gcloud 인증을 담당하는 모듈.
"""

from __future__ import annotations

import time
from typing import Callable, List

from . import polling, subprocess_utils
from .config import DeployConfig
from .logging_utils import get_logger


logger = get_logger(__name__)


# 서비스 계정 생성은 GCP 쪽에서 비동기로 처리되므로 최대 90초(10초 x 9회)까지 기다린다.
SERVICE_ACCOUNT_POLL_ATTEMPTS = 9
SERVICE_ACCOUNT_POLL_INTERVAL = 10.0

SERVICE_ACCOUNT_DESCRIPTION = "Service account for Cloud Run deployment"
SERVICE_ACCOUNT_DISPLAY_NAME = "Cloud Run deploy"

# add-iam-policy-binding 은 이미 부여된 역할이면 아무것도 바꾸지 않으므로 존재 확인 없이 매번 부여한다.
DEPLOY_ROLES: List[str] = [
    "roles/storage.admin",
    "roles/artifactregistry.writer",
]


def _list_service_account_emails(filter_expr: str) -> List[str]:
    result = subprocess_utils.run_command(
        [
            "gcloud",
            "iam",
            "service-accounts",
            "list",
            f"--filter={filter_expr}",
            "--format=value(email)",
        ]
    )
    return result.lines()


def service_account_exists(cfg: DeployConfig) -> bool:
    """이름으로 조회한 결과에 기대하는 이메일이 있는지 확인한다."""
    return cfg.service_account_email in _list_service_account_emails(f"name:{cfg.service_account_name}")


def _service_account_visible(cfg: DeployConfig) -> bool:
    return cfg.service_account_email in _list_service_account_emails(f"email:{cfg.service_account_email}")


def ensure_service_account(
    cfg: DeployConfig,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """
    배포 서비스 계정이 없으면 생성하고, 조회 가능해질 때까지 기다린다.

    Returns:
        새로 생성했으면 True, 이미 존재했으면 False

    Raises:
        PollTimeoutError: 생성 요청 후 90초 안에 계정이 보이지 않는 경우
    """
    if service_account_exists(cfg):
        logger.info("서비스 계정이 이미 존재합니다: %s", cfg.service_account_email)
        return False

    logger.info("[prod-init] 서비스 계정을 생성합니다: %s", cfg.service_account_name)
    subprocess_utils.run_command(
        [
            "gcloud",
            "iam",
            "service-accounts",
            "create",
            cfg.service_account_name,
            f"--description={SERVICE_ACCOUNT_DESCRIPTION}",
            f"--display-name={SERVICE_ACCOUNT_DISPLAY_NAME}",
        ],
        stream_output=True,
    )
    logger.info("서비스 계정 생성을 요청했습니다. 계정이 조회될 때까지 기다립니다...")

    polling.poll_until(
        lambda: _service_account_visible(cfg),
        attempts=SERVICE_ACCOUNT_POLL_ATTEMPTS,
        interval=SERVICE_ACCOUNT_POLL_INTERVAL,
        sleep=sleep,
        description=f"서비스 계정 {cfg.service_account_email}",
        timeout_message=(
            f"서비스 계정이 {int(SERVICE_ACCOUNT_POLL_ATTEMPTS * SERVICE_ACCOUNT_POLL_INTERVAL)}초 안에 "
            f"생성되지 않았습니다: {cfg.service_account_email}"
        ),
    )
    return True


def grant_roles(cfg: DeployConfig) -> None:
    """배포 서비스 계정에 DEPLOY_ROLES 를 부여한다."""
    logger.info("[prod-init] 서비스 계정에 권한을 부여합니다...")
    member = f"serviceAccount:{cfg.service_account_email}"
    for role in DEPLOY_ROLES:
        subprocess_utils.run_command(
            [
                "gcloud",
                "projects",
                "add-iam-policy-binding",
                cfg.project,
                f"--member={member}",
                f"--role={role}",
            ],
            stream_output=True,
        )


def activate_service_account(cfg: DeployConfig, *, base_dir: str = ".") -> bool:
    """
    GCR_SERVICE_ACCOUNT_KEY 가 설정된 경우에만 해당 키 파일로 gcloud 를 인증한다.
    설정되지 않았다면 현재 활성화된 자격 증명을 그대로 사용한다.
    """
    if not cfg.service_account_key:
        logger.debug("GCR_SERVICE_ACCOUNT_KEY 가 없어 서비스 계정 인증을 건너뜁니다.")
        return False

    logger.info("[prod-launch] 서비스 계정 키로 gcloud 인증을 진행합니다...")
    subprocess_utils.run_command(
        [
            "gcloud",
            "auth",
            "activate-service-account",
            "--key-file",
            cfg.service_account_key,
        ],
        cwd=base_dir,
        stream_output=True,
    )
    return True
