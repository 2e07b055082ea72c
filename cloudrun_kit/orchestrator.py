from __future__ import annotations

import time
from typing import Callable, Dict, List

from .config import load_deploy_config
from .logging_utils import get_logger
from . import (
    preflight,
    local_docker,
    gcp_project,
    gcp_auth,
    gcp_artifact_registry,
    gcp_cloud_run,
)


logger = get_logger(__name__)


CLI_NAME = "cloudrun-kit"


def dev_check(base_dir: str = ".") -> str:
    preflight.check_local(base_dir)
    return "로컬 의존성이 모두 준비되어 있습니다."


def dev_launch(base_dir: str = ".") -> str:
    """로컬 이미지를 빌드하고 .env 를 주입해 컨테이너를 실행한다."""
    preflight.check_local(base_dir)
    local_docker.build_image(base_dir)
    local_docker.run_container(base_dir)
    return "로컬 컨테이너가 종료되었습니다."


def prod_check(base_dir: str = ".") -> str:
    preflight.check_production(base_dir)
    return "원격 배포 의존성이 모두 준비되어 있습니다."


def prod_init(base_dir: str = ".", *, sleep: Callable[[float], None] = time.sleep) -> str:
    """
    배포에 필요한 GCP 리소스(서비스 계정, 권한, Artifact Registry 리포)를 준비한다.
    이미 존재하는 리소스는 건드리지 않으므로 여러 번 실행해도 안전하다.

    어느 단계든 실패하면 예외가 그대로 전파되어 이후 단계는 실행되지 않는다.
    """
    preflight.check_production(base_dir)
    cfg = load_deploy_config(base_dir)
    logger.debug("Config loaded: %s", cfg)

    gcp_project.set_active_project(cfg)

    logger.info("[prod-init] GCP 리소스를 초기화합니다...")
    sa_created = gcp_auth.ensure_service_account(cfg, sleep=sleep)
    gcp_auth.grant_roles(cfg)
    repo_created = gcp_artifact_registry.ensure_repository(cfg)
    logger.info("[prod-init] 초기화 완료.")

    lines: List[str] = []
    lines.append("# Init summary")
    lines.append(f"- project: {cfg.project}")
    lines.append(f"- region: {cfg.region}")
    lines.append(
        f"- service account: {cfg.service_account_email} "
        + ("(생성됨)" if sa_created else "(이미 존재함)")
    )
    lines.append(f"- roles: {', '.join(gcp_auth.DEPLOY_ROLES)}")
    lines.append(
        f"- repository: {cfg.repo} " + ("(생성됨)" if repo_created else "(이미 존재함)")
    )
    lines.append("")
    lines.append("애플리케이션을 배포하려면 다음을 실행하세요:")
    lines.append(f"    {CLI_NAME} prod-launch")
    return "\n".join(lines)


def prod_launch(base_dir: str = ".") -> str:
    """
    이미지를 Cloud Build 로 빌드/푸시하고 Cloud Run 에 배포한다.
    prod-init 이 먼저 실행되었다고 가정하며, 다시 확인하지 않는다.
    """
    preflight.check_production(base_dir)
    cfg = load_deploy_config(base_dir)
    logger.debug("Config loaded: %s", cfg)

    gcp_auth.activate_service_account(cfg, base_dir=base_dir)
    image_url = gcp_artifact_registry.submit_build(cfg, base_dir=base_dir)
    gcp_cloud_run.deploy_service(cfg, image_url, base_dir=base_dir)

    lines: List[str] = []
    lines.append("# Deploy summary")
    lines.append(f"- project: {cfg.project}")
    lines.append(f"- service: {cfg.app_name} ({cfg.region})")
    lines.append(f"- image: {image_url}")
    lines.append("")
    lines.append("배포가 완료되었습니다.")
    return "\n".join(lines)


# CLI 모드 이름 -> 워크플로
MODES: Dict[str, Callable[[str], str]] = {
    "dev-check": dev_check,
    "dev-launch": dev_launch,
    "prod-check": prod_check,
    "prod-init": prod_init,
    "prod-launch": prod_launch,
}
