"""
gcp_artifact_registry
---------------------

Artifact Registry 리포지토리 존재 여부 확인/생성 및
Cloud Build 를 이용한 이미지 빌드/푸시를 담당하는 모듈.
"""

from __future__ import annotations

from .config import DeployConfig
from .logging_utils import get_logger
from . import subprocess_utils


logger = get_logger(__name__)


REPOSITORY_FORMAT = "docker"

# Cloud Build 는 소스 업로드 + 빌드까지 포함하므로 넉넉하게 잡는다.
BUILD_TIMEOUT_SECONDS = 1800.0


def image_uri(cfg: DeployConfig) -> str:
    """<region>-docker.pkg.dev/<project>/<repo>/<app>:<tag>"""
    return f"{cfg.region}-docker.pkg.dev/{cfg.project}/{cfg.repo}/{cfg.app_name}:{cfg.image_tag}"


def _matches_repo(name: str, repo: str) -> bool:
    # value(name) 은 버전에 따라 "repo" 또는 "projects/.../repositories/repo" 형태로 나온다.
    return name == repo or name.endswith(f"/repositories/{repo}")


def repository_exists(cfg: DeployConfig) -> bool:
    """
    프로젝트/리전의 리포지토리 목록에서 cfg.repo 를 찾는다.
    목록에 없는 것은 정상 흐름이며, 목록 조회 자체가 실패하면 CommandError 가 전파된다.
    """
    result = subprocess_utils.run_command(
        [
            "gcloud",
            "artifacts",
            "repositories",
            "list",
            f"--project={cfg.project}",
            f"--location={cfg.region}",
            "--format=value(name)",
        ]
    )
    return any(_matches_repo(name, cfg.repo) for name in result.lines())


def ensure_repository(cfg: DeployConfig) -> bool:
    """
    Artifact Registry 리포가 존재하는지 확인하고, 없으면 생성한다.

    Returns:
        새로 생성했으면 True, 이미 존재했으면 False
    """
    logger.info(
        "[prod-init] Artifact Registry 리포 확인: %s (%s, %s)",
        cfg.repo,
        cfg.project,
        cfg.region,
    )
    if repository_exists(cfg):
        logger.info("Artifact Registry 리포가 이미 존재합니다: %s", cfg.repo)
        return False

    logger.info("[prod-init] Artifact Registry 리포를 생성합니다...")
    subprocess_utils.run_command(
        [
            "gcloud",
            "artifacts",
            "repositories",
            "create",
            cfg.repo,
            f"--repository-format={REPOSITORY_FORMAT}",
            f"--location={cfg.region}",
            f"--description=Docker repo for {cfg.app_name}",
        ],
        stream_output=True,
    )
    logger.info("Artifact Registry 리포를 생성했습니다: %s", cfg.repo)
    return True


def submit_build(cfg: DeployConfig, *, base_dir: str = ".") -> str:
    """
    base_dir 를 빌드 컨텍스트로 Cloud Build 에 제출하여
    이미지를 빌드하고 Artifact Registry 에 푸시한 뒤, 이미지 URL 을 반환한다.
    """
    image_url = image_uri(cfg)
    logger.info("[prod-launch] Docker 이미지 빌드: %s", image_url)
    subprocess_utils.run_command(
        ["gcloud", "builds", "submit", "--tag", image_url],
        cwd=base_dir,
        timeout=BUILD_TIMEOUT_SECONDS,
        stream_output=True,
    )
    logger.info("이미지 빌드/푸시 완료: %s", image_url)
    return image_url
