from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

from dotenv import dotenv_values

from .errors import ConfigError


# 작업 디렉토리 기준 파일 이름
LOCAL_ENV_FILE = ".env"
DEPLOY_ENV_FILE = ".env.deploy"
RUNTIME_ENV_VARS_FILE = ".env.gcr.yml"

REQUIRED_DEPLOY_KEYS = [
    "GCR_PROJECT",
    "GCR_SERVICE_ACCOUNT_NAME",
    "GCR_REGION",
    "GCR_REPO",
    "APP_NAME",
    "GCR_IMAGE_TAG",
]


def env_file_path(base_dir: str, name: str) -> str:
    return os.path.join(base_dir, name)


@dataclass(frozen=True)
class DeployConfig:
    """
    .env.deploy 에서 한 번 읽어 만든 불변 설정.
    워크플로 도중 os.environ 을 다시 읽지 않는다.
    """

    project: str
    region: str
    repo: str
    app_name: str
    image_tag: str
    service_account_name: str

    # 이미 gcloud 자격 증명이 활성화된 환경이면 비워둔다.
    service_account_key: Optional[str] = None

    @property
    def service_account_email(self) -> str:
        return f"{self.service_account_name}@{self.project}.iam.gserviceaccount.com"

    @classmethod
    def from_mapping(cls, values: Mapping[str, Optional[str]]) -> "DeployConfig":
        # 필수값
        missing: List[str] = []

        def req(name: str) -> str:
            val = (values.get(name) or "").strip()
            if not val:
                missing.append(name)
            return val

        cfg = cls(
            project=req("GCR_PROJECT"),
            service_account_name=req("GCR_SERVICE_ACCOUNT_NAME"),
            region=req("GCR_REGION"),
            repo=req("GCR_REPO"),
            app_name=req("APP_NAME"),
            image_tag=req("GCR_IMAGE_TAG"),
            service_account_key=(values.get("GCR_SERVICE_ACCOUNT_KEY") or "").strip() or None,
        )

        if missing:
            raise ConfigError(
                f"{DEPLOY_ENV_FILE} 에 필수 값이 누락되었습니다: " + ", ".join(sorted(set(missing)))
            )

        return cfg


def load_deploy_config(base_dir: str = ".") -> DeployConfig:
    """
    base_dir/.env.deploy 를 파싱하여 DeployConfig 를 만든다.
    파일 존재 여부는 preflight 에서 먼저 확인한다는 전제이다.
    """
    path = env_file_path(base_dir, DEPLOY_ENV_FILE)
    return DeployConfig.from_mapping(dotenv_values(dotenv_path=path))
