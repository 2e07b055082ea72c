"""
pytest 설정:

로컬 작업 환경에 설치된 다른 버전의 cloudrun_kit 패키지가 존재할 때,
`pytest` 실행 시 site-packages 쪽이 먼저 import 되어 테스트가 깨질 수 있다.
테스트는 항상 현재 레포의 소스를 대상으로 해야 하므로, repo root 를 sys.path 최상단에 고정한다.

또한 gcloud/docker 를 실제로 호출하지 않도록 subprocess_utils 를 가짜로 바꾸는 fixture 를 제공한다.
"""

from __future__ import annotations

import os
import sys
from typing import Dict, List, Optional, Set

import pytest


def pytest_configure() -> None:
    repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


DEPLOY_ENV = {
    "GCR_PROJECT": "test-project",
    "GCR_REGION": "us-central1",
    "GCR_REPO": "apps",
    "APP_NAME": "svc",
    "GCR_IMAGE_TAG": "v1",
    "GCR_SERVICE_ACCOUNT_NAME": "deployer",
}


def write_env_file(path: str, values: Dict[str, str]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        for k, v in values.items():
            f.write(f"{k}={v}\n")


@pytest.fixture
def workspace(tmp_path):
    """prod-*/dev-* 가 요구하는 파일이 모두 있는 작업 디렉토리."""
    write_env_file(str(tmp_path / ".env"), {"APP_PORT": "8080"})
    write_env_file(str(tmp_path / ".env.deploy"), DEPLOY_ENV)
    (tmp_path / ".env.gcr.yml").write_text("APP_ENV: production\n", encoding="utf-8")
    return tmp_path


class FakeGcloud:
    """
    gcloud/docker 호출을 기록하고, 서비스 계정/리포지토리 상태를 흉내 낸다.

    sa_visible_after: 서비스 계정 생성 요청 후 email 필터 조회가 몇 번째부터 결과를 돌려주는지.
                      None 이면 끝까지 보이지 않는다.
    """

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.kwargs: List[dict] = []
        self.service_accounts: Set[str] = set()
        self.repositories: Set[str] = set()
        self.sa_visible_after: Optional[int] = 1
        self.fail_on: Optional[str] = None
        self.fail_returncode = 2
        self.missing_tools: Set[str] = set()
        self._pending_sa: Optional[str] = None
        self._email_polls = 0

    # subprocess_utils.command_exists 대체
    def command_exists(self, name: str) -> bool:
        return name not in self.missing_tools

    # subprocess_utils.run_command 대체
    def run_command(self, cmd, **kwargs):
        from cloudrun_kit.errors import CommandError
        from cloudrun_kit.subprocess_utils import RunResult

        cmd = list(cmd)
        self.calls.append(cmd)
        self.kwargs.append(kwargs)
        joined = " ".join(cmd)

        if self.fail_on and self.fail_on in joined:
            raise CommandError(f"명령 실행 실패: {joined}", cmd=cmd, returncode=self.fail_returncode)

        stdout = ""
        if cmd[:4] == ["gcloud", "iam", "service-accounts", "list"]:
            stdout = self._list_service_accounts(cmd)
        elif cmd[:4] == ["gcloud", "iam", "service-accounts", "create"]:
            self._pending_sa = f"{cmd[4]}@test-project.iam.gserviceaccount.com"
        elif cmd[:4] == ["gcloud", "artifacts", "repositories", "list"]:
            stdout = "\n".join(
                f"projects/test-project/locations/us-central1/repositories/{r}"
                for r in sorted(self.repositories)
            )
        elif cmd[:4] == ["gcloud", "artifacts", "repositories", "create"]:
            self.repositories.add(cmd[4])

        return RunResult(returncode=0, stdout=stdout, stderr="")

    def _list_service_accounts(self, cmd: List[str]) -> str:
        if any(a.startswith("--filter=email:") for a in cmd):
            self._email_polls += 1
            if (
                self._pending_sa
                and self.sa_visible_after is not None
                and self._email_polls >= self.sa_visible_after
            ):
                self.service_accounts.add(self._pending_sa)
                self._pending_sa = None
        return "\n".join(sorted(self.service_accounts))

    # 테스트 헬퍼
    def matching(self, *prefix: str) -> List[List[str]]:
        return [c for c in self.calls if c[: len(prefix)] == list(prefix)]

    def creation_calls(self) -> List[List[str]]:
        return [c for c in self.calls if "create" in c]


@pytest.fixture
def fake_gcloud(monkeypatch: pytest.MonkeyPatch) -> FakeGcloud:
    from cloudrun_kit import subprocess_utils

    fake = FakeGcloud()
    monkeypatch.setattr(subprocess_utils, "run_command", fake.run_command)
    monkeypatch.setattr(subprocess_utils, "command_exists", fake.command_exists)
    return fake


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def fake_sleep() -> SleepRecorder:
    return SleepRecorder()
