"""
errors
------

배포 워크플로 전반에서 사용하는 예외 계층.
모든 예외는 cli 의 최상위 핸들러 한 곳에서 종료 코드로 변환된다.
"""

from __future__ import annotations

from typing import Optional, Sequence


class DeployError(RuntimeError):
    """워크플로를 중단시키는 모든 오류의 기반 클래스."""

    exit_code: int = 1


class PreconditionError(DeployError):
    """필수 도구/파일이 없는 경우."""


class ConfigError(DeployError, ValueError):
    """.env.deploy 에 필수 값이 없는 경우."""


class PollTimeoutError(DeployError):
    """비동기로 생성되는 리소스가 제한 시간 안에 나타나지 않은 경우."""


class CommandError(DeployError):
    """
    외부 명령(gcloud/docker) 실행 실패.

    명령이 실제로 실행되어 실패했다면 그 종료 코드를 그대로 전파한다.
    """

    def __init__(
        self,
        message: str,
        *,
        cmd: Sequence[str] = (),
        returncode: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.cmd = list(cmd)
        self.returncode = returncode

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        if not self.returncode:
            return 1
        # 시그널로 종료된 경우(-15 등)는 셸 관례대로 128 + 시그널 번호
        if self.returncode < 0:
            return 128 + abs(self.returncode)
        return self.returncode
