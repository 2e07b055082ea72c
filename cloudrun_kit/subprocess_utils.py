from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from textwrap import shorten
from typing import Sequence

from .errors import CommandError
from .logging_utils import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class RunResult:
    returncode: int
    stdout: str
    stderr: str

    def lines(self) -> list[str]:
        """stdout 을 공백 줄을 제외한 줄 목록으로 반환한다. (gcloud --format=value(...) 결과 파싱용)"""
        return [line.strip() for line in self.stdout.splitlines() if line.strip()]


def command_exists(name: str) -> bool:
    """
    PATH 에서 실행 파일을 찾을 수 있는지 확인한다.
    (`command -v docker` 와 동일한 용도)
    """
    return shutil.which(name) is not None


def run_command(
    cmd: Sequence[str],
    *,
    cwd: str | None = None,
    timeout: float | None = 900.0,
    stream_output: bool = False,
) -> RunResult:
    """
    subprocess 실행 공통 유틸.

    - stream_output=False: stdout/stderr 캡처, 실패 시 요약을 예외 메시지에 포함
    - stream_output=True : 터미널 stdin/stdout/stderr 를 그대로 물려준다
      (빌드/배포처럼 오래 걸리거나 gcloud 가 y/N 프롬프트를 띄울 수 있는 명령용, 출력은 캡처하지 않음)

    실패는 모두 CommandError 로 래핑되며, 명령의 종료 코드가 보존된다.
    """
    logger.info("명령 실행: %s", " ".join(cmd))

    if stream_output:
        try:
            proc = subprocess.run(  # noqa: S603
                list(cmd),
                cwd=cwd,
                timeout=timeout,
            )
        except FileNotFoundError as e:
            raise CommandError(
                f"필요한 명령을 찾을 수 없습니다: {cmd[0]} (gcloud/docker 가 설치되어 있는지 확인하세요)",
                cmd=cmd,
            ) from e
        except subprocess.TimeoutExpired as e:
            raise CommandError(
                f"명령 실행이 {timeout}초 안에 끝나지 않았습니다: {' '.join(cmd)}",
                cmd=cmd,
            ) from e

        if proc.returncode != 0:
            raise CommandError(
                f"명령 실행 실패: {' '.join(cmd)} (exit={proc.returncode})",
                cmd=cmd,
                returncode=proc.returncode,
            )
        return RunResult(returncode=proc.returncode, stdout="", stderr="")

    # capture 모드 (조용히 돌리고 실패 시 요약)
    try:
        result = subprocess.run(  # noqa: S603
            list(cmd),
            check=True,
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=cwd,
        )
        if result.stdout:
            logger.debug("명령 stdout: %s", shorten(result.stdout.strip(), width=2000))
        if result.stderr:
            logger.debug("명령 stderr: %s", shorten(result.stderr.strip(), width=2000))
        return RunResult(returncode=result.returncode, stdout=result.stdout or "", stderr=result.stderr or "")
    except FileNotFoundError as e:
        raise CommandError(
            f"필요한 명령을 찾을 수 없습니다: {cmd[0]} (gcloud/docker 가 설치되어 있는지 확인하세요)",
            cmd=cmd,
        ) from e
    except subprocess.TimeoutExpired as e:
        raise CommandError(
            f"명령 실행이 {timeout}초 안에 끝나지 않았습니다: {' '.join(cmd)}",
            cmd=cmd,
        ) from e
    except subprocess.CalledProcessError as e:
        stdout = (e.stdout or "").strip()
        stderr = (e.stderr or "").strip()
        detail = ""
        if stderr:
            detail = "\nstderr:\n" + shorten(stderr, width=2000)
        elif stdout:
            detail = "\nstdout:\n" + shorten(stdout, width=2000)
        raise CommandError(
            f"명령 실행 실패: {' '.join(cmd)} (exit={e.returncode}){detail}",
            cmd=cmd,
            returncode=e.returncode,
        ) from e
