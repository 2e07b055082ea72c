import sys
from typing import Optional

import click

from .errors import DeployError
from .logging_utils import setup_logging, get_logger
from .orchestrator import CLI_NAME, MODES


logger = get_logger(__name__)


USAGE = f"Usage: {CLI_NAME} {{{'|'.join(MODES)}}}"


@click.command()
@click.option(
    "-C",
    "--chdir",
    "chdir",
    type=click.Path(file_okay=False, dir_okay=True, exists=True),
    default=".",
    help="작업 디렉토리 (기본: 현재 디렉토리). .env / .env.deploy / .env.gcr.yml 을 여기서 찾습니다.",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="로그 레벨을 DEBUG로 올립니다.",
)
@click.argument("mode", required=False)
def main(chdir: str, verbose: int, mode: Optional[str]) -> None:
    """
    Cloud Run 템플릿 배포용 CLI

    \b
    MODE:
      dev-check   로컬 개발에 필요한 의존성 확인
      dev-launch  로컬 테스트용 Docker 이미지 빌드 및 실행
      prod-check  원격 배포에 필요한 의존성 확인
      prod-init   서비스 계정/권한/Artifact Registry 리포 초기화
      prod-launch 이미지 빌드/푸시 후 Cloud Run 배포
    """
    workflow = MODES.get(mode or "")
    if workflow is None:
        click.echo(USAGE, err=True)
        sys.exit(1)

    setup_logging(verbose)

    try:
        summary = workflow(chdir)
    except DeployError as e:
        logger.debug("워크플로 중단: %s", mode, exc_info=True)
        click.echo(f"[ERROR] {mode} 실패: {e}", err=True)
        sys.exit(e.exit_code)

    click.echo(summary)
