import logging
import sys
from typing import Optional, TextIO


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(verbosity: int = 0, stream: Optional[TextIO] = None) -> None:
    """
    CLI/서버 엔트리포인트에서 한 번 호출한다.
    -v 가 하나 이상이면 DEBUG (캡처한 명령 stdout/stderr 까지 출력).
    """
    level = logging.INFO
    if verbosity >= 1:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=stream or sys.stdout,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
