"""
polling
-------

비동기로 생성되는 GCP 리소스를 기다리기 위한 고정 간격 재시도 유틸.
sleep 함수를 주입받아 테스트에서 실제로 기다리지 않도록 한다.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from .errors import PollTimeoutError
from .logging_utils import get_logger


logger = get_logger(__name__)


def poll_until(
    check: Callable[[], bool],
    *,
    attempts: int,
    interval: float,
    sleep: Callable[[float], None] = time.sleep,
    description: str = "리소스",
    timeout_message: Optional[str] = None,
) -> int:
    """
    interval 만큼 기다린 뒤 check() 를 호출하는 것을 최대 attempts 번 반복한다.
    (백오프 없음, 매 시도 전에 먼저 sleep)

    Returns:
        check() 가 처음 True 를 반환한 시도 번호 (1부터 시작)

    Raises:
        PollTimeoutError: attempts 번 모두 False 인 경우
    """
    if attempts < 1:
        raise ValueError(f"attempts 는 1 이상이어야 합니다: {attempts!r}")

    for attempt in range(1, attempts + 1):
        sleep(interval)
        if check():
            logger.info("%s 을(를) 사용할 수 있습니다.", description)
            return attempt
        logger.info(
            "%s 생성을 기다리는 중... (%ds 경과)",
            description,
            int(attempt * interval),
        )

    raise PollTimeoutError(
        timeout_message
        or f"{description} 이(가) {int(attempts * interval)}초 안에 생성되지 않았습니다."
    )
