"""
cloudrun_kit
------------

Cloud Run 용 정적 파일 서버 템플릿과 배포 자동화 CLI 패키지.
로컬 Docker 테스트(dev-*)와 Cloud Run 으로의 단방향 배포(prod-*)를
하나의 모드 인자로 실행하는 것을 목표로 한다.
"""

__all__ = [
    "config",
    "orchestrator",
    "server",
]
