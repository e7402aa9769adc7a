"""
외부 연결 종료

자원별 종료 함수를 순서대로 호출합니다.
하나가 실패해도 나머지는 계속 종료합니다.
"""

import logging
from typing import Awaitable, Callable, List, Tuple

from seed.errors import TeardownError

logger = logging.getLogger(__name__)

Release = Tuple[str, Callable[[], Awaitable[None]]]


async def release_all(releases: List[Release]) -> List[TeardownError]:
    """
    등록 순서대로 연결 종료

    Args:
        releases: (자원 이름, 종료 코루틴 함수) 목록

    Returns:
        종료 실패 목록 (로그만 남기고 예외는 올리지 않음)
    """
    errors = []
    for resource, release in releases:
        try:
            await release()
        except Exception as e:
            error = TeardownError(resource, e)
            logger.warning(f"Error while disconnecting {resource}: {e}")
            errors.append(error)
    return errors
