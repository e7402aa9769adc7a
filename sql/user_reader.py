"""
사용자 DB username 조회
"""

import logging
from typing import List, Optional

import asyncpg

from seed.errors import SourceReadError

logger = logging.getLogger(__name__)

USERNAME_QUERY = "SELECT username FROM profile"


class UsernameSourceReader:
    """profile 테이블 전체 username 조회 (페이징 없음)"""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def fetch_usernames(self) -> List[Optional[str]]:
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(USERNAME_QUERY)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise SourceReadError(
                f"username 조회 실패: {e}",
                query=USERNAME_QUERY
            ) from e

        logger.debug(f"Fetched {len(rows)} profile rows")
        return [row["username"] for row in rows]
