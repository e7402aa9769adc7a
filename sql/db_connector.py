"""
데이터베이스 연결 모듈
- PostgreSQL 커넥션 풀 생성 (게시물 DB, 사용자 DB)
- DSN은 SeedConfig에서 전달
"""

import logging

import asyncpg

from seed.errors import SourceReadError

logger = logging.getLogger(__name__)


async def create_pool(dsn: str, name: str) -> asyncpg.Pool:
    """DB 커넥션 풀 생성

    시드 작업은 순차 실행이므로 커넥션은 많이 필요하지 않습니다.
    """
    try:
        pool = await asyncpg.create_pool(dsn, min_size=1, max_size=2)
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
        raise SourceReadError(
            f"{name} DB 연결 실패: {e}",
            details={"database": name}
        ) from e

    logger.info(f"Connected to {name} database")
    return pool
