"""
전체 시드 작업 진입점

1) 사용자 DB username → Redis 집합
2) 게시물 DB → Elasticsearch posts_index 재색인

실패는 로그로만 보고하고, 종료 코드는 항상 0입니다.
"""

import asyncio
import logging
from typing import List, Optional

from cache.redis_client import create_redis_client
from cache.username_seeder import UsernameSeeder
from search.es_bulk import BulkIndexer
from search.es_client import create_es_client
from search.es_indices import ESIndexManager
from search.es_reindexer import PostReindexer, ReindexStats
from seed.config import SeedConfig
from seed.errors import ConfigError, SeedError
from seed.teardown import Release, release_all
from sql.db_connector import create_pool
from sql.post_reader import PostSourceReader
from sql.user_reader import UsernameSourceReader

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def log_seed_error(e: Exception) -> None:
    """상위 핸들러 공통 에러 로그 (SeedError는 단계 표시)"""
    if isinstance(e, SeedError) and e.phase:
        logger.exception(f"GLOBAL SEED ERROR [{e.phase}]: {e}")
    else:
        logger.exception(f"GLOBAL SEED ERROR: {e}")


async def run_phases(seeder: UsernameSeeder, reindexer: PostReindexer) -> Optional[ReindexStats]:
    """
    두 단계를 순서대로 실행

    예외는 여기서 로그로 남기고 삼킵니다 (종료 처리는 호출 측).

    Returns:
        재색인 통계 (실패 시 None)
    """
    try:
        logger.info("[1/2] Seeding usernames into Redis...")
        await seeder.seed_usernames()
        logger.info("Done seeding usernames.")

        logger.info("[2/2] Reindexing posts into Elasticsearch...")
        stats = await reindexer.run()
        logger.info("Done reindexing posts.")

        logger.info("GLOBAL SEED COMPLETED")
        return stats

    except Exception as e:
        log_seed_error(e)
        return None


async def log_index_status(index_manager: ESIndexManager, index_name: str) -> None:
    """재색인 후 인덱스 문서 수 로그"""
    try:
        status = await index_manager.get_index_status(index_name)
    except Exception as e:
        logger.warning(f"  {index_name}: Error - {e}")
        return

    if status["exists"]:
        logger.info(f"  {index_name}: {status['docs_count']:,} docs")
    else:
        logger.info(f"  {index_name}: NOT EXISTS")


async def main(config: Optional[SeedConfig] = None) -> None:
    """클라이언트 생성 → 두 단계 실행 → 연결 종료"""
    releases: List[Release] = []

    logger.info("=" * 60)
    logger.info("GLOBAL SEED START")
    logger.info("=" * 60)

    try:
        config = config or SeedConfig.from_env()

        users_pool = await create_pool(config.users_dsn, "users")
        releases.append(("users database", users_pool.close))

        posts_pool = await create_pool(config.posts_dsn, "posts")
        releases.append(("posts database", posts_pool.close))

        redis_client = create_redis_client(config.redis_url)
        releases.append(("Redis", redis_client.aclose))

        es = create_es_client(config.elasticsearch_url, config.es_timeout)
        releases.append(("Elasticsearch", es.close))

        index_manager = ESIndexManager(es)
        seeder = UsernameSeeder(
            redis_client,
            UsernameSourceReader(users_pool),
            key=config.usernames_key,
        )
        reindexer = PostReindexer(
            reader=PostSourceReader(posts_pool),
            index_manager=index_manager,
            indexer=BulkIndexer(es, config.posts_index),
            index_name=config.posts_index,
        )

        stats = await run_phases(seeder, reindexer)
        if stats is not None:
            await log_index_status(index_manager, config.posts_index)

    except Exception as e:
        log_seed_error(e)

    finally:
        logger.info("Closing connections...")
        errors = await release_all(releases)
        if errors:
            logger.warning(f"{len(errors)}/{len(releases)} connections failed to close")
        logger.info("Seed job finished.")


def run() -> None:
    """콘솔 스크립트 진입점

    설정 오류도 로그만 남기고 정상 종료합니다 (종료 코드 0).
    """
    try:
        config = SeedConfig.from_env()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        log_seed_error(e)
        return

    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)
    asyncio.run(main(config))


if __name__ == "__main__":
    run()
