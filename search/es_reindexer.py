"""
PostgreSQL → Elasticsearch 게시물 재색인

인덱스를 삭제/재생성한 뒤 게시물을 500건씩 읽어 변환하고
bulk로 인덱싱합니다. 페이지 조회와 쓰기는 순차로만 진행합니다.

상태 전이:
    INIT → SCHEMA_READY → PAGING → DONE
    (어느 단계든 실패하면 FAILED, 재시도 없음)
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict

from search.es_bulk import BulkIndexer
from search.es_indices import ESIndexManager
from search.post_mapper import map_post
from seed.config import BATCH_SIZE
from sql.models import PostRecord
from sql.post_reader import PostSourceReader

logger = logging.getLogger(__name__)


class ReindexState(Enum):
    INIT = "init"
    SCHEMA_READY = "schema_ready"
    PAGING = "paging"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ReindexStats:
    """재색인 통계"""
    index: str
    total_indexed: int
    pages: int
    state: ReindexState
    elapsed_seconds: float

    def __str__(self) -> str:
        return (
            f"{self.index}: {self.total_indexed:,} posts "
            f"in {self.pages} pages ({self.state.value}) "
            f"in {self.elapsed_seconds:.1f}s"
        )


class PostReindexer:
    """
    게시물 재색인 오케스트레이터

    사용 예:
        reindexer = PostReindexer(reader, index_manager, indexer, "posts_index")
        stats = await reindexer.run()
    """

    def __init__(
        self,
        reader: PostSourceReader,
        index_manager: ESIndexManager,
        indexer: BulkIndexer,
        index_name: str,
        mapper: Callable[[PostRecord], Dict[str, Any]] = map_post,
        batch_size: int = BATCH_SIZE,
    ):
        self.reader = reader
        self.index_manager = index_manager
        self.indexer = indexer
        self.index_name = index_name
        self.mapper = mapper
        self.batch_size = batch_size

        self.state = ReindexState.INIT
        self.offset = 0
        self.total_indexed = 0
        self.pages = 0

    async def run(self) -> ReindexStats:
        """
        전체 재색인 실행

        Returns:
            재색인 통계 (state=DONE)

        Raises:
            SchemaProvisionError, SourceReadError, BulkIndexError
        """
        start_time = datetime.now()
        self.state = ReindexState.INIT
        self.total_indexed = 0
        self.pages = 0
        logger.info(f"Reindexing posts into Elasticsearch ({self.index_name})...")

        try:
            # 1) 인덱스 삭제 후 재생성
            await self.index_manager.ensure_clean_index(self.index_name)
            self.state = ReindexState.SCHEMA_READY

            # 2) 페이지 단위 조회 → 변환 → bulk
            self.state = ReindexState.PAGING
            self.offset = 0

            while True:
                posts = await self.reader.fetch_page(self.offset, self.batch_size)
                if not posts:
                    break

                documents = [self.mapper(post) for post in posts]
                await self.indexer.index_batch(documents)

                self.total_indexed += len(documents)
                self.pages += 1
                logger.info(
                    f"[{self.index_name}] Indexed {len(documents)} posts "
                    f"(total = {self.total_indexed:,})"
                )

                self.offset += self.batch_size

            self.state = ReindexState.DONE

        except Exception as e:
            self.state = ReindexState.FAILED
            logger.error(
                f"[{self.index_name}] Reindex failed at offset {self.offset} "
                f"({self.total_indexed:,} indexed): {e}"
            )
            raise

        stats = ReindexStats(
            index=self.index_name,
            total_indexed=self.total_indexed,
            pages=self.pages,
            state=self.state,
            elapsed_seconds=(datetime.now() - start_time).total_seconds(),
        )
        logger.info(f"Reindex completed: {stats}")
        return stats
