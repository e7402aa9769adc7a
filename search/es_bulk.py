"""
Elasticsearch Bulk 인덱서

페이지 단위로 async_bulk 요청 1회를 보내고, 결과를 BulkResult로 해석합니다.
문서 하나라도 실패하면 BulkIndexError로 전체 작업을 중단합니다.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from elasticsearch import ApiError, AsyncElasticsearch, TransportError
from elasticsearch.helpers import async_bulk

from seed.errors import BulkIndexError

logger = logging.getLogger(__name__)

# 실패 로그 샘플 수
ERROR_SAMPLE_SIZE = 3


@dataclass
class BulkItemFailure:
    """문서 단위 실패"""
    doc_id: Optional[str]
    status: Optional[int]
    error_type: str = ""
    reason: str = ""

    def __str__(self) -> str:
        return f"[{self.doc_id}] {self.status} {self.error_type}: {self.reason}"

    @classmethod
    def from_error_item(cls, item: Dict[str, Any]) -> "BulkItemFailure":
        """async_bulk errors 항목 ({op_type: {...}}) 해석"""
        info = next(iter(item.values()), {}) if item else {}
        error = info.get("error")
        if isinstance(error, dict):
            error_type = error.get("type", "")
            reason = error.get("reason", "")
        else:
            error_type, reason = "", str(error or "")
        return cls(
            doc_id=info.get("_id"),
            status=info.get("status"),
            error_type=error_type,
            reason=reason,
        )


@dataclass
class BulkResult:
    """Bulk 요청 결과"""
    success: bool
    items_indexed: int = 0
    failures: List[BulkItemFailure] = field(default_factory=list)

    @classmethod
    def from_helper(cls, indexed: int, errors: List[Dict[str, Any]]) -> "BulkResult":
        """async_bulk 반환값 (성공 건수, 에러 목록) 해석"""
        failures = [BulkItemFailure.from_error_item(item) for item in errors or []]
        return cls(success=not failures, items_indexed=indexed, failures=failures)


class BulkIndexer:
    """
    Bulk 인덱서

    사용 예:
        indexer = BulkIndexer(es, "posts_index")
        result = await indexer.index_batch(documents)
    """

    def __init__(self, client: AsyncElasticsearch, index_name: str):
        self.client = client
        self.index_name = index_name

    def build_actions(self, documents: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """문서마다 index 액션 (_id = 문서 id)"""
        return [
            {
                "_index": self.index_name,
                "_id": doc["id"],
                "_source": doc,
            }
            for doc in documents
        ]

    async def index_batch(self, documents: List[Dict[str, Any]]) -> BulkResult:
        """
        문서 배치 인덱싱

        chunk_size를 배치 크기로 맞춰 요청은 1회만 보내고,
        refresh=True로 요청하므로 반환 시점에 검색 가능합니다.

        Args:
            documents: 검색 문서 목록 (각 문서의 id가 _id)

        Returns:
            BulkResult (성공한 경우만 반환)
        """
        if not documents:
            return BulkResult(success=True)

        try:
            indexed, errors = await async_bulk(
                self.client,
                self.build_actions(documents),
                chunk_size=len(documents),
                refresh=True,
                raise_on_error=False,
                raise_on_exception=False,
            )
        except (ApiError, TransportError) as e:
            raise BulkIndexError(
                f"Bulk 요청 실패: {e}",
                details={"index": self.index_name, "batch_size": len(documents)}
            ) from e

        result = BulkResult.from_helper(indexed, errors)

        if not result.success:
            logger.error(f"Bulk index errors in {self.index_name}, samples:")
            for failure in result.failures[:ERROR_SAMPLE_SIZE]:
                logger.error(f"  {failure}")
            raise BulkIndexError(
                f"Bulk 인덱싱 실패 ({len(result.failures)}건), 재색인 중단",
                failures=result.failures,
                details={"index": self.index_name, "batch_size": len(documents)}
            )

        return result
