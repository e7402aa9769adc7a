# Posts Elasticsearch Module
"""
Elasticsearch 게시물 색인 모듈

게시물 DB 데이터를 posts_index로 전체 재구축합니다.

주요 컴포넌트:
- es_client: 비동기 Elasticsearch 클라이언트 생성
- es_indices: 인덱스 분석기/매핑 관리 (삭제 후 재생성)
- post_mapper: 게시물 레코드 → 검색 문서 변환
- es_bulk: 페이지 단위 bulk 인덱싱 및 실패 검출
- es_reindexer: 재색인 오케스트레이터
"""

from .es_bulk import BulkIndexer, BulkItemFailure, BulkResult
from .es_indices import ESIndexManager
from .es_reindexer import PostReindexer, ReindexState, ReindexStats
from .post_mapper import map_post

__all__ = [
    "BulkIndexer",
    "BulkItemFailure",
    "BulkResult",
    "ESIndexManager",
    "PostReindexer",
    "ReindexState",
    "ReindexStats",
    "map_post",
]
