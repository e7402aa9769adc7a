"""
Elasticsearch 클라이언트 생성
"""

import logging

from elasticsearch import AsyncElasticsearch

logger = logging.getLogger(__name__)


def create_es_client(url: str, timeout: int = 30) -> AsyncElasticsearch:
    """비동기 ES 클라이언트 생성

    Args:
        url: ES 엔드포인트 (예: https://elasticsearch:9200)
        timeout: 요청 타임아웃 (초)
    """
    logger.info(f"Elasticsearch endpoint: {url}")
    return AsyncElasticsearch(hosts=[url], request_timeout=timeout)
