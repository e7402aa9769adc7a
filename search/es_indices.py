"""
Elasticsearch 인덱스 관리

게시물 인덱스 삭제/재생성, 상태 확인을 담당합니다.
분석기(settings)와 매핑은 config/elasticsearch 아래 JSON 파일에서 로드합니다.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from elasticsearch import ApiError, AsyncElasticsearch, TransportError

from seed.errors import SchemaProvisionError

logger = logging.getLogger(__name__)

# 설정 파일 경로
CONFIG_DIR = Path(__file__).parent.parent / "config" / "elasticsearch"
SETTINGS_PATH = CONFIG_DIR / "settings.json"
MAPPINGS_DIR = CONFIG_DIR / "mappings"

POSTS_MAPPING_FILE = "posts_index.json"


def load_index_body(mapping_file: str = POSTS_MAPPING_FILE) -> Dict[str, Any]:
    """
    인덱스 생성 본문 로드

    Returns:
        {"settings": ..., "mappings": ...}
    """
    mapping_path = MAPPINGS_DIR / mapping_file
    if not mapping_path.exists():
        raise FileNotFoundError(f"Mapping file not found: {mapping_path}")
    if not SETTINGS_PATH.exists():
        raise FileNotFoundError(f"Settings file not found: {SETTINGS_PATH}")

    with open(SETTINGS_PATH, "r", encoding="utf-8") as f:
        settings = json.load(f)
    with open(mapping_path, "r", encoding="utf-8") as f:
        mapping = json.load(f)

    return {
        "settings": settings.get("settings", {}),
        "mappings": mapping.get("mappings", {}),
    }


class ESIndexManager:
    """
    Elasticsearch 인덱스 관리자

    인덱스는 매 실행마다 삭제 후 재생성됩니다 (전체 재구축).
    생성 실패 시 SchemaProvisionError를 그대로 올려 작업을 중단합니다.

    사용 예:
        manager = ESIndexManager(es)
        await manager.ensure_clean_index("posts_index")
        status = await manager.get_index_status("posts_index")
    """

    def __init__(self, client: AsyncElasticsearch, mapping_file: str = POSTS_MAPPING_FILE):
        """
        Args:
            client: 비동기 ES 클라이언트
            mapping_file: mappings 디렉토리 내 매핑 파일명
        """
        self.client = client
        self.mapping_file = mapping_file

    async def ensure_clean_index(self, index_name: str) -> None:
        """
        인덱스 삭제 후 재생성

        Args:
            index_name: 인덱스명
        """
        try:
            body = load_index_body(self.mapping_file)

            exists = await self.client.indices.exists(index=index_name)

            if exists:
                logger.info(f"Index \"{index_name}\" already exists, deleting...")
                await self.client.indices.delete(index=index_name)

            logger.info(f"Creating index \"{index_name}\" with settings/mappings...")
            await self.client.indices.create(
                index=index_name,
                settings=body["settings"],
                mappings=body["mappings"],
            )

        except (ApiError, TransportError, OSError, ValueError) as e:
            logger.error(f"Failed to provision index {index_name}: {e}")
            raise SchemaProvisionError(
                f"인덱스 생성 실패: {index_name}",
                index=index_name,
                details={"error": str(e)}
            ) from e

        logger.info(f"Index created: {index_name}")

    async def get_index_status(self, index_name: str) -> Dict[str, Any]:
        """
        인덱스 상태 조회

        Returns:
            {"exists": bool, "docs_count": int}
        """
        exists = await self.client.indices.exists(index=index_name)
        if not exists:
            return {"exists": False, "docs_count": 0}

        stats = await self.client.indices.stats(index=index_name)
        return {
            "exists": True,
            "docs_count": stats["indices"][index_name]["primaries"]["docs"]["count"],
        }
