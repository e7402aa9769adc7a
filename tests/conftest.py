"""
pytest 공통 fixture 정의
- 외부 서비스(PostgreSQL, Elasticsearch, Redis) 없이 실행 가능한 인메모리 fake
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sql.models import (
    AuthorProjection, EngagementRow, Hashtag, HashtagLink, MediaItem, PostRecord
)
from sql.post_reader import HASHTAG_QUERY, MEDIA_QUERY, PAGE_QUERY


BASE_TIME = datetime(2024, 1, 1, 9, 0, 0)


# ---------------------------------------------------------------------------
# Elasticsearch
# ---------------------------------------------------------------------------

class FakeIndices:
    """AsyncElasticsearch.indices 대체"""

    def __init__(self, es: "FakeElasticsearch"):
        self.es = es
        self.calls: List[str] = []
        self.created_bodies: Dict[str, Dict[str, Any]] = {}
        self.create_error: Optional[Exception] = None

    async def exists(self, index: str) -> bool:
        self.calls.append("exists")
        return index in self.es.indices_data

    async def delete(self, index: str) -> None:
        self.calls.append("delete")
        self.es.indices_data.pop(index, None)

    async def create(self, index: str, settings: dict = None, mappings: dict = None) -> dict:
        self.calls.append("create")
        if self.create_error is not None:
            raise self.create_error
        self.created_bodies[index] = {"settings": settings, "mappings": mappings}
        self.es.indices_data[index] = {}
        return {"acknowledged": True, "index": index}

    async def stats(self, index: str) -> dict:
        count = len(self.es.indices_data.get(index, {}))
        return {"indices": {index: {"primaries": {"docs": {"count": count}}}}}


class FakeElasticsearch:
    """AsyncElasticsearch 대체 (bulk/index 관리만)"""

    def __init__(self):
        self.indices_data: Dict[str, Dict[str, dict]] = {}
        self.indices = FakeIndices(self)
        self.bulk_calls: List[Dict[str, Any]] = []
        self.fail_ids: set = set()
        self.bulk_error: Optional[Exception] = None
        self.closed = False

    async def close(self) -> None:
        self.closed = True


async def fake_async_bulk(client: FakeElasticsearch, actions, chunk_size: int = 500,
                          raise_on_error: bool = True, raise_on_exception: bool = True,
                          **kwargs) -> tuple:
    """elasticsearch.helpers.async_bulk 대체

    (성공 건수, 에러 항목 목록)을 반환하며 에러 항목 형태는 실제 helper와 같습니다.
    """
    actions = list(actions)
    client.bulk_calls.append({
        "actions": actions,
        "chunk_size": chunk_size,
        "refresh": kwargs.get("refresh", False),
        "raise_on_error": raise_on_error,
        "raise_on_exception": raise_on_exception,
    })
    if client.bulk_error is not None:
        raise client.bulk_error

    success, errors = 0, []
    for action in actions:
        if action["_id"] in client.fail_ids:
            errors.append({"index": {
                "_index": action["_index"],
                "_id": action["_id"],
                "status": 400,
                "error": {
                    "type": "mapper_parsing_exception",
                    "reason": "failed to parse field [created_at]",
                },
            }})
            continue
        client.indices_data.setdefault(action["_index"], {})[action["_id"]] = action["_source"]
        success += 1
    return success, errors


# ---------------------------------------------------------------------------
# PostgreSQL
# ---------------------------------------------------------------------------

class FakeConnection:
    """asyncpg.Connection 대체 - 쿼리 문자열로 테이블 분기"""

    def __init__(self, tables: Dict[str, List[dict]]):
        self.tables = tables
        self.queries: List[str] = []

    async def fetch(self, query: str, *args) -> List[dict]:
        self.queries.append(query)
        if query == PAGE_QUERY:
            limit, offset = args
            users = {u["id"]: u for u in self.tables.get("users", [])}
            posts = sorted(self.tables.get("posts", []), key=lambda p: (p["created_at"], p["id"]))
            rows = []
            for post in posts[offset:offset + limit]:
                user = users.get(post["user_id"], {})
                row = dict(post)
                row.update({
                    "author_id": user.get("id"),
                    "author_username": user.get("username"),
                    "author_fullname": user.get("fullname"),
                    "author_avatar_url": user.get("avatar_url"),
                })
                rows.append(row)
            return rows

        if query == MEDIA_QUERY:
            return [m for m in self.tables.get("media", []) if m["post_id"] in args[0]]

        if query == HASHTAG_QUERY:
            names = {h["id"]: h["name"] for h in self.tables.get("hashtags", [])}
            return [
                {"post_id": link["post_id"], "hashtag_id": link["hashtag_id"], "name": names[link["hashtag_id"]]}
                for link in self.tables.get("post_hashtags", [])
                if link["post_id"] in args[0]
            ]

        if query.startswith("SELECT post_id FROM "):
            table = query.split("FROM ")[1].split()[0]
            return [{"post_id": r["post_id"]} for r in self.tables.get(table, []) if r["post_id"] in args[0]]

        if query == "SELECT username FROM profile":
            return [{"username": p["username"]} for p in self.tables.get("profile", [])]

        raise AssertionError(f"unexpected query: {query}")


class _Acquire:
    def __init__(self, conn: FakeConnection):
        self.conn = conn

    async def __aenter__(self) -> FakeConnection:
        return self.conn

    async def __aexit__(self, *exc) -> bool:
        return False


class FakePool:
    """asyncpg.Pool 대체"""

    def __init__(self, tables: Dict[str, List[dict]] = None, error: Exception = None):
        self.conn = FakeConnection(tables or {})
        self.error = error
        self.closed = False

    def acquire(self) -> _Acquire:
        if self.error is not None:
            raise self.error
        return _Acquire(self.conn)

    async def close(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# Redis
# ---------------------------------------------------------------------------

class FakeRedis:
    """redis.asyncio.Redis 대체 (집합 명령만)"""

    def __init__(self):
        self.sets: Dict[str, set] = {}
        self.sadd_calls: List[tuple] = []
        self.closed = False

    async def scard(self, key: str) -> int:
        return len(self.sets.get(key, set()))

    async def sadd(self, key: str, *members: str) -> int:
        self.sadd_calls.append((key, members))
        current = self.sets.setdefault(key, set())
        before = len(current)
        current.update(members)
        return len(current) - before

    async def aclose(self) -> None:
        self.closed = True


class FakeUsernameReader:
    def __init__(self, usernames: List[Optional[str]]):
        self.usernames = usernames
        self.calls = 0

    async def fetch_usernames(self) -> List[Optional[str]]:
        self.calls += 1
        return list(self.usernames)


# ---------------------------------------------------------------------------
# 게시물 리더
# ---------------------------------------------------------------------------

class FakePostReader:
    """PostSourceReader 대체 - 메모리 내 레코드 슬라이스"""

    def __init__(self, posts: List[PostRecord], error_at_offset: Optional[int] = None):
        self.posts = posts
        self.error_at_offset = error_at_offset
        self.calls: List[tuple] = []

    async def fetch_page(self, offset: int, limit: int) -> List[PostRecord]:
        self.calls.append((offset, limit))
        if self.error_at_offset is not None and offset == self.error_at_offset:
            from seed.errors import SourceReadError
            raise SourceReadError(f"connection lost (offset={offset})")
        return self.posts[offset:offset + limit]


def make_post(index: int, **overrides) -> PostRecord:
    """테스트용 게시물 레코드"""
    values = dict(
        id=f"post-{index:05d}",
        user_id=f"user-{index % 7}",
        title=f"Bài viết {index}",
        content=f"Nội dung số {index}",
        post_type="normal",
        visibility="public",
        created_at=BASE_TIME + timedelta(minutes=index),
        updated_at=BASE_TIME + timedelta(minutes=index, seconds=30),
        expired_at=None,
        author=AuthorProjection(
            id=f"user-{index % 7}",
            username=f"user{index % 7}",
            fullname=f"Nguyễn Văn {index % 7}",
            avatar_url=f"https://cdn.example.com/avatars/{index % 7}.png",
        ),
    )
    values.update(overrides)
    return PostRecord(**values)


# ---------------------------------------------------------------------------
# fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_es():
    return FakeElasticsearch()


@pytest.fixture(autouse=True)
def patch_async_bulk(monkeypatch):
    """BulkIndexer가 fake_async_bulk를 사용하도록 교체"""
    monkeypatch.setattr("search.es_bulk.async_bulk", fake_async_bulk)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def sample_post():
    """연관 데이터가 모두 채워진 게시물"""
    return make_post(
        1,
        expired_at=BASE_TIME + timedelta(days=1),
        like_count=None,
        comment_count=5,
        share_count=None,
        media=[
            MediaItem(media_url="https://cdn.example.com/p/1.jpg", media_type="image"),
            MediaItem(media_url="https://cdn.example.com/p/1.mp4", media_type="video"),
        ],
        hashtag_links=[
            HashtagLink(post_id="post-00001", hashtag=Hashtag(id="h1", name="dulich")),
            HashtagLink(post_id="post-00001", hashtag=Hashtag(id="h2", name="hà_nội")),
        ],
        likes=[EngagementRow(post_id="post-00001"), EngagementRow(post_id="post-00001")],
        comments=[EngagementRow(post_id="post-00001")],
        shares=[],
    )


@pytest.fixture
def source_tables():
    """게시물 DB 원본 테이블 (FakePool 용)"""
    return {
        "users": [
            {"id": "u1", "username": "minh", "fullname": "Trần Minh", "avatar_url": "https://cdn/u1.png"},
        ],
        "posts": [
            {
                "id": "p2", "user_id": "u1", "title": "Second", "content": "B",
                "post_type": "normal", "visibility": "public",
                "created_at": BASE_TIME + timedelta(hours=2), "updated_at": BASE_TIME + timedelta(hours=2),
                "expired_at": None, "like_count": None, "comment_count": None, "share_count": 4,
            },
            {
                "id": "p1", "user_id": "u1", "title": "First", "content": "A",
                "post_type": "story", "visibility": "friends",
                "created_at": BASE_TIME, "updated_at": BASE_TIME,
                "expired_at": BASE_TIME + timedelta(days=1), "like_count": 10, "comment_count": None, "share_count": None,
            },
            {
                "id": "p3", "user_id": "ghost", "title": None, "content": None,
                "post_type": "normal", "visibility": "private",
                "created_at": BASE_TIME + timedelta(hours=3), "updated_at": BASE_TIME + timedelta(hours=3),
                "expired_at": None, "like_count": None, "comment_count": None, "share_count": None,
            },
        ],
        "media": [
            {"post_id": "p1", "media_url": "https://cdn/p1.jpg", "media_type": "image"},
            {"post_id": "p2", "media_url": "https://cdn/p2.pdf", "media_type": "file"},
        ],
        "hashtags": [{"id": "h1", "name": "travel"}, {"id": "h2", "name": "food"}],
        "post_hashtags": [
            {"post_id": "p1", "hashtag_id": "h1"},
            {"post_id": "p1", "hashtag_id": "h2"},
        ],
        "likes": [
            {"post_id": "p2", "user_id": "u1"},
            {"post_id": "p2", "user_id": "u2"},
        ],
        "comments": [{"id": "c1", "post_id": "p1", "user_id": "u1"}],
        "shares": [],
    }
