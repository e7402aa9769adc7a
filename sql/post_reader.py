"""
게시물 DB 페이지 조회

created_at 오름차순 LIMIT/OFFSET 페이지로 게시물을 읽고,
페이지에 포함된 게시물의 연관 데이터(작성자, 미디어, 해시태그,
좋아요/댓글/공유)를 한 번에 채워서 PostRecord 목록으로 반환합니다.
"""

import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional, Sequence

import asyncpg

from seed.errors import SourceReadError
from sql.models import (
    AuthorProjection,
    EngagementRow,
    Hashtag,
    HashtagLink,
    MediaItem,
    PostRecord,
)

logger = logging.getLogger(__name__)


# created_at이 같은 행이 페이지 경계에서 흔들리지 않도록 id로 2차 정렬
PAGE_QUERY = """
    SELECT p.id, p.user_id, p.title, p.content, p.post_type, p.visibility,
           p.created_at, p.updated_at, p.expired_at,
           p.like_count, p.comment_count, p.share_count,
           u.id AS author_id, u.username AS author_username,
           u.fullname AS author_fullname, u.avatar_url AS author_avatar_url
    FROM posts p
    LEFT JOIN users u ON u.id = p.user_id
    ORDER BY p.created_at ASC, p.id ASC
    LIMIT $1 OFFSET $2
"""

MEDIA_QUERY = """
    SELECT post_id, media_url, media_type
    FROM media
    WHERE post_id = ANY($1)
"""

HASHTAG_QUERY = """
    SELECT ph.post_id, h.id AS hashtag_id, h.name
    FROM post_hashtags ph
    JOIN hashtags h ON h.id = ph.hashtag_id
    WHERE ph.post_id = ANY($1)
"""

# 좋아요/댓글/공유 원본 테이블
ENGAGEMENT_TABLES = ("likes", "comments", "shares")


def _engagement_query(table: str) -> str:
    return f"SELECT post_id FROM {table} WHERE post_id = ANY($1)"


def _group_by_post(rows: Sequence[Any], build) -> Dict[str, list]:
    grouped: Dict[str, list] = defaultdict(list)
    for row in rows:
        grouped[str(row["post_id"])].append(build(row))
    return grouped


def _build_author(row: Any) -> Optional[AuthorProjection]:
    if row["author_id"] is None:
        return None
    return AuthorProjection(
        id=str(row["author_id"]),
        username=row["author_username"],
        fullname=row["author_fullname"],
        avatar_url=row["author_avatar_url"],
    )


class PostSourceReader:
    """
    게시물 DB 리더

    사용 예:
        reader = PostSourceReader(pool)
        posts = await reader.fetch_page(offset=0, limit=500)
    """

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def fetch_page(self, offset: int, limit: int) -> List[PostRecord]:
        """
        게시물 한 페이지 조회

        Args:
            offset: 건너뛸 행 수
            limit: 페이지 크기

        Returns:
            PostRecord 목록 (데이터 끝이면 빈 목록)
        """
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(PAGE_QUERY, limit, offset)
                if not rows:
                    return []

                post_ids = [row["id"] for row in rows]

                media = _group_by_post(
                    await conn.fetch(MEDIA_QUERY, post_ids),
                    lambda r: MediaItem(media_url=r["media_url"], media_type=r["media_type"]),
                )
                hashtags = _group_by_post(
                    await conn.fetch(HASHTAG_QUERY, post_ids),
                    lambda r: HashtagLink(
                        post_id=str(r["post_id"]),
                        hashtag=Hashtag(id=str(r["hashtag_id"]), name=r["name"]),
                    ),
                )
                engagements = {}
                for table in ENGAGEMENT_TABLES:
                    engagements[table] = _group_by_post(
                        await conn.fetch(_engagement_query(table), post_ids),
                        lambda r: EngagementRow(post_id=str(r["post_id"])),
                    )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise SourceReadError(
                f"게시물 조회 실패 (offset={offset}): {e}",
                query=PAGE_QUERY,
                details={"offset": offset, "limit": limit}
            ) from e

        records = []
        for row in rows:
            post_id = str(row["id"])
            records.append(PostRecord(
                id=post_id,
                user_id=str(row["user_id"]) if row["user_id"] is not None else None,
                title=row["title"],
                content=row["content"],
                post_type=row["post_type"],
                visibility=row["visibility"],
                created_at=row["created_at"],
                updated_at=row["updated_at"],
                expired_at=row["expired_at"],
                like_count=row["like_count"],
                comment_count=row["comment_count"],
                share_count=row["share_count"],
                author=_build_author(row),
                media=media.get(post_id, []),
                hashtag_links=hashtags.get(post_id, []),
                likes=engagements["likes"].get(post_id, []),
                comments=engagements["comments"].get(post_id, []),
                shares=engagements["shares"].get(post_id, []),
            ))

        logger.debug(f"Fetched {len(records)} posts (offset={offset})")
        return records
