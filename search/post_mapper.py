"""
게시물 → 검색 문서 변환

PostRecord 하나를 posts_index 문서 하나로 변환합니다.
네트워크/DB 접근 없는 순수 함수입니다.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sql.models import EngagementRow, PostRecord


def format_timestamp(value: Any) -> Optional[str]:
    """타임스탬프를 ISO-8601 문자열로 변환"""
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def resolve_count(counter: Optional[int], rows: List[EngagementRow]) -> int:
    """비정규화 카운터 우선, NULL이면 원본 행 개수"""
    if counter is not None:
        return counter
    return len(rows)


def map_post(post: PostRecord) -> Dict[str, Any]:
    """
    게시물 문서 변환

    작성자/제목/본문이 없으면 빈 문자열로 채웁니다.

    Args:
        post: 게시물 원본 레코드

    Returns:
        검색 문서 (id = 게시물 id)
    """
    author = post.author

    hashtags = [link.hashtag.name for link in post.hashtag_links]

    media = [
        {"mediaUrl": item.media_url, "mediaType": item.media_type}
        for item in post.media
    ]

    return {
        "id": post.id,

        "author_id": post.user_id or "",
        "author_username": (author.username if author else None) or "",
        "author_fullname": (author.fullname if author else None) or "",
        "author_avatar": (author.avatar_url if author else None) or "",

        "title": post.title or "",
        "content": post.content or "",

        "hashtags": hashtags,
        "media": media,

        "post_type": post.post_type,
        "expired_at": format_timestamp(post.expired_at),

        "created_at": format_timestamp(post.created_at),
        "updated_at": format_timestamp(post.updated_at),
        "visibility": post.visibility,

        "like_count": resolve_count(post.like_count, post.likes),
        "comment_count": resolve_count(post.comment_count, post.comments),
        "share_count": resolve_count(post.share_count, post.shares),
    }
