"""
게시물 원본 레코드

게시물 DB 조회 결과를 명시적 타입으로 표현합니다.
연관 데이터(작성자, 미디어, 해시태그, 좋아요/댓글/공유)는
조회 시점에 모두 채워진 상태로 전달됩니다.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class AuthorProjection:
    """작성자 정보 (users 테이블 조인)"""
    id: str
    username: Optional[str] = None
    fullname: Optional[str] = None
    avatar_url: Optional[str] = None


@dataclass
class MediaItem:
    """첨부 미디어 (image | video | file)"""
    media_url: str
    media_type: str


@dataclass
class Hashtag:
    id: str
    name: str


@dataclass
class HashtagLink:
    """post_hashtags 연결 행"""
    post_id: str
    hashtag: Hashtag


@dataclass
class EngagementRow:
    """좋아요/댓글/공유 원본 행 (카운트 fallback 용도)

    복합 키 연결 테이블도 있으므로 post_id만 조회합니다.
    """
    post_id: Optional[str] = None
    id: Optional[str] = None


@dataclass
class PostRecord:
    """게시물 원본 레코드"""
    id: str
    user_id: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    post_type: Optional[str] = None
    visibility: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    expired_at: Optional[datetime] = None

    # 비정규화 카운터 (NULL 가능)
    like_count: Optional[int] = None
    comment_count: Optional[int] = None
    share_count: Optional[int] = None

    author: Optional[AuthorProjection] = None
    media: List[MediaItem] = field(default_factory=list)
    hashtag_links: List[HashtagLink] = field(default_factory=list)
    likes: List[EngagementRow] = field(default_factory=list)
    comments: List[EngagementRow] = field(default_factory=list)
    shares: List[EngagementRow] = field(default_factory=list)
