# Redis cache seeding
"""
Redis 캐시 시드 모듈

- redis_client: 비동기 Redis 클라이언트 생성
- username_seeder: 사용자 DB → Redis username 집합 시드
"""

from .username_seeder import UsernameSeeder, normalize_usernames

__all__ = [
    "UsernameSeeder",
    "normalize_usernames",
]
