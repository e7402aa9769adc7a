"""
Redis 클라이언트 생성
"""

import logging

import redis.asyncio as redis

logger = logging.getLogger(__name__)


def create_redis_client(redis_url: str) -> redis.Redis:
    """비동기 Redis 클라이언트 생성 (문자열 응답)"""
    logger.info("Redis client created")
    return redis.Redis.from_url(redis_url, decode_responses=True)
