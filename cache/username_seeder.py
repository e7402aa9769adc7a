"""
사용자 DB → Redis username 집합 시드

집합이 이미 채워져 있으면 아무것도 하지 않습니다 (재시드는 외부에서 집합 삭제 필요).
"""

import logging
from typing import Iterable, List, Optional

import redis.asyncio as redis

from sql.user_reader import UsernameSourceReader

logger = logging.getLogger(__name__)


def normalize_usernames(values: Iterable[Optional[str]]) -> List[str]:
    """앞뒤 공백 제거 + 소문자, 빈 값/None 제외"""
    usernames = []
    for value in values:
        if value is None:
            continue
        name = value.strip().lower()
        if name:
            usernames.append(name)
    return usernames


class UsernameSeeder:
    """
    username 집합 시더

    사용 예:
        seeder = UsernameSeeder(redis_client, UsernameSourceReader(users_pool))
        await seeder.seed_usernames()
    """

    def __init__(
        self,
        client: redis.Redis,
        reader: UsernameSourceReader,
        key: str = "usernames",
    ):
        self.client = client
        self.reader = reader
        self.key = key

    async def seed_usernames(self) -> int:
        """
        username 시드

        Returns:
            SADD로 보낸 username 수 (건너뛴 경우 0)
        """
        logger.info(f"Seeding usernames into Redis set \"{self.key}\"...")

        existing = await self.client.scard(self.key)
        if existing > 0:
            logger.info(f"Set \"{self.key}\" already has {existing:,} entries, skipping")
            return 0

        usernames = normalize_usernames(await self.reader.fetch_usernames())

        if usernames:
            await self.client.sadd(self.key, *usernames)

        logger.info(f"Seeded usernames ({len(usernames):,} entries)")
        return len(usernames)
