from __future__ import annotations

import redis

from ordering.application.ports.publisher import EventPublisher


class RedisEventPublisher(EventPublisher):
    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    def publish(self, channel: str, message: str) -> None:
        self._client.publish(channel, message)


class NullEventPublisher(EventPublisher):
    """Used when no Redis URL is configured; events are dropped."""

    def publish(self, channel: str, message: str) -> None:
        return None
