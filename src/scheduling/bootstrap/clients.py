"""Factories de clientes externos (Redis)."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from config.settings import get_persistence_settings
from utils.errors import ConfigurationError

if TYPE_CHECKING:
    from redis import Redis

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def create_redis_client() -> Redis[bytes]:
    """Cria cliente Redis síncrono (singleton).

    Returns:
        Cliente Redis configurado a partir de REDIS_URL

    Raises:
        ConfigurationError: Se REDIS_URL não configurado
    """
    import redis

    redis_url = get_persistence_settings().redis_url
    if not redis_url:
        raise ConfigurationError("REDIS_URL não configurado")

    client: Redis[bytes] = redis.from_url(
        redis_url,
        decode_responses=False,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
        retry_on_timeout=True,
    )

    host = client.connection_pool.connection_kwargs.get("host", "unknown")
    logger.info("redis_client_created", extra={"host": host})
    return client
