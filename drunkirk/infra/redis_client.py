from __future__ import annotations

import logging

import redis


logger = logging.getLogger(__name__)


def create_redis(url: str) -> redis.Redis:
    """Client for the settings store.

    An unreachable server is not fatal: the game runs from memory and the
    store logs each failed read or write.
    """

    # decode_responses=True => strings in/out instead of bytes
    r = redis.Redis.from_url(url, decode_responses=True, socket_connect_timeout=1.0, socket_timeout=1.0)
    try:
        r.ping()
    except redis.RedisError:
        logger.warning("redis at %s is unreachable, settings will not be saved", url)
    return r
