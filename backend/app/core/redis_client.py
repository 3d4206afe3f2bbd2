"""
Redis client initialization and connection management.

This module provides Redis client setup for the token revocation store.
The client is created once by the application factory and handed to
handlers through the get_redis dependency.
"""

import redis.asyncio as redis
from fastapi import Request
from backend.app.core.config import Settings


def create_redis_client(settings: Settings) -> redis.Redis:
    """
    Create the async Redis client.

    Socket timeouts bound every call so a stalled Redis cannot hang a request.
    """
    return redis.from_url(
        settings.redis_url,
        decode_responses=settings.redis_decode_responses,
        socket_timeout=settings.redis_socket_timeout_seconds,
        socket_connect_timeout=settings.redis_socket_timeout_seconds,
    )


async def get_redis(request: Request):
    """
    Get Redis client instance.

    FastAPI dependency.
    """
    return request.app.state.redis


async def ping_redis(client) -> bool:
    """
    Test Redis connection.

    Returns:
        True if connection successful, False otherwise
    """
    try:
        return bool(await client.ping())
    except (redis.RedisError, OSError):
        return False
