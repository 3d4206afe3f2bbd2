"""
Token Revocation System using Redis.

Implements token blacklisting to immediately invalidate bearer tokens
when users log out.
"""

import hashlib
import logging
from datetime import datetime, timezone

from redis.exceptions import RedisError
from backend.app.core.exceptions import InternalError

logger = logging.getLogger(__name__)

# Redis key prefix for blacklisted tokens
TOKEN_BLACKLIST_PREFIX = "blacklist:token:"


def _token_key(token: str) -> str:
    # Keys hold a digest, never the credential itself
    digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
    return f"{TOKEN_BLACKLIST_PREFIX}{digest}"


def seconds_until(expires_at: datetime) -> int:
    """Remaining lifetime of a token, never less than one second."""
    remaining = (expires_at - datetime.now(timezone.utc)).total_seconds()
    return max(int(remaining), 1)


async def revoke_token(redis_client, token: str, email: str, expires_at: datetime) -> None:
    """
    Revoke a specific bearer token by adding it to the blacklist.

    The entry lives exactly as long as the token would have.

    Raises:
        InternalError: if the revocation store is unreachable
    """
    try:
        await redis_client.set(
            _token_key(token),
            email,  # Stored for audit purposes
            ex=seconds_until(expires_at),
        )
    except (RedisError, OSError) as e:
        logger.error("Error revoking token for %s: %s", email, e)
        raise InternalError("Token revocation store unavailable") from e


async def is_token_revoked(redis_client, token: str) -> bool:
    """
    Check if a token has been revoked.

    Fails closed: if Redis cannot answer, the request is rejected with
    InternalError instead of being let through.
    """
    try:
        exists = await redis_client.exists(_token_key(token))
    except (RedisError, OSError) as e:
        logger.error("Error checking token revocation: %s", e)
        raise InternalError("Token revocation store unavailable") from e
    return exists > 0
