"""Instagram user helpers."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from ..core.exceptions import RagamintsError

if TYPE_CHECKING:
    from ..runtime.fetcher import PaginatedFetcher

logger = logging.getLogger(__name__)

_USER_ID_RE = re.compile(r"^[0-9]+$")


def is_user_id(value: str) -> bool:
    """Check if value is a valid user ID."""
    return bool(_USER_ID_RE.match(value))


async def resolve_user_id(fetcher: PaginatedFetcher, user_id_or_name: str) -> str:
    """Resolve a user ID from a user ID or user name.

    Raises:
        RagamintsError: If no user matches the name
        RemoteFetchError: If the search fails
    """
    if is_user_id(user_id_or_name):
        return user_id_or_name
    users = await fetcher.search(user_id_or_name, {"count": 1})
    if not users:
        raise RagamintsError(f"Could not find user ID for {user_id_or_name}")
    user_id = str(users[0]["id"])
    logger.info(f"Found user ID {user_id} for username {user_id_or_name}")
    return user_id
