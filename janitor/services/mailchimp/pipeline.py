"""Collect-then-archive pipeline.

Runs the collector to completion, then hands the full id snapshot to the
archiver. An enumeration failure aborts the run before any mutation.
"""

import logging
from collections.abc import AsyncIterator

from .archiver import BoundedArchiver
from .collector import collect_member_ids, iter_members
from .config import PipelineConfig
from .models import ArchiveOutcome, Member
from .protocols import ListGateway

logger = logging.getLogger(__name__)


class ListJanitor:
    """Fetches and archives the unsubscribed members of one list.

    Example:
        >>> async with create_gateway(config) as gateway:
        ...     janitor = ListJanitor(gateway, config)
        ...     outcomes = await janitor.move_unsubscribed_to_archive()
        ...     async for outcome in outcomes:
        ...         print(outcome)
    """

    def __init__(self, gateway: ListGateway, config: PipelineConfig):
        self.gateway = gateway
        self.config = config

    def fetch_unsubscribed(self) -> AsyncIterator[Member]:
        """Stream every unsubscribed member, page by page.

        Read-only; a failing page raises FetchMembersError mid-stream.
        """
        return iter_members(self.gateway, self.config.page_size)

    async def get_unsubscribed_ids(self) -> list[str]:
        """Snapshot the ids of all unsubscribed members (all-or-nothing)."""
        return await collect_member_ids(self.gateway, self.config.page_size)

    async def move_unsubscribed_to_archive(self) -> AsyncIterator[ArchiveOutcome]:
        """Archive every unsubscribed member.

        The id snapshot is taken eagerly, so by the time this coroutine
        returns, enumeration has completed and no mutation has been issued.

        Returns:
            Lazy iterator of ArchiveOutcome in completion order

        Raises:
            FetchMembersError: If enumeration failed; nothing was archived
        """
        member_ids = await self.get_unsubscribed_ids()
        archiver = BoundedArchiver(self.gateway, self.config.max_concurrency)
        return archiver.archive(member_ids)
