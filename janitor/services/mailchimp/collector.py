"""Enumerate unsubscribed members by offset pagination.

Mailchimp's offset pagination is not stable while members change status:
archiving a member removes it from the `unsubscribed` filter and shifts
every later offset. Archive runs therefore collect every id up front with
`collect_member_ids` before issuing a single mutation.
"""

import logging
from collections.abc import AsyncIterator

from janitor.lib.logging_config import log_event

from .models import Member
from .protocols import ListGateway

logger = logging.getLogger(__name__)


async def iter_members(gateway: ListGateway, page_size: int) -> AsyncIterator[Member]:
    """Lazily yield members page by page until an empty page.

    Pages are requested strictly one at a time. A gateway failure is raised
    after the members of earlier pages have been yielded.

    Args:
        gateway: Remote list gateway
        page_size: Members requested per page (>= 1)

    Yields:
        Members in page order (signup timestamp ascending)

    Raises:
        FetchMembersError: On the first failing page request
    """
    if page_size < 1:
        raise ValueError("page_size must be >= 1")

    offset = 0
    while True:
        page = await gateway.list_page(offset, page_size)
        if not page:
            return

        for member in page:
            yield member

        offset += page_size


async def collect_member_ids(gateway: ListGateway, page_size: int) -> list[str]:
    """Materialize the ids of every matching member.

    All-or-nothing: on any gateway failure the partial list is discarded
    and the error propagates.

    Returns:
        Member ids in page order
    """
    member_ids: list[str] = []
    async for member in iter_members(gateway, page_size):
        member_ids.append(member.id)

    log_event(logger, logging.INFO, "Collected unsubscribed member ids", total=len(member_ids))
    return member_ids
