"""Protocol definitions for the remote list gateway.

The collector and archiver only depend on this protocol, so tests can
swap in an in-memory gateway.
"""

from typing import Protocol

from .models import Member


class ListGateway(Protocol):
    """Remote operations the janitor needs from a mailing list service."""

    async def list_page(self, offset: int, limit: int) -> list[Member]:
        """Fetch one page of unsubscribed members.

        Args:
            offset: Number of matching members to skip
            limit: Maximum number of members to return

        Returns:
            Members in signup order; an empty list means no more pages

        Raises:
            FetchMembersError: On transport or remote-reported failure
        """
        ...

    async def set_archived(self, member_id: str) -> str:
        """Move a single member to the archived status.

        Args:
            member_id: Member to archive

        Returns:
            The member_id that was archived

        Raises:
            ArchiveError: On transport or remote-reported failure
        """
        ...
