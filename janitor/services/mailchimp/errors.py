"""Exception taxonomy for the list janitor.

Enumeration failures (FetchMembersError) are fatal to an archive run.
Per-member failures (ArchiveError, TaskJoinError) are reported as
outcomes and never stop the run.
"""

from typing import Optional

from .models import RemoteError


class JanitorError(Exception):
    """Base class for all janitor errors."""


class FetchMembersError(JanitorError):
    """Listing the members failed."""


class FetchRequestError(FetchMembersError):
    """Transport failure while listing members.

    The underlying httpx exception is chained as ``__cause__``.
    """

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"Request error: {cause}")


class FetchRemoteError(FetchMembersError):
    """Mailchimp rejected the members listing."""

    def __init__(self, remote: RemoteError):
        self.remote = remote
        super().__init__(f"Mailchimp error: {remote}")


class ArchiveError(JanitorError):
    """Archiving a single member failed."""

    def __init__(self, member_id: str, message: str):
        self.member_id = member_id
        super().__init__(message)


class ArchiveRequestError(ArchiveError):
    """Transport failure while archiving a member."""

    def __init__(self, member_id: str, cause: Exception):
        self.cause = cause
        super().__init__(
            member_id, f"Request error while archiving user {member_id}: {cause}"
        )


class ArchiveRemoteError(ArchiveError):
    """Mailchimp rejected the archive mutation for a member."""

    def __init__(self, member_id: str, remote: RemoteError):
        self.remote = remote
        super().__init__(
            member_id, f"Mailchimp error while archiving user {member_id}: {remote}"
        )


class TaskJoinError(JanitorError):
    """The archive task itself could not deliver a result.

    Raised for cancelled tasks and for tasks that died with something
    other than an ArchiveError.
    """

    def __init__(self, member_id: str, cause: Optional[BaseException] = None):
        self.member_id = member_id
        self.cause = cause
        reason = f"{type(cause).__name__}: {cause}" if cause is not None else "cancelled"
        super().__init__(f"Task cancelled: archiving user {member_id} ({reason})")
