"""Mailchimp list janitor: archive every unsubscribed member of a list.

Example usage:
    >>> from janitor.services.mailchimp import PipelineConfig, create_gateway, create_janitor
    >>>
    >>> config = PipelineConfig(base_url, list_id, api_key)
    >>> async with create_gateway(config) as gateway:
    ...     outcomes = await create_janitor(gateway).move_unsubscribed_to_archive()
    ...     async for outcome in outcomes:
    ...         print(outcome.member_id, outcome.success)
"""

from .models import Member, MemberPage, RemoteError, ArchiveOutcome
from .errors import (
    JanitorError,
    FetchMembersError,
    FetchRequestError,
    FetchRemoteError,
    ArchiveError,
    ArchiveRequestError,
    ArchiveRemoteError,
    TaskJoinError,
)
from .config import PipelineConfig
from .protocols import ListGateway
from .client import MailchimpGateway
from .collector import iter_members, collect_member_ids
from .archiver import BoundedArchiver
from .pipeline import ListJanitor
from .factory import create_gateway, create_janitor

__all__ = [
    # Models
    "Member",
    "MemberPage",
    "RemoteError",
    "ArchiveOutcome",
    # Errors
    "JanitorError",
    "FetchMembersError",
    "FetchRequestError",
    "FetchRemoteError",
    "ArchiveError",
    "ArchiveRequestError",
    "ArchiveRemoteError",
    "TaskJoinError",
    # Configuration
    "PipelineConfig",
    # Protocols
    "ListGateway",
    # Implementations
    "MailchimpGateway",
    "BoundedArchiver",
    "ListJanitor",
    "iter_members",
    "collect_member_ids",
    # Factories
    "create_gateway",
    "create_janitor",
]
