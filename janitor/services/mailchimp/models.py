"""Data models for the Mailchimp list janitor.

Models for:
- Member: a list member as returned by the members endpoint
- MemberPage: one page of the paginated members listing
- RemoteError: a parsed Mailchimp 4xx error body
- ArchiveOutcome: the result of archiving one member
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from .errors import JanitorError


class Member(BaseModel):
    """A list member. Only `id` is needed by the pipeline."""

    id: str
    email_address: Optional[str] = None
    full_name: Optional[str] = None
    status: Optional[str] = None
    timestamp_signup: Optional[str] = None

    model_config = ConfigDict(extra="ignore", frozen=True)


class MemberPage(BaseModel):
    """Response body of `GET /3.0/lists/{list_id}/members`.

    An empty `members` list is the end-of-listing signal.
    """

    members: list[Member] = Field(...)

    model_config = ConfigDict(extra="ignore")

class RemoteError(BaseModel):
    """Structured Mailchimp error body (RFC 7807 problem details)."""

    type: str
    title: str
    status: int
    detail: Optional[str] = None
    instance: Optional[str] = None

    model_config = ConfigDict(extra="ignore", frozen=True)

    def __str__(self) -> str:
        return f"{self.title} ({self.status}): {self.detail or ''}"


@dataclass(frozen=True)
class ArchiveOutcome:
    """Outcome of archiving a single member.

    Attributes:
        member_id: The member the mutation was issued for
        error: None on success, otherwise the failure cause
    """

    member_id: str
    error: Optional["JanitorError"] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, member_id: str) -> "ArchiveOutcome":
        """Create a successful outcome."""
        return cls(member_id=member_id)

    @classmethod
    def fail(cls, member_id: str, error: "JanitorError") -> "ArchiveOutcome":
        """Create a failed outcome."""
        return cls(member_id=member_id, error=error)
