"""Mailchimp Marketing API gateway over httpx.

Each call is one HTTP exchange with no retries. 4xx responses are parsed
into RemoteError; anything that stops us from getting a usable response
(connection, timeout, 5xx, undecodable error body) is a transport failure.
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from janitor.lib.logging_config import log_event

from .config import PipelineConfig
from .errors import (
    ArchiveRemoteError,
    ArchiveRequestError,
    FetchRemoteError,
    FetchRequestError,
)
from .models import Member, MemberPage, RemoteError

logger = logging.getLogger(__name__)

# Mailchimp ignores the Basic auth username; only the API key matters.
AUTH_USERNAME = "anystring"
LIST_STATUS = "unsubscribed"
ARCHIVED_STATUS = "cleaned"


class MailchimpGateway:
    """Client for the two Mailchimp endpoints the janitor uses.

    The underlying httpx.AsyncClient (and its connection pool) is shared by
    every concurrent archive task.
    """

    def __init__(self, config: PipelineConfig, http: Optional[httpx.AsyncClient] = None):
        """Initialize the gateway.

        Args:
            config: Pipeline configuration with credentials and timeout
            http: Optional preconfigured client (tests inject a MockTransport)
        """
        self.config = config
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(timeout=config.timeout)
        self._auth = httpx.BasicAuth(AUTH_USERNAME, config.api_key)

    async def __aenter__(self) -> "MailchimpGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this gateway created it."""
        if self._owns_http:
            await self.http.aclose()

    def _url(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/3.0/lists/{self.config.list_id}/{path}"

    async def list_page(self, offset: int, limit: int) -> list[Member]:
        """Fetch one page of unsubscribed members, oldest signup first.

        Raises:
            FetchRequestError: Transport failure
            FetchRemoteError: Mailchimp returned a 4xx error body
            ValidationError: A 2xx body did not match the members schema
        """
        try:
            response = await self.http.get(
                self._url("members"),
                params={
                    "status": LIST_STATUS,
                    "count": limit,
                    "offset": offset,
                    "sort_field": "timestamp_signup",
                    "sort_dir": "ASC",
                },
                auth=self._auth,
            )
        except httpx.HTTPError as e:
            raise FetchRequestError(e) from e

        if response.is_client_error:
            try:
                remote = RemoteError.model_validate_json(response.content)
            except ValidationError as e:
                raise FetchRequestError(e) from e
            raise FetchRemoteError(remote)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchRequestError(e) from e

        # A malformed success body breaks the API contract; let it propagate.
        page = MemberPage.model_validate_json(response.content)
        log_event(logger, logging.DEBUG, "Fetched members page", offset=offset, count=len(page.members))
        return page.members

    async def set_archived(self, member_id: str) -> str:
        """Set a member's status to `cleaned`.

        Raises:
            ArchiveRequestError: Transport failure
            ArchiveRemoteError: Mailchimp returned a 4xx error body
        """
        try:
            response = await self.http.patch(
                self._url(f"members/{quote(member_id, safe='')}"),
                json={"status": ARCHIVED_STATUS},
                headers={"Content-Type": "application/json"},
                auth=self._auth,
            )
        except httpx.HTTPError as e:
            raise ArchiveRequestError(member_id, e) from e

        if response.is_client_error:
            try:
                remote = RemoteError.model_validate_json(response.content)
            except ValidationError as e:
                raise ArchiveRequestError(member_id, e) from e
            raise ArchiveRemoteError(member_id, remote)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ArchiveRequestError(member_id, e) from e

        return member_id
