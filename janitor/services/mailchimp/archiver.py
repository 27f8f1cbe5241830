"""Sliding-window archiver.

Keeps at most `max_concurrency` archive requests in flight, launches one
replacement per completed request, and yields outcomes in completion
order. All window state (pending ids, in-flight tasks) is owned by the
single coordinating loop in `BoundedArchiver.archive`, so no locking is
needed.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable

from janitor.lib.logging_config import log_event

from .errors import ArchiveError, TaskJoinError
from .models import ArchiveOutcome
from .protocols import ListGateway

logger = logging.getLogger(__name__)


class BoundedArchiver:
    """Archive members with bounded concurrency.

    Example:
        >>> archiver = BoundedArchiver(gateway, max_concurrency=8)
        >>> async for outcome in archiver.archive(member_ids):
        ...     print(outcome.member_id, outcome.success)
    """

    def __init__(self, gateway: ListGateway, max_concurrency: int):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self.gateway = gateway
        self.max_concurrency = max_concurrency

    def _launch(self, member_id: str, in_flight: dict[asyncio.Task, str]) -> None:
        task = asyncio.create_task(
            self.gateway.set_archived(member_id), name=f"archive:{member_id}"
        )
        in_flight[task] = member_id

    def _outcome(self, task: asyncio.Task, member_id: str) -> ArchiveOutcome:
        """Convert a finished task into exactly one outcome."""
        if task.cancelled():
            return ArchiveOutcome.fail(member_id, TaskJoinError(member_id))

        error = task.exception()
        if error is None:
            return ArchiveOutcome.ok(member_id)
        if isinstance(error, ArchiveError):
            return ArchiveOutcome.fail(member_id, error)
        return ArchiveOutcome.fail(member_id, TaskJoinError(member_id, error))

    async def archive(self, member_ids: Iterable[str]) -> AsyncIterator[ArchiveOutcome]:
        """Archive every id, yielding one outcome per id as requests finish.

        The returned iterator is lazy and single-use. Replacement requests
        are only launched while the consumer keeps pulling. If the consumer
        stops early (aclose / break), requests still in flight are
        cancelled; their members get no outcome.

        Args:
            member_ids: Distinct member ids; order is not preserved

        Yields:
            ArchiveOutcome per member, in completion order
        """
        pending = list(member_ids)
        window = min(self.max_concurrency, len(pending))
        in_flight: dict[asyncio.Task, str] = {}

        log_event(
            logger, logging.INFO, "Starting archive window",
            total=len(pending), window=window,
        )

        try:
            # Fill
            while pending and len(in_flight) < window:
                self._launch(pending.pop(), in_flight)

            # Drain and refill
            while in_flight:
                done, _ = await asyncio.wait(
                    in_flight.keys(), return_when=asyncio.FIRST_COMPLETED
                )
                for task in done:
                    member_id = in_flight.pop(task)
                    outcome = self._outcome(task, member_id)
                    if not outcome.success:
                        log_event(
                            logger, logging.WARNING, "Archive failed",
                            member_id=member_id, error=str(outcome.error),
                        )
                    yield outcome

                    if pending:
                        self._launch(pending.pop(), in_flight)
        finally:
            if in_flight:
                log_event(
                    logger, logging.WARNING, "Outcome stream closed early, cancelling in-flight archive requests",
                    cancelled=len(in_flight), never_started=len(pending),
                )
                for task in in_flight:
                    task.cancel()
                await asyncio.gather(*in_flight, return_exceptions=True)
