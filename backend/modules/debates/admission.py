"""
Admission control for new debates.

Two independent ceilings protect the store: debates created in the trailing
hour and debates ever created. Both are read from the repository.

Within one process, reserve() makes check-and-create atomic: an admitted
debate holds a reservation that counts against both ceilings until its
create has been persisted (or has failed). Across processes the
count-then-create sequence is still racy; the store gives no conditional
insert for it.
"""

import asyncio
import logging
import math
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Callable

from .exceptions import RateLimitExceededError
from .interfaces import IDebateRepository
from .models import AdmissionStatus

logger = logging.getLogger(__name__)

DEFAULT_HOURLY_LIMIT = 50
DEFAULT_TOTAL_LIMIT = 1000
HOURLY_WINDOW = timedelta(hours=1)


class AdmissionController:
    """Checks the hourly and lifetime debate ceilings before a debate starts."""

    def __init__(
        self,
        repository: IDebateRepository,
        hourly_limit: int = DEFAULT_HOURLY_LIMIT,
        total_limit: int = DEFAULT_TOTAL_LIMIT,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        if hourly_limit <= 0 or total_limit <= 0:
            raise ValueError("Admission limits must be positive")
        self._repository = repository
        self.hourly_limit = hourly_limit
        self.total_limit = total_limit
        self._clock = clock
        self._lock = asyncio.Lock()
        self._reserved = 0

    @property
    def reserved(self) -> int:
        """Number of admitted debates not yet released."""
        return self._reserved

    def usage(self) -> AdmissionStatus:
        """Current usage including reservations (remaining values floor at 0)."""
        hourly = self._repository.count_in_last_hour() + self._reserved
        total = self._repository.count_all() + self._reserved
        return AdmissionStatus(
            hourly_used=hourly,
            hourly_remaining=max(self.hourly_limit - hourly, 0),
            total_used=total,
            total_remaining=max(self.total_limit - total, 0),
        )

    async def check_admission(self) -> AdmissionStatus:
        """
        Check both ceilings without reserving a slot.

        Raises:
            RateLimitExceededError: If either ceiling is met or exceeded
        """
        async with self._lock:
            return self._check()

    @asynccontextmanager
    async def reserve(self) -> AsyncIterator[AdmissionStatus]:
        """
        Check both ceilings and hold a slot for the duration of the block.

        The slot is released on exit whether the block succeeded or not; a
        successful block has persisted its debate by then, so the repository
        count takes over.

        Raises:
            RateLimitExceededError: If either ceiling is met or exceeded
        """
        async with self._lock:
            status = self._check()
            self._reserved += 1
        try:
            yield status
        finally:
            async with self._lock:
                self._reserved -= 1

    def _check(self) -> AdmissionStatus:
        status = self.usage()

        if status.hourly_used >= self.hourly_limit:
            retry_after = self._hourly_retry_after()
            logger.warning(
                f"Hourly debate limit reached ({status.hourly_used}/{self.hourly_limit}), "
                f"retry after {retry_after}s"
            )
            raise RateLimitExceededError(
                limit_type="hourly",
                current=status.hourly_used,
                limit=self.hourly_limit,
                retry_after_seconds=retry_after,
            )

        if status.total_used >= self.total_limit:
            logger.warning(f"Total debate limit reached ({status.total_used}/{self.total_limit})")
            raise RateLimitExceededError(
                limit_type="total",
                current=status.total_used,
                limit=self.total_limit,
            )

        return status

    def _hourly_retry_after(self) -> int | None:
        """Seconds until the oldest debate in the window ages out, if known."""
        oldest = self._repository.oldest_created_in_last_hour()
        if oldest is None:
            return None
        if oldest.tzinfo is None:
            oldest = oldest.replace(tzinfo=timezone.utc)
        remaining = (oldest + HOURLY_WINDOW - self._clock()).total_seconds()
        return max(1, math.ceil(remaining))
