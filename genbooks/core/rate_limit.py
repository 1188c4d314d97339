import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass
class _Attempts:
    count: int = 0
    last_failure: float = 0.0


class LoginRateLimiter:
    """
    Tracks failed admin logins per client address.

    An address is locked out once it reaches `max_attempts` failures and stays
    locked until `lockout_seconds` have passed since its last failure. The
    tracker holds at most `capacity` addresses. Once a new address pushes it over
    capacity, expired entries are pruned, then the addresses with the oldest
    failures are evicted. Lookups through `is_allowed` do not count as use.
    """

    def __init__(
        self,
        max_attempts: int = 5,
        lockout_seconds: float = 15 * 60,
        capacity: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_attempts = max_attempts
        self.lockout_seconds = lockout_seconds
        self.capacity = capacity
        self._clock = clock
        self._attempts: "OrderedDict[str, _Attempts]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._attempts)

    def __contains__(self, address: str) -> bool:
        return address in self._attempts

    @property
    def retry_after(self) -> int:
        return int(self.lockout_seconds)

    def failures(self, address: str) -> int:
        entry = self._attempts.get(address)
        return entry.count if entry else 0

    def _expired(self, entry: _Attempts, now: float) -> bool:
        return now - entry.last_failure > self.lockout_seconds

    def is_allowed(self, address: str) -> bool:
        entry = self._attempts.get(address)
        if entry is None:
            return True
        if self._expired(entry, self._clock()):
            # window is over; the entry stays until the next success or prune
            entry.count = 0
        return entry.count < self.max_attempts

    def record_attempt(self, address: str, success: bool) -> None:
        if success:
            self._attempts.pop(address, None)
            return

        now = self._clock()
        entry = self._attempts.get(address)
        if entry is None:
            self._attempts[address] = _Attempts(count=1, last_failure=now)
            self._evict(now)
            return

        if self._expired(entry, now):
            entry.count = 0
        entry.count += 1
        entry.last_failure = now
        self._attempts.move_to_end(address)

    def _evict(self, now: float) -> None:
        if len(self._attempts) <= self.capacity:
            return
        for address in [a for a, e in self._attempts.items() if self._expired(e, now)]:
            del self._attempts[address]
        while len(self._attempts) > self.capacity:
            address, _ = self._attempts.popitem(last=False)
            logger.debug(f"Evicted login tracker entry for {address}")
