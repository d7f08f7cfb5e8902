"""Throughput estimation from timestamped increments.

Hides the bucketing strategy used to turn a stream of token arrivals into a
tokens-per-second figure.
"""

from collections import deque
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MICROSECOND = timedelta(microseconds=1)

DEFAULT_INTERVAL = timedelta(milliseconds=100)


@dataclass
class Bucket:
    """Observations whose timestamps truncate to the same interval."""

    time: int  # truncated timestamp, microseconds since the epoch
    count: int


def _to_micros(timestamp: datetime | float) -> int:
    """Convert a datetime or epoch seconds to integer microseconds."""
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return (timestamp - _EPOCH) // _MICROSECOND
    return round(timestamp * 1_000_000)


class RateMeter:
    """Estimate a rate from observations coalesced into time buckets.

    Each observation is truncated to a multiple of ``interval``. Bursts that
    land in the same interval as the newest bucket only bump its counter, so
    memory grows with the number of distinct intervals seen rather than the
    number of raw events.

    Example:
        meter = RateMeter(interval=1.0)
        meter.observe(0.0, 3)
        meter.observe(2.0, 7)
        meter.rate()  # 5.0
    """

    def __init__(self, interval: timedelta | float = DEFAULT_INTERVAL) -> None:
        if isinstance(interval, timedelta):
            interval_us = interval // _MICROSECOND
        else:
            interval_us = round(interval * 1_000_000)
        if interval_us <= 0:
            raise ValueError(f"interval must be positive, got {interval!r}")

        self._interval_us = interval_us
        self._buckets: deque[Bucket] = deque()

    @property
    def interval(self) -> timedelta:
        """Truncation interval."""
        return timedelta(microseconds=self._interval_us)

    @property
    def buckets(self) -> list[Bucket]:
        """Snapshot of the buckets, oldest first."""
        return [Bucket(b.time, b.count) for b in self._buckets]

    @property
    def total(self) -> int:
        """Sum of every observed amount."""
        return sum(b.count for b in self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    def observe(self, timestamp: datetime | float, amount: int = 1) -> None:
        """Record ``amount`` units at ``timestamp``.

        Args:
            timestamp: Aware or naive (treated as UTC) datetime, or epoch seconds
            amount: Units observed
        """
        truncated = _to_micros(timestamp) // self._interval_us * self._interval_us

        # Late arrivals fold into the newest bucket to keep times increasing
        if self._buckets and self._buckets[-1].time >= truncated:
            self._buckets[-1].count += amount
            return

        self._buckets.append(Bucket(time=truncated, count=amount))

    def rate(self) -> float:
        """Units per second between the first and last bucket.

        Returns 0.0 until at least two buckets exist.
        """
        if len(self._buckets) < 2:
            return 0.0

        span = (self._buckets[-1].time - self._buckets[0].time) / 1_000_000
        if span <= 0:
            return 0.0
        return self.total / span

    def reset(self) -> None:
        """Forget every observation."""
        self._buckets.clear()
