"""Minimum-interval limiter for outbound chat messages"""

from dataclasses import dataclass


@dataclass
class ChatRateInfo:
    """Point-in-time view of the limiter state"""

    min_interval: float  # Seconds required between two chat sends
    elapsed: float  # Seconds accumulated since the last chat send
    sent: int  # Chat sends charged so far
    deferred: int  # Times a send had to wait for the interval


class ChatRateLimiter:
    """Spaces chat sends at least ``min_interval`` seconds apart.

    Time is not read from a clock. The owning worker advances the limiter
    with ``tick(dt)`` once per loop iteration, using its fixed sleep interval
    as ``dt``. A send that arrives too early is deferred by the caller, never
    dropped. The first send is always allowed.
    """

    def __init__(self, min_interval: float) -> None:
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = min_interval
        self._elapsed = min_interval
        self._sent = 0
        self._deferred = 0

    def tick(self, dt: float) -> None:
        # Saturate so a long idle period doesn't grow the float forever
        self._elapsed = min(self._elapsed + dt, self.min_interval)

    def ready(self) -> bool:
        return self._elapsed >= self.min_interval

    def record_sent(self) -> None:
        """Charge a chat send that actually reached the socket."""
        self._elapsed = 0.0
        self._sent += 1

    def record_deferred(self) -> None:
        self._deferred += 1

    def try_acquire(self) -> bool:
        """Charge one chat send if the interval has elapsed."""
        if not self.ready():
            self.record_deferred()
            return False
        self.record_sent()
        return True

    def snapshot(self) -> ChatRateInfo:
        return ChatRateInfo(
            min_interval=self.min_interval,
            elapsed=self._elapsed,
            sent=self._sent,
            deferred=self._deferred,
        )
