"""
Cancellation Tokens for Long-Running Computations.

Densification of a large multipolygon at a tight tolerance can visit
millions of recursion nodes. A ``CancellationToken`` lets the caller stop
such a computation from another thread, or bound it with a deadline.
"""

from dataclasses import dataclass, field
from typing import Optional
import threading
import time


class OperationCancelledError(Exception):
    """Raised when a computation is cancelled or runs past its deadline."""


@dataclass
class CancellationToken:
    """Cooperative cancellation signal with an optional deadline.

    Attributes
    ----------
    deadline : float, optional
        Absolute ``time.monotonic()`` value after which the token counts as
        cancelled.

    Examples
    --------
    >>> token = CancellationToken.with_timeout(2.0)
    >>> token.check()  # raises OperationCancelledError after 2 s
    """
    deadline: Optional[float] = None
    _event: threading.Event = field(default_factory=threading.Event, repr=False)

    @classmethod
    def with_timeout(cls, seconds: float) -> 'CancellationToken':
        """Create a token that expires ``seconds`` from now."""
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline, or None when there is none."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self) -> None:
        """Raise ``OperationCancelledError`` if the token has tripped."""
        if self._event.is_set():
            raise OperationCancelledError("Operation cancelled")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise OperationCancelledError("Operation exceeded its deadline")
