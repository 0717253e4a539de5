"""
Cancellation and deadline handling for installer operations.

Every call that may block on a cluster or an external tool receives an
OperationContext. Calling check() between steps turns a cancelled or expired
context into an OperationCancelledError so the whole chain aborts with a
cancellation error rather than a validation error.
"""

import threading
import time
from typing import Optional

from lib.exceptions import OperationCancelledError, OperationTimeoutError


class OperationContext:
    """Cancellation flag plus an optional deadline for one installer run."""

    def __init__(self, timeout: Optional[float] = None) -> None:
        """
        Args:
            timeout: Seconds until the context expires (None for no deadline)
        """
        self._cancelled = threading.Event()
        self.timeout = timeout
        self.deadline = time.monotonic() + timeout if timeout else None

    def cancel(self) -> None:
        """Mark the operation as cancelled."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self, default: Optional[float] = None) -> Optional[float]:
        """Seconds left before the deadline, or default when there is none."""
        if self.deadline is None:
            return default
        left = max(self.deadline - time.monotonic(), 0.0)
        if default is not None:
            return min(left, default)
        return left

    def check(self, operation: str = "operation") -> None:
        """Raise if the context was cancelled or its deadline passed.

        Raises:
            OperationCancelledError: If cancel() was called
            OperationTimeoutError: If the deadline expired
        """
        if self.cancelled:
            raise OperationCancelledError(f"{operation} cancelled")
        if self.expired:
            raise OperationTimeoutError(f"{operation} timed out after {self.timeout}s")
