"""Fixed-interval polling with an optional deadline and cancel signal."""

import time
from threading import Event
from typing import Callable, Optional

from .exceptions import WaitCancelledError, WaitTimeoutError


class PollControl:
    """Decides whether a polling loop may sleep once more.

    With no ``timeout`` and no ``cancel`` the loop polls forever. When a
    cancel event is given and no explicit ``sleep`` is, sleeping waits on the
    event so that cancellation is observed immediately.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        cancel: Optional[Event] = None,
        sleep: Optional[Callable[[float], object]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.cancel = cancel
        self.clock = clock
        self.deadline = clock() + timeout if timeout is not None else None
        if sleep is None:
            sleep = cancel.wait if cancel is not None else time.sleep
        self.sleep = sleep

    def check(self, what: str) -> None:
        if self.cancel is not None and self.cancel.is_set():
            raise WaitCancelledError(f"cancelled while waiting for {what}")
        if self.deadline is not None and self.clock() >= self.deadline:
            raise WaitTimeoutError(f"timed out waiting for {what}")

    def pause(self, interval: float, what: str) -> None:
        """Sleep ``interval`` seconds (less if the deadline is closer)."""
        self.check(what)
        if self.deadline is not None:
            interval = max(0.0, min(interval, self.deadline - self.clock()))
        self.sleep(interval)
        if self.cancel is not None and self.cancel.is_set():
            raise WaitCancelledError(f"cancelled while waiting for {what}")
