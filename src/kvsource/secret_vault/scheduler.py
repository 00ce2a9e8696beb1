"""Cancellable fixed-rate trigger for background refreshes."""

import threading
import time
from typing import Callable, Optional

from kvsource.common.exceptions import validation_error
from kvsource.logging import get_logger


logger = get_logger(__name__)


class PeriodicRefresher:
    """Run a callable on a daemon thread at a fixed rate.

    Firings are scheduled at ``start + n * interval`` on the monotonic clock,
    the first one ``interval`` after :meth:`start`. A run that overruns one or
    more periods does not trigger a burst of catch-up runs: the missed
    firings are coalesced and the next run happens at the next scheduled
    instant. Runs never overlap.

    Exceptions raised by the callable are logged and the schedule continues.

    Example:
        >>> refresher = PeriodicRefresher(operation.refresh, interval=60.0)
        >>> refresher.start()
        >>> ...
        >>> refresher.stop()
    """

    def __init__(
        self,
        target: Callable[[], object],
        interval: float,
        name: str = "kvsource-refresh",
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the refresher.

        Args:
            target: Callable invoked on every firing
            interval: Seconds between firings, must be positive
            name: Thread name
            clock: Monotonic clock, replaceable in tests
        """
        if interval <= 0:
            raise validation_error(
                "Refresh interval must be positive to schedule refreshes",
                field="interval",
                value=interval,
            )
        self._target = target
        self._interval = interval
        self._name = name
        self._clock = clock
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.runs = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "PeriodicRefresher":
        """Start the background thread. Starting twice is a no-op."""
        if self._thread is not None:
            return self
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        logger.info(
            "Scheduled periodic Key Vault refresh",
            extra={"interval_seconds": self._interval},
        )
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        """Cancel future firings and wait for the thread to exit.

        A run in progress is allowed to finish.

        Args:
            timeout: Seconds to wait for the thread, forever if None
        """
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _run(self) -> None:
        next_run = self._clock() + self._interval
        while not self._stop_event.wait(max(0.0, next_run - self._clock())):
            try:
                self._target()
            except Exception as exc:
                # refresh errors log their own traceback
                logger.warning(
                    "Scheduled Key Vault refresh failed; keeping previous snapshot",
                    extra={"error": str(exc)},
                )
            self.runs += 1

            next_run += self._interval
            now = self._clock()
            if next_run <= now:
                missed = int((now - next_run) // self._interval) + 1
                logger.warning(
                    "Key Vault refresh overran its interval",
                    extra={"missed_firings": missed},
                )
                next_run += missed * self._interval
