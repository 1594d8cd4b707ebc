"""Barrier that waits for the last generation's worker output to reach disk.

The engine reports the end of the run before its workers have finished
writing the final generation's files. Generation 0 is assumed to have
produced the same number of files as every other generation, so the run is
complete once the last generation's directory holds as many entries as the
first one.
"""

import logging
import threading
import time
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class BarrierTimeoutError(TimeoutError):
    """Raised when the barrier is not satisfied within the caller's timeout."""

    pass


class BarrierCancelledError(Exception):
    """Raised when the caller cancels a waiting barrier."""

    pass


def count_entries(path: Union[str, Path]) -> int:
    """Return the number of entries in a directory, 0 if it does not exist."""
    path = Path(path)
    if not path.is_dir():
        return 0
    return sum(1 for _ in path.iterdir())


def await_completion(
    first_gen_dir: Union[str, Path],
    last_gen_dir: Union[str, Path],
    poll_interval: float = 1.0,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
) -> int:
    """Block until both generation directories hold the same number of entries.

    Without a timeout or cancel_event this waits indefinitely.

    Args:
        first_gen_dir: Output directory of generation 0
        last_gen_dir: Output directory of the final generation
        poll_interval: Seconds between checks
        timeout: Maximum seconds to wait, None for no bound
        cancel_event: Event that aborts the wait when set

    Returns:
        Number of unsatisfied polls before the counts matched

    Raises:
        BarrierTimeoutError: If timeout elapses first
        BarrierCancelledError: If cancel_event is set first
    """
    first_gen_dir = Path(first_gen_dir)
    last_gen_dir = Path(last_gen_dir)
    deadline = None if timeout is None else time.monotonic() + timeout

    polls = 0
    while True:
        expected = count_entries(first_gen_dir)
        actual = count_entries(last_gen_dir)
        if actual == expected:
            return polls

        if deadline is not None and time.monotonic() >= deadline:
            raise BarrierTimeoutError(
                f"{last_gen_dir} holds {actual} of {expected} entries after {timeout}s"
            )

        polls += 1
        logger.info(
            f"Waiting for all results to be written to disk ({actual}/{expected})."
        )

        wait = poll_interval
        if deadline is not None:
            wait = max(0.0, min(wait, deadline - time.monotonic()))

        if cancel_event is not None:
            if cancel_event.wait(wait):
                raise BarrierCancelledError(f"Cancelled while waiting on {last_gen_dir}")
        else:
            time.sleep(wait)


class CompletionCounter:
    """Counting handle that workers signal on instead of polling the disk.

    Usage:
        counter = CompletionCounter()
        counter.expect(len(tasks))
        # in each worker, after its files are flushed:
        counter.mark_done()
        # in the controller:
        counter.wait(timeout=600)
    """

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._expected = 0
        self._done = 0

    @property
    def pending(self) -> int:
        with self._condition:
            return self._expected - self._done

    def expect(self, count: int = 1) -> None:
        """Register tasks that will signal completion."""
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        with self._condition:
            self._expected += count

    def mark_done(self) -> None:
        """Signal that one task has flushed its output."""
        with self._condition:
            if self._done >= self._expected:
                raise RuntimeError("mark_done() called more often than expected")
            self._done += 1
            if self._done == self._expected:
                self._condition.notify_all()

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until every expected task has signalled.

        Raises:
            BarrierTimeoutError: If timeout elapses first
        """
        with self._condition:
            finished = self._condition.wait_for(
                lambda: self._done >= self._expected, timeout=timeout
            )
            if not finished:
                raise BarrierTimeoutError(
                    f"{self._expected - self._done} of {self._expected} tasks still pending"
                )
