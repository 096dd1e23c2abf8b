"""Bounded worker pool with a fixed per-unit throttle."""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Iterable, List, TypeVar

from ..models.migration import DEFAULT_CONCURRENCY, DEFAULT_DELAY_SECONDS

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

MIN_WIDTH = 1
MAX_WIDTH = 5


def clamp_width(requested: Any) -> int:
    """Clamp a requested pool width into [MIN_WIDTH, MAX_WIDTH]."""
    try:
        width = int(requested)
    except (TypeError, ValueError):
        logger.warning(f"Invalid concurrency {requested!r}, using {DEFAULT_CONCURRENCY}")
        width = DEFAULT_CONCURRENCY
    return max(MIN_WIDTH, min(MAX_WIDTH, width))


class ConcurrencyController:
    """
    Runs units of work through at most ``width`` worker threads.

    After a unit finishes, successfully or not, its thread sleeps
    ``delay_seconds`` before taking the next unit. ``run`` returns only once
    every dispatched unit has finished.
    """

    def __init__(
        self,
        width: Any = DEFAULT_CONCURRENCY,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize the controller.

        Args:
            width: Requested number of concurrent units (clamped to 1..5)
            delay_seconds: Fixed pause held by a slot after each unit
            sleep: Sleep function (injectable for tests)
        """
        self.width = clamp_width(width)
        self.delay_seconds = max(0.0, float(delay_seconds))
        self._sleep = sleep

    def run(self, units: Iterable[T], worker: Callable[[T], R]) -> List[R]:
        """
        Run ``worker`` over ``units`` and wait for all of them.

        Returns:
            Worker results in dispatch order. An exception raised by a worker
            is re-raised after every unit has finished.
        """
        slots = threading.BoundedSemaphore(self.width)
        futures: List[Future] = []

        with ThreadPoolExecutor(max_workers=self.width, thread_name_prefix="migrate") as executor:
            for unit in units:
                slots.acquire()
                try:
                    future = executor.submit(self._run_unit, worker, unit)
                except BaseException:
                    slots.release()
                    raise
                future.add_done_callback(lambda _f: slots.release())
                futures.append(future)

            wait(futures)

        logger.debug(f"Joined {len(futures)} units (width={self.width})")
        return [f.result() for f in futures]

    def _run_unit(self, worker: Callable[[T], R], unit: T) -> R:
        try:
            return worker(unit)
        finally:
            if self.delay_seconds:
                self._sleep(self.delay_seconds)
