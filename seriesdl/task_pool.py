"""A fixed-size pool of worker threads that run queued download tasks."""

from __future__ import annotations

import functools
import logging
import os
import queue
import threading
from typing import Callable

DEFAULT_POOL_SIZE = 5
_MAX_POOL_SIZE = 0xFFFF

_log = logging.getLogger(__name__)
_STOP = object()


def pool_size_from_env(value: str | None) -> int:
    """Turn a MAX_CONCURRENT_DOWNLOADS setting into a pool size.

    Missing or empty values give the default; values with non-digit characters
    are reported and also give the default. Values too large for 16 bits raise
    ``ValueError``.
    """
    if not value:
        return DEFAULT_POOL_SIZE
    if not all(char.isdigit() for char in value):
        print("Only digit are allowed in MAX_CONCURRENT_DOWNLOADS")
        return DEFAULT_POOL_SIZE
    size = int(value)
    if size > _MAX_POOL_SIZE:
        raise ValueError(f"pool size {value!r} is out of range")
    return size


class TaskPool:
    """Run callables on a fixed number of worker threads."""

    def __init__(self, size: int = DEFAULT_POOL_SIZE) -> None:
        if size < 1:
            raise ValueError("pool size must be at least 1")
        self._tasks: queue.Queue = queue.Queue(maxsize=size)
        self._closed = False
        self._close_lock = threading.Lock()
        self._workers = [
            threading.Thread(target=self._work, name=f"task-pool-{n}", daemon=True)
            for n in range(size)
        ]
        for worker in self._workers:
            worker.start()

    def _work(self) -> None:
        while True:
            task = self._tasks.get()
            try:
                if task is _STOP:
                    return
                task()
            except Exception:
                _log.exception("task failed")
            finally:
                self._tasks.task_done()

    def add_task(self, task: Callable[[], object]) -> None:
        """Queue ``task``; blocks while the queue is full."""
        if self._closed:
            raise RuntimeError("task pool is closed")
        self._tasks.put(task)

    def wait(self) -> None:
        """Block until every queued task has finished."""
        self._tasks.join()

    def close(self) -> None:
        """Finish queued work and stop the workers."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        for _ in self._workers:
            self._tasks.put(_STOP)
        for worker in self._workers:
            worker.join()

    def __enter__(self) -> "TaskPool":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@functools.lru_cache(maxsize=None)
def get_pool() -> TaskPool:
    """Return the process-wide pool sized from MAX_CONCURRENT_DOWNLOADS."""
    return TaskPool(pool_size_from_env(os.environ.get("MAX_CONCURRENT_DOWNLOADS")))