"""Bounded FIFO queue served by a background worker thread."""

from __future__ import annotations

import collections
import logging
import threading
from typing import Any, Callable, Deque

MAXIMUM_WORKING_QUEUE_LENGTH = 128

_log = logging.getLogger(__name__)


class Worker:
    """Runs ``do_work`` on a background thread for every queued entry, in order."""

    def __init__(self, queue_size: int, do_work: Callable[[Any], Any]) -> None:
        if queue_size < 1:
            raise ValueError("queue_size must be at least 1")
        self.capacity = min(queue_size, MAXIMUM_WORKING_QUEUE_LENGTH)
        self._do_work = do_work
        self._entries: Deque[Any] = collections.deque()
        self._lock = threading.Lock()
        self._not_full = threading.Condition(self._lock)
        self._not_empty = threading.Condition(self._lock)
        self._empty = threading.Condition(self._lock)
        self._stopping = False
        self._thread = threading.Thread(target=self._run, name="worker", daemon=True)
        self._thread.start()

    def add(self, entry: Any) -> None:
        """Append an entry, blocking while the queue is full."""
        with self._lock:
            if self._stopping:
                raise RuntimeError("worker has been stopped")
            while len(self._entries) >= self.capacity:
                self._not_full.wait()
            self._entries.append(entry)
            self._not_empty.notify()

    def _run(self) -> None:
        while True:
            with self._lock:
                while not self._entries and not self._stopping:
                    self._not_empty.wait()
                if self._stopping:
                    return
                entry = self._entries.popleft()
                self._not_full.notify()
                if not self._entries:
                    self._empty.notify_all()
            try:
                self._do_work(entry)
            except Exception:
                _log.exception("processing a queue entry failed")

    def stop(self) -> None:
        """Wait for the queue to drain, then end the worker thread."""
        with self._lock:
            if self._stopping:
                return
            while self._entries:
                self._empty.wait()
            self._stopping = True
            self._not_empty.notify_all()
        if threading.current_thread() is not self._thread:
            self._thread.join()

    def __enter__(self) -> "Worker":
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()