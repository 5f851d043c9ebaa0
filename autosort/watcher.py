# autosort/watcher.py
"""Watchdog integration: turn filesystem events into FileEvents and dispatch them on one thread."""

import os
import queue
import threading
import time

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from autosort.models import EventOp, FileEvent

# Minimum seconds between queuing two modify events for the same path
DEFAULT_DEDUP_WINDOW = 5.0

_STOP = object()


class WorkflowEventHandler(FileSystemEventHandler):
    """
    Enqueue create/write events for regular files; deletions are ignored.

    Only modify bursts are deduplicated; every create reaches the queue.
    """

    def __init__(self, events: queue.Queue, dedup_window: float = DEFAULT_DEDUP_WINDOW):
        self._events = events
        self._dedup_window = dedup_window
        self._recent: dict[str, float] = {}
        self._lock = threading.Lock()

    def on_created(self, event):
        if not event.is_directory:
            self._enqueue(event.src_path, EventOp.CREATE)

    def on_modified(self, event):
        if not event.is_directory:
            self._enqueue(event.src_path, EventOp.WRITE)

    def on_moved(self, event):
        if not event.is_directory:
            self._enqueue(event.dest_path, EventOp.CREATE)

    def _enqueue(self, path, op: EventOp):
        file_path = os.path.normpath(os.fsdecode(path))
        if op != EventOp.WRITE:
            # A create is always a new file, even at a recently used path
            with self._lock:
                self._recent.pop(file_path, None)
            self._events.put(FileEvent(file_path, op))
            return

        # Deduplicate bursts: skip if this path was modified within the window
        with self._lock:
            now = time.monotonic()
            last = self._recent.get(file_path)
            if last is not None and now - last < self._dedup_window:
                return
            self._recent[file_path] = now

            cutoff = now - self._dedup_window * 2
            self._recent = {k: v for k, v in self._recent.items() if v > cutoff}

        self._events.put(FileEvent(file_path, op))


class WorkflowWatcher:
    """
    Owns the watchdog observer and the dispatch thread.

    The observer thread only enqueues; a single dispatch thread drains the
    queue and hands each event to the workflow manager in arrival order.
    """

    def __init__(
        self,
        manager,
        paths: list[str],
        recursive: bool = False,
        logger=None,
        settle_delay: float = 1.0,
        dedup_window: float = DEFAULT_DEDUP_WINDOW,
    ):
        self._manager = manager
        self._paths = list(paths)
        self._recursive = recursive
        self._logger = logger
        self._settle_delay = settle_delay
        self.events: queue.Queue = queue.Queue()
        self.handler = WorkflowEventHandler(self.events, dedup_window)
        self._observer = None
        self._thread = None

    def start(self):
        self._observer = Observer()
        for path in self._paths:
            self._observer.schedule(self.handler, path, recursive=self._recursive)
        self._thread = threading.Thread(target=self._run, name="autosort-dispatch", daemon=True)
        self._thread.start()
        self._observer.start()

    def stop(self):
        """Stop watching; the event being processed, if any, finishes first."""
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        if self._thread is not None:
            self.events.put(_STOP)
            self._thread.join()
            self._thread = None

    def _run(self):
        while True:
            event = self.events.get()
            if event is _STOP:
                return
            self.dispatch(event)

    def dispatch(self, event: FileEvent):
        """Process one event; failures are logged and never end the loop."""
        if self._settle_delay > 0:
            time.sleep(self._settle_delay)
        try:
            _, error = self._manager.process_event(event)
        except Exception as e:
            if self._logger:
                self._logger.log_error(event.path, f"{type(e).__name__}: {e}")
            return
        if error is not None and self._logger:
            self._logger.log_error(event.path, str(error))
