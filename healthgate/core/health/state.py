"""Lock-guarded readiness flag shared by the evaluator and HTTP handlers."""

import threading


class ReadinessState:
    """A single boolean with one writer and any number of readers.

    Starts as not ready.  Both reads and writes hold the same lock, so a
    reader always observes the last fully-written value; callers on other
    threads (in-process ``is_ready()`` users) get the same guarantee as the
    ``/ready-check`` handler.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ready = False

    def get(self) -> bool:
        with self._lock:
            return self._ready

    def set(self, ready: bool) -> None:
        with self._lock:
            self._ready = ready
