"""Fake readiness probes for testing HealthCheck consumers."""

import threading


class FakeReadinessProbe:
    """In-memory probe satisfying the ``ReadinessProbe`` protocol.

    Returns a settable canned answer and records how often it was asked.
    """

    def __init__(self, ready: bool = True) -> None:
        self._ready = ready
        self._lock = threading.Lock()
        self.call_count = 0

    def is_ready(self) -> bool:
        with self._lock:
            self.call_count += 1
            return self._ready

    # -- test helpers --------------------------------------------------------

    def set_ready(self, ready: bool) -> None:
        """Change the answer returned by subsequent ``is_ready`` calls."""
        with self._lock:
            self._ready = ready


class RaisingReadinessProbe:
    """Probe that violates the contract by raising on every call."""

    def __init__(self, exc: Exception | None = None) -> None:
        self._exc = exc or RuntimeError("probe exploded")
        self.call_count = 0

    def is_ready(self) -> bool:
        self.call_count += 1
        raise self._exc
