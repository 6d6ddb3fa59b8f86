"""ReadinessProbe protocol for pluggable readiness checks.

Each probe is supplied by the embedding application and answers a single
question: can this process currently handle work?  The evaluator calls it
on a fixed cadence without knowing the concrete type.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ReadinessProbe(Protocol):
    """Protocol for a single synchronous readiness check.

    Implementations must encode any failure to determine readiness as
    ``False``; the contract has no error channel.  Calls may block, and the
    evaluator runs them off the event loop.
    """

    def is_ready(self) -> bool:
        """Return whether the dependency behind this probe is ready."""
        ...
