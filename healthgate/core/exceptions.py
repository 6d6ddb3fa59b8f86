"""Exception taxonomy for the health-check component."""


class HealthGateError(Exception):
    """Base class for every error raised by healthgate."""


class ConfigurationError(HealthGateError):
    """Raised when a setting (e.g. the listen address) cannot be parsed."""


class LifecycleError(HealthGateError):
    """Raised when an operation is called in the wrong lifecycle state."""


class ProbeRegistrationError(LifecycleError):
    """Raised when a probe is registered after the evaluation loop has started.

    The probe list is read without locking once the loop runs, so late
    registration is a precondition violation rather than a silent no-op.
    """


class ShutdownTimeoutError(HealthGateError):
    """Raised when the listener does not drain within the grace period.

    Non-fatal: the shutdown watcher logs it and proceeds.
    """

    def __init__(self, grace_period: float):
        """Initialize with the grace period that was exceeded.

        Args:
            grace_period: The grace period in seconds.
        """
        self.grace_period = grace_period
        super().__init__(f"HTTP listener did not shut down within {grace_period:.3f}s")


class ListenerError(HealthGateError):
    """Raised when the HTTP listener terminates for a reason other than shutdown.

    Fatal: the health surface silently disappearing is worse than crashing.
    """
