"""Embedded liveness/readiness HTTP endpoint for long-running services."""

from healthgate.core.protocols import ReadinessProbe
from healthgate.core.sync import WaitGroup
from healthgate.lifecycle import HealthCheck, LifecycleState

__all__ = ["HealthCheck", "LifecycleState", "ReadinessProbe", "WaitGroup"]
