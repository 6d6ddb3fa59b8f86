"""Protocols for the pluggable parts of the health check."""

from healthgate.core.protocols.readiness import ReadinessProbe

__all__ = ["ReadinessProbe"]
