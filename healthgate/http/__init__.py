"""HTTP surface of the health check."""

from healthgate.http.health_server import HEALTH_CHECK_PATH, READY_CHECK_PATH, HealthServer

__all__ = ["HEALTH_CHECK_PATH", "READY_CHECK_PATH", "HealthServer"]
