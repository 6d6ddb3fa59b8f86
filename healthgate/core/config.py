"""Settings for the health-check component.

Values are read from ``HEALTHGATE_*`` environment variables (or a ``.env``
file) and only supply defaults: callers embedding ``HealthCheck`` can still
pass explicit values.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from healthgate.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Health-check settings.

    Attributes:
        LISTEN_ADDRESS (str): ``host:port`` the HTTP listener binds to.
        CHECK_INTERVAL (float): Seconds between readiness evaluation passes.
        GRACE_PERIOD (float): Seconds allowed for graceful HTTP shutdown.
        LOG_LEVEL (str): Root log level for healthgate loggers.
        LOG_JSON (bool): Emit log records as JSON objects.
    """

    model_config = SettingsConfigDict(
        env_prefix="HEALTHGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    LISTEN_ADDRESS: str = "0.0.0.0:8080"
    CHECK_INTERVAL: float = Field(default=1.0, gt=0)
    GRACE_PERIOD: float = Field(default=1.0, gt=0)
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address.

    An empty host (``":8080"``) binds all interfaces.  IPv6 hosts may be
    bracketed (``"[::1]:8080"``).

    Args:
        address: The listen address.

    Returns:
        A ``(host, port)`` tuple.

    Raises:
        ConfigurationError: If the address has no port or the port is invalid.
    """
    host, sep, port_str = address.rpartition(":")
    if not sep:
        raise ConfigurationError(f"listen address {address!r} has no port")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]

    try:
        port = int(port_str)
    except ValueError:
        raise ConfigurationError(f"listen address {address!r} has an invalid port") from None

    if not 0 <= port <= 65535:
        raise ConfigurationError(f"listen address {address!r} port out of range")

    return host or "0.0.0.0", port


settings = Settings()
