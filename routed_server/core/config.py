"""
routed_server/core/config.py
Configuration management using Pydantic Settings
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Literal, Optional, Tuple


def parse_address(addr: str) -> Tuple[str, int]:
    """
    Split a ``host:port`` listen address.

    An empty host (``":8080"``) means all interfaces. IPv6 hosts must be
    bracketed (``"[::1]:8080"``).

    Raises:
        ValueError: If the port is missing or not in 0-65535
    """
    host, sep, port = addr.rpartition(":")
    if not sep:
        raise ValueError(f"missing port in address {addr!r}")

    if host.startswith("["):
        if not host.endswith("]"):
            raise ValueError(f"unterminated IPv6 host in address {addr!r}")
        host = host[1:-1]
    elif ":" in host:
        raise ValueError(f"IPv6 host must be bracketed in address {addr!r}")

    if not port.isdigit():
        raise ValueError(f"invalid port {port!r} in address {addr!r}")
    port_number = int(port)
    if port_number > 65535:
        raise ValueError(f"port {port_number} out of range in address {addr!r}")

    return host, port_number


class Settings(BaseSettings):
    """
    Server configuration
    Environment variables can override these defaults
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ========================================================================
    # Application Settings
    # ========================================================================
    APP_NAME: str = "routed-server"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # ========================================================================
    # HTTP Settings
    # ========================================================================
    HTTP_ADDR: str = ":8080"

    # ========================================================================
    # Lifecycle Settings (seconds)
    # ========================================================================
    START_TIMEOUT: float = Field(default=15.0, gt=0)
    STOP_TIMEOUT: float = Field(default=15.0, gt=0)

    # ========================================================================
    # Logging Settings
    # ========================================================================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"

    # ========================================================================
    # Validators
    # ========================================================================

    @field_validator("HTTP_ADDR")
    def validate_http_addr(cls, v):
        """Reject addresses the server could never bind"""
        parse_address(v)
        return v

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def http_host(self) -> str:
        return parse_address(self.HTTP_ADDR)[0]

    @property
    def http_port(self) -> int:
        return parse_address(self.HTTP_ADDR)[1]


# ============================================================================
# Singleton Pattern - Global Settings Instance
# ============================================================================

_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or create settings instance (Singleton)
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


# ============================================================================
# Export
# ============================================================================

__all__ = ["Settings", "get_settings", "parse_address"]
