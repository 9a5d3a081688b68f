"""
routed_server/core/exceptions.py
Custom exceptions for the HTTP service
"""

from typing import Optional


class ServiceException(Exception):
    """Base exception for all service errors"""

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: Optional[dict] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for logging"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


# ============================================================================
# Configuration Exceptions (fatal at startup)
# ============================================================================

class ConfigurationException(ServiceException):
    """Invalid application wiring detected before serving begins"""


class DuplicateRouteException(ConfigurationException):
    """Two routes declare the same pattern"""

    def __init__(self, pattern: str, existing: str, duplicate: str):
        super().__init__(
            message=(
                f"Pattern '{pattern}' is already registered by {existing}; "
                f"cannot register {duplicate}"
            ),
            error_code="DUPLICATE_ROUTE",
            details={"pattern": pattern, "existing": existing, "duplicate": duplicate}
        )


class ConstructionException(ConfigurationException):
    """A component constructor failed while building the application"""

    def __init__(self, component: str, reason: str):
        super().__init__(
            message=f"Failed to construct '{component}': {reason}",
            error_code="CONSTRUCTION_FAILED",
            details={"component": component, "reason": reason}
        )


# ============================================================================
# Server Exceptions
# ============================================================================

class BindException(ServiceException):
    """Listening socket could not be bound"""

    def __init__(self, address: str, reason: str):
        super().__init__(
            message=f"Cannot listen on '{address}': {reason}",
            error_code="BIND_FAILED",
            details={"address": address, "reason": reason}
        )


class ServerCrashedException(ServiceException):
    """Serving loop ended before stop was requested"""

    def __init__(self, address: str, reason: str):
        super().__init__(
            message=f"Server on '{address}' stopped serving: {reason}",
            error_code="SERVER_CRASHED",
            details={"address": address, "reason": reason}
        )


class ServerStateException(ServiceException):
    """Lifecycle transition not allowed from the current state"""

    def __init__(self, current: str, attempted: str):
        super().__init__(
            message=f"Cannot {attempted} server in state '{current}'",
            error_code="INVALID_SERVER_STATE",
            details={"current": current, "attempted": attempted}
        )


# ============================================================================
# Lifecycle Exceptions
# ============================================================================

class StartTimeoutException(ServiceException):
    """Start hooks did not finish before the deadline"""

    def __init__(self, timeout_seconds: float):
        super().__init__(
            message=f"Start hooks did not finish within {timeout_seconds} seconds",
            error_code="START_TIMEOUT",
            details={"timeout_seconds": timeout_seconds}
        )


class ShutdownTimeoutException(ServiceException):
    """In-flight work did not drain before the stop deadline"""

    def __init__(self, timeout_seconds: float):
        super().__init__(
            message=f"Shutdown did not complete within {timeout_seconds} seconds",
            error_code="SHUTDOWN_TIMEOUT",
            details={"timeout_seconds": timeout_seconds}
        )


# ============================================================================
# Export
# ============================================================================

__all__ = [
    "ServiceException",
    "ConfigurationException",
    "DuplicateRouteException",
    "ConstructionException",
    "BindException",
    "ServerCrashedException",
    "ServerStateException",
    "StartTimeoutException",
    "ShutdownTimeoutException",
]
