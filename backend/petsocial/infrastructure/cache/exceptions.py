"""
Cache Infrastructure Exceptions

Backend-specific exceptions for cache operations. They never cross the
``CacheBackend.get`` boundary; ``set``/``remove`` callers log and continue.
"""

from typing import Any, Dict, Optional


class CacheException(Exception):
    """Base exception for cache backend errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class CacheConnectionException(CacheException):
    """Raised when the cache backend cannot be reached or times out."""

    def __init__(
        self,
        message: str = "Cache backend connection failed",
        operation: Optional[str] = None,
        key: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        details = {}
        if operation:
            details["operation"] = operation
        if key:
            details["key"] = key
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(
            message=message, error_code="CACHE_CONNECTION_ERROR", details=details
        )
        if original_error:
            self.__cause__ = original_error


class CacheSerializationException(CacheException):
    """Raised when a value cannot be encoded for the remote backend."""

    def __init__(self, key: str, original_error: Optional[Exception] = None):
        details = {"key": key}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message=f"Failed to serialize cache value for '{key}'",
            error_code="CACHE_SERIALIZATION_ERROR",
            details=details,
        )
        if original_error:
            self.__cause__ = original_error


class CacheCircuitBreakerOpenException(CacheException):
    """Raised when the backend circuit breaker is open."""

    def __init__(
        self, message: str = "Cache circuit breaker is open - backend unavailable"
    ):
        super().__init__(
            message=message,
            error_code="CACHE_CIRCUIT_BREAKER_OPEN",
        )


class CacheConfigurationException(CacheException):
    """Raised when the backend cannot be built from configuration."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message=message, error_code="CACHE_CONFIGURATION_ERROR", details=details
        )
        if original_error:
            self.__cause__ = original_error
