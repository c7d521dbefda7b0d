"""
Core Exceptions - Custom exception classes for vidplug.

This module defines the exception hierarchy used throughout the toolkit.
Every exception carries a ``kind`` tag so the host-facing layers can report
failures the way the media browser host expects (a kind plus a message).
"""

from typing import Any, List, Optional


class VidPlugError(Exception):
    """Base exception class for all vidplug-specific errors."""

    kind = "ScriptException"

    def __init__(self, message: str, details: Optional[Any] = None):
        """
        Initialize vidplug error.

        Args:
            message: Human-readable error message
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class ConfigurationError(VidPlugError):
    """Raised when the plugin configuration is missing or invalid."""

    kind = "ConfigError"

    def __init__(self, message: str, config_path: Optional[str] = None, details: Optional[Any] = None):
        """
        Initialize configuration error.

        Args:
            message: Error description
            config_path: Path to the problematic configuration file
            details: Additional error context
        """
        super().__init__(message, details)
        self.config_path = config_path


class NetworkError(VidPlugError):
    """Raised on transport failures and non-success HTTP statuses."""

    kind = "NetworkError"

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None, details: Optional[Any] = None):
        """
        Initialize network error.

        Args:
            message: Error description
            url: URL that caused the error
            status_code: HTTP status code if applicable
            details: Additional error context
        """
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


class APIError(VidPlugError):
    """Raised when a successful response carries a payload-level ``errors`` field."""

    kind = "APIError"

    def __init__(self, message: str, errors: Optional[Any] = None, url: Optional[str] = None):
        super().__init__(message, errors)
        self.errors = errors
        self.url = url


class GraphQLError(VidPlugError):
    """Raised by the raising GraphQL helpers when a query fails."""

    kind = "GraphQLError"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        errors: Optional[List[Any]] = None,
        operation_name: Optional[str] = None,
    ):
        """
        Initialize GraphQL error.

        Args:
            message: Error description
            code: GraphQL layer error code (e.g. ``GQL_ERROR``)
            errors: Raw GraphQL error objects returned by the server
            operation_name: Operation name for persisted queries
        """
        super().__init__(message, errors)
        self.code = code
        self.errors = errors
        self.operation_name = operation_name


class PluginError(VidPlugError):
    """Raised when a source plugin operation fails."""

    kind = "PluginError"

    def __init__(self, message: str, plugin_name: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, details)
        self.plugin_name = plugin_name


class AuthenticationError(VidPlugError):
    """Raised when the platform rejects or cannot issue credentials."""

    kind = "AuthenticationError"


class NotFoundError(VidPlugError):
    """Raised when requested content does not exist on the platform."""

    kind = "NotFoundError"


class InvalidDataError(VidPlugError):
    """Raised when a platform payload cannot be mapped into the host model."""

    kind = "InvalidDataError"


class ToolingError(VidPlugError):
    """Raised when a developer-workflow step (external CLI, file I/O) fails."""

    kind = "ToolingError"

    def __init__(self, message: str, command: Optional[str] = None, details: Optional[Any] = None):
        """
        Initialize tooling error.

        Args:
            message: Error description
            command: External command that failed, if any
            details: Captured stderr or other context
        """
        super().__init__(message, details)
        self.command = command


# Export all exception classes
__all__ = [
    "VidPlugError",
    "ConfigurationError",
    "NetworkError",
    "APIError",
    "GraphQLError",
    "PluginError",
    "AuthenticationError",
    "NotFoundError",
    "InvalidDataError",
    "ToolingError",
]
