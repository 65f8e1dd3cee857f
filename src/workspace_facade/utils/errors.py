"""Custom exceptions for the Workspace facade.

This module provides structured error handling with specific exception types
for different failure scenarios. All exceptions inherit from WorkspaceFacadeError.
Provider errors (googleapiclient HttpError, google-auth RefreshError) are not
wrapped by the facades; they propagate as-is and only the MCP tool layer
converts them with handle_http_error.
"""
from typing import Optional, Any


class WorkspaceFacadeError(Exception):
    """Base exception for all workspace-facade errors.

    Attributes:
        message: Human-readable error description.
        file_id: Optional file ID related to the error.
    """

    def __init__(self, message: str, file_id: Optional[str] = None) -> None:
        self.message = message
        self.file_id = file_id
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the error message, optionally including file ID."""
        if self.file_id:
            return f"{self.message} (file: {self.file_id})"
        return self.message


class AuthenticationError(WorkspaceFacadeError):
    """Raised when authentication fails or no usable token is installed."""
    pass


class AuthorizationRequiredError(AuthenticationError):
    """Raised when the user has to visit the authorization URL first."""

    def __init__(self, auth_url: str) -> None:
        self.auth_url = auth_url
        super().__init__(f"Authorization required. Open this URL to grant access: {auth_url}")


class ConnectionNotConfiguredError(WorkspaceFacadeError):
    """Raised when a connection is used before create_connection()."""
    pass


class CredentialBlobError(WorkspaceFacadeError, ValueError):
    """Raised when a persisted credential blob cannot be deserialized."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.path = path
        if path:
            message = f"{message} ({path})"
        super().__init__(message)


class FileNotFoundError(WorkspaceFacadeError):
    """Raised when a requested file doesn't exist or was deleted."""
    pass


class PermissionDeniedError(WorkspaceFacadeError):
    """Raised when access to a file is denied."""
    pass


class QuotaExceededError(WorkspaceFacadeError):
    """Raised when API rate limit or quota is exceeded."""
    pass


class DriveValidationError(WorkspaceFacadeError):
    """Raised when a Drive pre-flight check fails before any mutating call."""
    pass


class ShortcutTargetMissingError(DriveValidationError):
    """Raised when a shortcut does not point at any target."""

    def __init__(self, file_id: str) -> None:
        super().__init__("Shortcut has no target to resolve", file_id)


class TrashedSourceError(DriveValidationError):
    """Raised when the source of a copy is in the trash."""

    def __init__(self, file_id: str) -> None:
        super().__init__("Source file is in the trash and cannot be copied", file_id)


class NotCopyableError(DriveValidationError):
    """Raised when the caller lacks the copy capability on the source."""

    def __init__(self, file_id: str) -> None:
        super().__init__("Source file cannot be copied with the current account", file_id)


class InvalidDestinationError(DriveValidationError):
    """Raised when the copy destination is not a usable folder."""
    pass


class InvalidRoleError(WorkspaceFacadeError):
    """Raised when an unsupported permission role is requested."""

    def __init__(self, role: str, supported: tuple) -> None:
        self.role = role
        self.supported = supported
        message = f"Unsupported role '{role}'. Supported: {', '.join(supported)}"
        super().__init__(message)


class EventRangeError(WorkspaceFacadeError):
    """Raised when a calendar event ends before it starts."""
    pass


class ScriptExecutionError(WorkspaceFacadeError):
    """Raised when an Apps Script function reports an error.

    Attributes:
        error_type: The script error type reported by the API, if any.
        stack_trace: List of (function, line number) pairs from the script.
    """

    def __init__(
        self,
        message: str,
        error_type: Optional[str] = None,
        stack_trace: Optional[list[tuple[str, int]]] = None,
    ) -> None:
        self.error_type = error_type
        self.stack_trace = stack_trace or []
        super().__init__(message)


def handle_http_error(error: Any, file_id: Optional[str] = None) -> WorkspaceFacadeError:
    """Convert googleapiclient HttpError to a specific exception.

    Args:
        error: The HttpError from googleapiclient.
        file_id: Optional file ID for context.

    Returns:
        An appropriate WorkspaceFacadeError subclass.
    """
    try:
        status = error.resp.status
    except AttributeError:
        return WorkspaceFacadeError(f"API error: {str(error)}", file_id)

    if status == 401:
        return AuthenticationError(
            "Authentication failed. Run check_google_token to re-authorize.",
            file_id
        )
    elif status == 403:
        return PermissionDeniedError(
            "Access denied. Check file sharing settings or request access.",
            file_id
        )
    elif status == 404:
        return FileNotFoundError(
            "File not found. It may have been deleted or moved.",
            file_id
        )
    elif status == 429:
        return QuotaExceededError(
            "API quota exceeded. Please wait a moment and try again.",
            file_id
        )
    else:
        return WorkspaceFacadeError(f"API error (HTTP {status}): {str(error)}", file_id)


def format_error(action: str, error: Exception) -> str:
    """Format an error message consistently.

    Args:
        action: The action that failed (e.g., "Upload", "Copy file").
        error: The exception that occurred.

    Returns:
        Formatted error string.
    """
    if isinstance(error, WorkspaceFacadeError):
        return f"{action} failed: {error.message}"
    return f"{action} failed: {str(error)}"
