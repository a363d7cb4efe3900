"""
Custom exceptions for mngr.
"""


class MngrError(Exception):
    """Base exception for every recoverable mngr error."""

    def __init__(self, message: str = "", status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidUrlError(MngrError):
    """The given text is not a GitHub repository URL."""
    pass


class TransportError(MngrError):
    """Network-related errors (DNS, connection refused, broken transfer)."""
    pass


class RemoteError(MngrError):
    """GitHub answered with a non-2xx status code."""
    pass


class UnauthorizedError(RemoteError):
    """The configured token was rejected (401)."""
    pass


class ParseError(MngrError):
    """A response or file body is not the structured data we expect."""
    pass


class NoReleaseError(MngrError):
    """The repository has no release with a downloadable asset."""
    pass


class NotRegisteredError(MngrError):
    """No plugin matches the requested name or file name."""
    pass


class AlreadyRegisteredError(MngrError):
    """A plugin with the same name is already in the registry."""
    pass


class FileSystemError(MngrError):
    """Plugin directory missing, or deleting/writing an artifact failed."""
    pass


class StoreError(MngrError):
    """Loading or saving the registry file failed."""
    pass
