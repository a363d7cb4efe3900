"""
mngr - keeps a plugin directory in sync with the GitHub releases of its plugins.
"""

from .github.exceptions import (
    MngrError,
    InvalidUrlError,
    TransportError,
    RemoteError,
    UnauthorizedError,
    ParseError,
    NoReleaseError,
    NotRegisteredError,
    AlreadyRegisteredError,
    FileSystemError,
    StoreError,
)

__version__ = "0.1.0"

__all__ = [
    "MngrError",
    "InvalidUrlError",
    "TransportError",
    "RemoteError",
    "UnauthorizedError",
    "ParseError",
    "NoReleaseError",
    "NotRegisteredError",
    "AlreadyRegisteredError",
    "FileSystemError",
    "StoreError",
]
