"""GitHub releases client module."""

from .client import GitHubClient
from .exceptions import (
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
from .models import ReleaseListing, RepositoryRef
from .urls import parse_repository_url

__all__ = [
    "GitHubClient",
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
    "ReleaseListing",
    "RepositoryRef",
    "parse_repository_url",
]
