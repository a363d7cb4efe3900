"""Repository URL grammar for GitHub."""

import re

from .exceptions import InvalidUrlError
from .models import RepositoryRef

__all__ = ['parse_repository_url', 'releases_endpoint', 'asset_download_url']

# Owner: 1-39 alphanumerics, single hyphens only between alphanumerics
_REPOSITORY_URL = re.compile(
    r"^https://github\.com/"
    r"(?P<owner>[A-Za-z0-9](?:[A-Za-z0-9]|-(?=[A-Za-z0-9])){0,38})/"
    r"(?P<repo>[^/\s?#]+?)"
    r"(?:\.git)?/?$"
)


def parse_repository_url(url: str) -> RepositoryRef:
    """
    Validate a repository URL and split it into owner and repository.

    :param url: Something like ``https://github.com/acme/widget.git``
    :return: The parsed reference
    :raises InvalidUrlError: If the URL doesn't match the GitHub repository shape
    """
    match = _REPOSITORY_URL.match(url.strip())
    if match is None:
        raise InvalidUrlError(f"Not a GitHub repository URL: {url!r}")
    return RepositoryRef(owner=match['owner'], repo=match['repo'])


def releases_endpoint(api_url: str, ref: RepositoryRef) -> str:
    """URL of the releases listing of ``ref``."""
    return f"{api_url.rstrip('/')}/repos/{ref.owner}/{ref.repo}/releases"


def asset_download_url(repository_url: str, version: str, file_name: str) -> str:
    """URL of a release asset, relative to the repository page."""
    return f"{repository_url.rstrip('/')}/releases/download/{version}/{file_name}"
