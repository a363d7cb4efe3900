"""
Data models for GitHub API responses.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class RepositoryRef:
    """Owner and repository name parsed from a repository URL."""
    owner: str
    repo: str

    @property
    def url(self) -> str:
        """Canonical ``https://github.com/<owner>/<repo>`` form."""
        return f"https://github.com/{self.owner}/{self.repo}"


@dataclass
class ReleaseListing:
    """Response from the releases-listing endpoint."""
    payload: list[dict[str, Any]]
    rate_limit_remaining: int | None = None
