"""Session state shared by the orchestrator and the command modes."""

from dataclasses import dataclass

from .artifacts import ArtifactFileManager
from .registry import Registry
from ..config import ConfigManager
from ..github.client import GitHubClient

__all__ = ['MngrContext']


@dataclass
class MngrContext:
    """
    Everything one interactive session works on.

    :ivar registry: The registry loaded at startup, mutated in place
    :ivar client: GitHub client used for listings and downloads
    :ivar artifacts: File operations in the plugin directory
    :ivar store: Where the registry is persisted, None keeps it in memory only
    """
    registry: Registry
    client: GitHubClient
    artifacts: ArtifactFileManager
    store: ConfigManager | None = None

    def persist(self) -> None:
        """
        Save the registry.

        :raises StoreError: If saving fails
        """
        if self.store is not None:
            self.store.save(self.registry)
