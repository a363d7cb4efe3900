"""Registry file management."""

import os
import tomllib
from pathlib import Path
from dataclasses import dataclass

import tomli_w

from .core.registry import Registry
from .github.exceptions import StoreError

__all__ = ['AppConfig', 'ConfigManager', 'DEFAULT_CONFIG_PATH']

DEFAULT_CONFIG_PATH = Path("mngr.toml")


@dataclass
class AppConfig:
    """Settings taken from the environment."""

    github_token: str = ""
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create config from environment variables."""
        return cls(
            github_token=os.getenv("MNGR_GITHUB_TOKEN", "").strip(),
            log_level=os.getenv("MNGR_LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
        )


class ConfigManager:
    """Loads and saves the registry as a TOML file."""

    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH):
        self.config_path = Path(config_path)

    def exists(self) -> bool:
        """Check if the registry file was already created."""
        return self.config_path.exists()

    def load(self) -> Registry | None:
        """Load the registry from the TOML file.

        Returns:
            The stored registry, or None if the file doesn't exist

        Raises:
            StoreError: If the file can't be read or has invalid content
        """
        if not self.exists():
            return None

        try:
            with open(self.config_path, 'rb') as f:
                data = tomllib.load(f)
        except OSError as e:
            raise StoreError(f"Failed to read '{self.config_path}': {e}")
        except tomllib.TOMLDecodeError as e:
            raise StoreError(f"Failed to parse elements written in '{self.config_path}': {e}")

        try:
            return Registry.from_dict(data)
        except KeyError as e:
            raise StoreError(f"Missing key {e} in '{self.config_path}'")
        except TypeError as e:
            raise StoreError(f"Invalid content in '{self.config_path}': {e}")

    def save(self, registry: Registry) -> None:
        """Save the registry.

        The content goes to a temporary sibling file first, which then replaces
        the registry file.

        Args:
            registry: Registry to save

        Raises:
            StoreError: If writing fails
        """
        tmp_path = self.config_path.with_name(self.config_path.name + ".tmp")
        try:
            with open(tmp_path, 'wb') as f:
                tomli_w.dump(registry.to_dict(), f)
            os.replace(tmp_path, self.config_path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise StoreError(f"Failed to save '{self.config_path}': {e}")

    def create(self) -> Registry:
        """Create a new registry file.

        Raises:
            StoreError: If the file already exists or can't be written
        """
        if self.exists():
            raise StoreError(f"Failed to create '{self.config_path}'. It already exists.")
        registry = Registry.new()
        self.save(registry)
        return registry

    def load_or_create(self) -> tuple[Registry, bool]:
        """Load the registry, or create it on first run.

        Returns:
            The registry and whether it was just created
        """
        registry = self.load()
        if registry is not None:
            return registry, False
        return self.create(), True
