"""
Plugin registry: the name -> record mapping plus session metadata.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Any, Iterator

from .parser import ReleaseRecord

__all__ = ['PluginRecord', 'Registry']


@dataclass
class PluginRecord:
    """The last release the registry knows about for one artifact."""
    name: str
    version: str
    introduced_at: str
    file_name: str
    repository_url: str
    pre_release: bool = False
    description: str | None = None

    @classmethod
    def from_release(cls, release: ReleaseRecord) -> "PluginRecord":
        """Create a record from a parsed release."""
        return cls(
            name=release.name,
            version=release.version,
            introduced_at=release.created_at.isoformat(),
            file_name=release.file_name,
            repository_url=release.repository_url,
            pre_release=release.pre_release,
            description=release.body,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PluginRecord":
        """
        Create a record from its stored form.

        :param data: One ``[plugins.<name>]`` table
        :raises KeyError: If a required key is missing
        """
        return cls(
            name=str(data['name']),
            version=str(data['version']),
            introduced_at=str(data['introduced_date']),
            file_name=str(data['file_name']),
            repository_url=str(data['repository_url']),
            pre_release=bool(data.get('pre_release', False)),
            description=data.get('description') or None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Stored form of the record, TOML has no null so empty fields are left out."""
        data: dict[str, Any] = {
            'name': self.name,
            'version': self.version,
            'introduced_date': self.introduced_at,
            'pre_release': self.pre_release,
            'file_name': self.file_name,
            'repository_url': self.repository_url,
        }
        if self.description:
            data['description'] = self.description
        return data


@dataclass
class Registry:
    """
    Registered plugins keyed by artifact name.

    A name always maps to exactly one record: :meth:`insert` overwrites.
    """
    id: str
    created_at: str
    api_token: str = ""
    plugins: dict[str, PluginRecord] = field(default_factory=dict)

    @classmethod
    def new(cls, api_token: str = "") -> "Registry":
        """Create an empty registry with a fresh identifier."""
        return cls(
            id=str(uuid.uuid4()),
            created_at=datetime.now(UTC).isoformat(),
            api_token=api_token,
        )

    def __len__(self) -> int:
        return len(self.plugins)

    def __contains__(self, name: object) -> bool:
        return name in self.plugins

    def __iter__(self) -> Iterator[PluginRecord]:
        return iter(self.records())

    def names(self) -> list[str]:
        return list(self.plugins)

    def records(self) -> list[PluginRecord]:
        return list(self.plugins.values())

    def get(self, name: str) -> PluginRecord | None:
        return self.plugins.get(name)

    def insert(self, name: str, record: PluginRecord) -> None:
        """Store ``record`` under ``name``, replacing any previous record."""
        self.plugins[name] = record

    def remove(self, name: str) -> PluginRecord | None:
        """Remove a record by artifact name."""
        return self.plugins.pop(name, None)

    def remove_where_file_name_equals(self, file_name: str) -> PluginRecord | None:
        """
        Remove the first record whose artifact file is ``file_name``.

        Only one record is removed, even if more records share the file name.
        """
        for name, record in self.plugins.items():
            if record.file_name == file_name:
                del self.plugins[name]
                return record
        return None

    def names_without_pre_release(self) -> set[str]:
        """Names whose recorded release is not a pre-release."""
        return {name for name, record in self.plugins.items() if not record.pre_release}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Registry":
        """
        Create a registry from the stored document.

        :raises KeyError: If a required key is missing
        :raises TypeError: If ``plugins`` is not a table
        """
        plugins_data = data.get('plugins', {})
        if not isinstance(plugins_data, dict):
            raise TypeError("'plugins' must be a table")

        plugins = {}
        for name, plugin_data in plugins_data.items():
            if not isinstance(plugin_data, dict):
                raise TypeError(f"'plugins.{name}' must be a table")
            plugins[name] = PluginRecord.from_dict(plugin_data)

        return cls(
            id=str(data['id']),
            created_at=str(data['created_date']),
            api_token=str(data.get('github_token', "")),
            plugins=plugins,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'created_date': self.created_at,
            'github_token': self.api_token,
            'plugins': {name: record.to_dict() for name, record in self.plugins.items()},
        }
