"""
Register, unregister and update plugins.

Combines the GitHub client, the release parser and selector, the artifact file
manager and the registry held by a :class:`MngrContext`.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable

from .context import MngrContext
from .parser import ReleaseRecord, parse_releases
from .registry import PluginRecord, Registry
from .selector import UpdatePolicy, resolve_targets, select_latest, select_release
from ..github.exceptions import (
    AlreadyRegisteredError,
    MngrError,
    NoReleaseError,
    NotRegisteredError,
)
from ..github.models import RepositoryRef
from ..github.urls import parse_repository_url

__all__ = [
    'Orchestrator',
    'RegisterResult', 'UnregisterResult',
    'UpdateStatus', 'UpdateOutcome',
]

logger = logging.getLogger(__name__)


@dataclass
class RegisterResult:
    """Result of a successful registration."""
    record: PluginRecord
    rate_limit_remaining: int | None = None
    file_written: bool = False
    file_error: MngrError | None = None


@dataclass
class UnregisterResult:
    """Result of an unregistration, the record is removed even if the file stays."""
    record: PluginRecord
    file_deleted: bool = False
    file_error: MngrError | None = None


class UpdateStatus(Enum):
    UPDATED = 'updated'
    CURRENT = 'current'
    NO_CANDIDATE = 'no_candidate'
    DECLINED = 'declined'
    FAILED = 'failed'


@dataclass
class UpdateOutcome:
    """What happened to one plugin of an update batch."""
    name: str
    status: UpdateStatus
    old_version: str | None = None
    new_version: str | None = None
    error: MngrError | None = None

    @property
    def changed(self) -> bool:
        return self.status is UpdateStatus.UPDATED


class Orchestrator:
    """
    Plugin lifecycle operations on a session context.
    """

    def __init__(self, context: MngrContext):
        self.context = context

    @property
    def registry(self) -> Registry:
        return self.context.registry

    def _fetch_releases(self, ref: RepositoryRef) -> tuple[dict[datetime, ReleaseRecord], int | None]:
        listing = self.context.client.list_releases(ref)
        return parse_releases(listing.payload, ref.url), listing.rate_limit_remaining

    def _download(self, release: ReleaseRecord | PluginRecord) -> bytes:
        return self.context.client.download_asset(release.repository_url, release.version,
                                                  release.file_name)

    def register(self, url: str) -> RegisterResult:
        """
        Register the plugin released by a GitHub repository.

        The newest release is taken, pre-releases included. Its asset is downloaded
        into the plugin directory; a failed download is reported in the result but
        the registration stands.

        :param url: Repository URL like ``https://github.com/acme/widget``
        :return: The registered record and the remaining API rate limit
        :raises InvalidUrlError: If the URL is not a GitHub repository URL
        :raises TransportError: If the network request fails
        :raises RemoteError: If GitHub answers with an error (``UnauthorizedError`` on 401)
        :raises ParseError: If the listing is not a JSON array
        :raises NoReleaseError: If no release has a downloadable asset
        :raises AlreadyRegisteredError: If the plugin is already registered
        """
        ref = parse_repository_url(url)
        releases, remaining = self._fetch_releases(ref)

        release = select_latest(releases.values())
        if release is None:
            raise NoReleaseError(f"No release with a downloadable asset in {ref.url}")

        if release.name in self.registry:
            raise AlreadyRegisteredError(f"Plugin '{release.name}' is already registered")

        record = PluginRecord.from_release(release)
        self.registry.insert(record.name, record)
        logger.info("Registered %s %s from %s", record.name, record.version, ref.url)

        result = RegisterResult(record=record, rate_limit_remaining=remaining)
        try:
            self.context.artifacts.check_plugins_dir()
            content = self._download(record)
            result.file_written = self.context.artifacts.write_artifact(record.file_name, content)
        except MngrError as e:
            logger.warning("Registered %s but its file wasn't written: %s", record.name, e)
            result.file_error = e
        return result

    def unregister(self, selector: str, by_file_name: bool = False) -> UnregisterResult:
        """
        Remove a plugin and delete its artifact file.

        The registry change is final even if the file can't be deleted.

        :param selector: Plugin name, or artifact file name if ``by_file_name``
        :param by_file_name: Look the plugin up by its file name
        :raises NotRegisteredError: If no plugin matches
        """
        selector = selector.strip()
        if by_file_name:
            record = self.registry.remove_where_file_name_equals(selector)
        else:
            record = self.registry.remove(selector)
        if record is None:
            kind = "file name" if by_file_name else "name"
            raise NotRegisteredError(f"No plugin registered with {kind} '{selector}'")
        logger.info("Unregistered %s", record.name)

        result = UnregisterResult(record=record)
        try:
            self.context.artifacts.delete_artifact(record.file_name)
            result.file_deleted = True
        except MngrError as e:
            logger.warning("Unregistered %s but its file wasn't deleted: %s", record.name, e)
            result.file_error = e
        return result

    def update_policy(self, policy: UpdatePolicy, names: Iterable[str] | None = None,
                      include_pre_release: bool = False) -> list[UpdateOutcome]:
        """
        Update the plugins selected by a policy.

        :param policy: Which plugins to process
        :param names: Requested names for :attr:`UpdatePolicy.NAMED`
        :param include_pre_release: Pre-releases are candidates too
        """
        targets = resolve_targets(self.registry, policy, names)
        return self.update(targets, include_pre_release=include_pre_release)

    def update(self, names: Iterable[str], include_pre_release: bool = False) -> list[UpdateOutcome]:
        """
        Update plugins one by one.

        A failing plugin keeps its old record and doesn't stop the others.

        :param names: Registered plugin names, unknown ones are ignored
        :param include_pre_release: Pre-releases are candidates too
        :return: One outcome per processed plugin
        """
        outcomes = []
        for name in names:
            record = self.registry.get(name)
            if record is None:
                logger.debug("Ignoring unregistered plugin name: %s", name)
                continue
            try:
                outcome = self._update_one(record, include_pre_release)
            except MngrError as e:
                logger.warning("Update of %s failed: %s", name, e)
                outcome = UpdateOutcome(name=name, status=UpdateStatus.FAILED,
                                        old_version=record.version, error=e)
            outcomes.append(outcome)
        return outcomes

    def _update_one(self, record: PluginRecord, include_pre_release: bool) -> UpdateOutcome:
        artifacts = self.context.artifacts
        releases, _ = self._fetch_releases(parse_repository_url(record.repository_url))

        candidate = select_release(releases.values(), include_pre_release)
        if candidate is None:
            return UpdateOutcome(name=record.name, status=UpdateStatus.NO_CANDIDATE,
                                 old_version=record.version)

        if candidate.version == record.version:
            return UpdateOutcome(name=record.name, status=UpdateStatus.CURRENT,
                                 old_version=record.version, new_version=candidate.version)

        outcome = UpdateOutcome(name=record.name, status=UpdateStatus.UPDATED,
                                old_version=record.version, new_version=candidate.version)

        artifacts.check_plugins_dir()
        content = self._download(candidate)

        # A different file name may hit a file that doesn't belong to this plugin
        if candidate.file_name != record.file_name and artifacts.has_collision(candidate.file_name):
            if not artifacts.confirm_overwrite(artifacts.path_of(candidate.file_name)):
                outcome.status = UpdateStatus.DECLINED
                return outcome

        try:
            artifacts.delete_artifact(record.file_name)
        except MngrError as e:
            logger.warning("Old file of %s wasn't deleted: %s", record.name, e)

        artifacts.write_artifact(candidate.file_name, content, overwrite=True)

        new_record = PluginRecord.from_release(candidate)
        new_record.name = record.name
        self.registry.insert(record.name, new_record)
        logger.info("Updated %s from %s to %s", record.name, record.version, candidate.version)
        return outcome
