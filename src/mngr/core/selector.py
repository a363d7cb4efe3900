"""
Release selection and update policies.
"""

import logging
from enum import Enum
from typing import Iterable

from .parser import ReleaseRecord
from .registry import Registry

__all__ = [
    'UpdatePolicy',
    'select_latest', 'select_latest_stable', 'select_release',
    'resolve_targets',
]

logger = logging.getLogger(__name__)


class UpdatePolicy(Enum):
    ALL = 'all'
    STABLE = 'stable'
    NAMED = 'named'


def select_latest(records: Iterable[ReleaseRecord]) -> ReleaseRecord | None:
    """
    Select the newest release.

    :param records: Candidate releases, left untouched
    :return: The record with the greatest ``created_at``, None if there is no record
    """
    return max(records, key=lambda record: record.created_at, default=None)


def select_latest_stable(records: Iterable[ReleaseRecord]) -> ReleaseRecord | None:
    """
    Select the newest release that is not a pre-release.

    :param records: Candidate releases, left untouched
    :return: The newest stable record, None if every record is a pre-release
    """
    return select_latest(record for record in records if not record.pre_release)


def select_release(records: Iterable[ReleaseRecord], include_pre_release: bool) -> ReleaseRecord | None:
    """Select the newest release, optionally skipping pre-releases."""
    if include_pre_release:
        return select_latest(records)
    return select_latest_stable(records)


def resolve_targets(registry: Registry, policy: UpdatePolicy,
                    names: Iterable[str] | None = None) -> list[str]:
    """
    Build the list of artifact names an update should process.

    :param registry: The registry to read names and records from
    :param policy: Which names are eligible
    :param names: Requested names, only used by :attr:`UpdatePolicy.NAMED`;
                  names missing from the registry are ignored
    :return: Names in processing order, without duplicates
    """
    if policy is UpdatePolicy.ALL:
        return registry.names()

    if policy is UpdatePolicy.STABLE:
        stable = registry.names_without_pre_release()
        return [name for name in registry.names() if name in stable]

    targets: list[str] = []
    for name in names or ():
        name = name.strip()
        if not name or name in targets:
            continue
        if name not in registry:
            logger.debug("Ignoring unregistered plugin name: %s", name)
            continue
        targets.append(name)
    return targets
