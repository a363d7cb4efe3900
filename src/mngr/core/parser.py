"""
Release listing parser.

Turns the JSON array returned by the releases-listing endpoint into
:class:`ReleaseRecord` objects keyed by their creation timestamp.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Any, Iterable

__all__ = ['ReleaseRecord', 'parse_releases', 'parse_timestamp', 'name_from_page_url']

logger = logging.getLogger(__name__)

# Position of the repository segment in https://github.com/<owner>/<repo>/releases/tag/<tag>
REPO_SEGMENT = 4


@dataclass(frozen=True)
class ReleaseRecord:
    """One parsed upstream release."""
    name: str
    version: str
    created_at: datetime
    pre_release: bool
    file_name: str
    repository_url: str
    body: str | None = None


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse an RFC 3339 timestamp.

    :param value: Timestamp string like ``2024-01-01T00:00:00Z``
    :return: Timezone-aware datetime (naive values are taken as UTC), or None if unparseable
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def name_from_page_url(page_url: Any) -> str | None:
    """
    Derive the artifact name from a release page URL.

    :param page_url: The ``html_url`` of a release
    :return: The repository segment, or None if the URL is too short
    """
    if not isinstance(page_url, str):
        return None
    segments = page_url.split('/')
    if len(segments) <= REPO_SEGMENT or not segments[REPO_SEGMENT]:
        return None
    return segments[REPO_SEGMENT]


def _parse_release(entry: Any, repository_url: str) -> ReleaseRecord | None:
    if not isinstance(entry, dict):
        return None

    name = name_from_page_url(entry.get('html_url'))
    version = entry.get('tag_name')
    created_at = parse_timestamp(entry.get('created_at'))
    assets = entry.get('assets')
    pre_release = entry.get('prerelease')

    if name is None or not isinstance(version, str) or not version or created_at is None:
        return None
    if not isinstance(pre_release, bool):
        return None
    if not isinstance(assets, list) or not assets:
        return None

    # Only the first asset counts
    first_asset = assets[0]
    file_name = first_asset.get('name') if isinstance(first_asset, dict) else None
    if not isinstance(file_name, str) or not file_name:
        return None

    body = entry.get('body')
    return ReleaseRecord(
        name=name,
        version=version,
        created_at=created_at,
        pre_release=pre_release,
        file_name=file_name,
        repository_url=repository_url,
        body=body if isinstance(body, str) and body else None,
    )


def parse_releases(payload: str | bytes | Iterable[Any],
                   repository_url: str) -> dict[datetime, ReleaseRecord]:
    """
    Parse a releases listing.

    Entries without a page URL, tag, prerelease flag, creation timestamp or asset
    are skipped. Two entries with the same timestamp collapse into the last one.

    :param payload: Raw JSON text or the already decoded list of release objects
    :param repository_url: Canonical URL of the repository the listing belongs to
    :return: Release records keyed by creation timestamp, empty if the payload is invalid
    """
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            payload = json.loads(payload)
        except ValueError as e:
            logger.warning("Releases listing of %s is not valid JSON: %s", repository_url, e)
            return {}

    if not isinstance(payload, list):
        logger.warning("Releases listing of %s is not a list", repository_url)
        return {}

    records: dict[datetime, ReleaseRecord] = {}
    for entry in payload:
        record = _parse_release(entry, repository_url)
        if record is None:
            logger.debug("Skipping incomplete release entry of %s", repository_url)
            continue
        records[record.created_at] = record
    return records
