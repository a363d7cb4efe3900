from conftest import make_release, make_record

from mngr.core.parser import parse_releases
from mngr.core.registry import Registry
from mngr.core.selector import (
    UpdatePolicy,
    resolve_targets,
    select_latest,
    select_latest_stable,
    select_release,
)

REPO_URL = "https://github.com/acme/widget"


def _records(*releases):
    return parse_releases(list(releases), REPO_URL)


def __test_select_latest_takes_maximum_creation_time__():
    records = _records(
        make_release("v1", "2024-01-01T00:00:00Z"),
        make_release("v3", "2024-09-01T00:00:00Z", prerelease=True),
        make_release("v2", "2024-06-01T00:00:00Z"),
    )
    assert select_latest(records.values()).version == "v3"
    # Deterministic for the same input
    assert select_latest(records.values()) == select_latest(list(records.values()))


def __test_select_latest_stable_skips_pre_releases__():
    records = _records(
        make_release("v1", "2024-01-01T00:00:00Z"),
        make_release("v2", "2024-06-01T00:00:00Z"),
        make_release("v3-beta", "2024-09-01T00:00:00Z", prerelease=True),
    )
    selected = select_latest_stable(records.values())
    assert selected.version == "v2"
    assert selected.pre_release is False


def __test_select_latest_stable_all_pre_releases__():
    """Only pre-releases means there is nothing to select"""
    records = _records(
        make_release("v1-rc1", "2024-01-01T00:00:00Z", prerelease=True),
        make_release("v1-rc2", "2024-02-01T00:00:00Z", prerelease=True),
    )
    assert select_latest_stable(records.values()) is None
    assert select_latest(records.values()).version == "v1-rc2"


def __test_select_on_empty_input__():
    assert select_latest([]) is None
    assert select_latest_stable([]) is None


def __test_selection_does_not_mutate_input__():
    records = _records(
        make_release("v1", "2024-01-01T00:00:00Z"),
        make_release("v2-rc", "2024-02-01T00:00:00Z", prerelease=True),
    )
    before = dict(records)
    select_latest_stable(records.values())
    select_release(records.values(), include_pre_release=True)
    assert records == before


def __test_select_release_switch__():
    records = _records(
        make_release("v1", "2024-01-01T00:00:00Z"),
        make_release("v2-rc", "2024-02-01T00:00:00Z", prerelease=True),
    )
    assert select_release(records.values(), include_pre_release=True).version == "v2-rc"
    assert select_release(records.values(), include_pre_release=False).version == "v1"


def _registry():
    registry = Registry.new()
    registry.insert("foo", make_record("foo"))
    registry.insert("bar", make_record("bar", pre_release=True))
    registry.insert("baz", make_record("baz"))
    return registry


def __test_resolve_all_targets__():
    assert sorted(resolve_targets(_registry(), UpdatePolicy.ALL)) == ["bar", "baz", "foo"]


def __test_resolve_stable_targets__():
    """Plugins recorded on a pre-release are left out"""
    assert sorted(resolve_targets(_registry(), UpdatePolicy.STABLE)) == ["baz", "foo"]


def __test_resolve_named_targets_ignores_unknown_names__():
    targets = resolve_targets(_registry(), UpdatePolicy.NAMED, ["baz", "nope", " foo ", "baz", ""])
    assert targets == ["baz", "foo"]
    assert resolve_targets(_registry(), UpdatePolicy.NAMED, None) == []
