"""
Release resolution and plugin lifecycle engine.
"""

from .parser import ReleaseRecord, parse_releases
from .registry import PluginRecord, Registry
from .selector import UpdatePolicy, select_latest, select_latest_stable, select_release, resolve_targets
from .artifacts import ArtifactFileManager

__all__ = [
    'ReleaseRecord', 'parse_releases',
    'PluginRecord', 'Registry',
    'UpdatePolicy', 'select_latest', 'select_latest_stable', 'select_release', 'resolve_targets',
    'ArtifactFileManager',
]
