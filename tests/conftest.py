from pathlib import Path
from typing import Any

import httpx
import pytest

from mngr.config import ConfigManager
from mngr.core.artifacts import ArtifactFileManager
from mngr.core.context import MngrContext
from mngr.core.registry import PluginRecord, Registry
from mngr.github.client import GitHubClient


def make_release(tag: str, created_at: str, prerelease: bool = False,
                 assets: tuple[str, ...] = ("widget.jar",), owner: str = "acme",
                 repo: str = "widget", body: str | None = None) -> dict[str, Any]:
    """
    Build one release object as the releases-listing endpoint returns it
    """
    return {
        "html_url": f"https://github.com/{owner}/{repo}/releases/tag/{tag}",
        "tag_name": tag,
        "name": f"Release {tag}",
        "prerelease": prerelease,
        "draft": False,
        "created_at": created_at,
        "body": body,
        "assets": [{"name": name, "size": 3} for name in assets],
    }


class FakeGitHub:
    """
    Serves release listings and asset downloads through an httpx mock transport
    """

    def __init__(self):
        self.listings: dict[tuple[str, str], Any] = {}
        self.assets: dict[str, bytes] = {}
        self.status: dict[tuple[str, str], int] = {}
        self.rate_limit: str | None = "4999"
        self.requests: list[httpx.Request] = []

    def add_listing(self, owner: str, repo: str, releases: Any):
        self.listings[(owner, repo)] = releases

    def add_asset(self, owner: str, repo: str, tag: str, file_name: str, content: bytes = b"jar"):
        self.assets[f"/{owner}/{repo}/releases/download/{tag}/{file_name}"] = content

    @property
    def download_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if "/releases/download/" in r.url.path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.strip("/").split("/")

        if request.url.host == "api.github.com" and parts[0] == "repos":
            key = (parts[1], parts[2])
            if key in self.status:
                return httpx.Response(self.status[key], json={"message": "Bad credentials"})
            if key not in self.listings:
                return httpx.Response(404, json={"message": "Not Found"})
            headers = {"x-ratelimit-remaining": self.rate_limit} if self.rate_limit is not None else {}
            return httpx.Response(200, json=self.listings[key], headers=headers)

        if request.url.path in self.assets:
            return httpx.Response(200, content=self.assets[request.url.path])
        return httpx.Response(404, text="Not Found")

    def client(self, token: str = "") -> GitHubClient:
        return GitHubClient(token=token, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def github():
    """Fake GitHub API and download host"""
    return FakeGitHub()


@pytest.fixture
def plugins_dir(tmp_path) -> Path:
    path = tmp_path / "plugins"
    path.mkdir()
    return path


@pytest.fixture
def answers():
    """Answers given to overwrite confirmations, in order"""
    return []


@pytest.fixture
def context(tmp_path, plugins_dir, github, answers) -> MngrContext:
    """Session context with an empty registry stored in a temporary directory"""

    def confirm(_path: Path) -> bool:
        return answers.pop(0) if answers else False

    client = github.client()
    yield MngrContext(
        registry=Registry.new(),
        client=client,
        artifacts=ArtifactFileManager(plugins_dir, confirm_overwrite=confirm),
        store=ConfigManager(tmp_path / "mngr.toml"),
    )
    client.close()


def make_record(name: str = "foo", version: str = "v1.0.0", pre_release: bool = False,
                file_name: str | None = None, owner: str = "acme") -> PluginRecord:
    return PluginRecord(
        name=name,
        version=version,
        introduced_at="2024-01-01T00:00:00+00:00",
        file_name=file_name or f"{name}.jar",
        repository_url=f"https://github.com/{owner}/{name}",
        pre_release=pre_release,
    )
