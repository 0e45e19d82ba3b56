"""Shared fixtures: an in-memory GitHub contents API behind httpx.MockTransport."""

from __future__ import annotations

import base64
import hashlib
import json
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import unquote

import httpx
import pytest

from backend.src.services.config import AppConfig
from backend.src.services.github_store import RemoteFileStore
from backend.src.services.notifier import NotificationService

REPO = "owner/vault"


def _blob_sha(text: str) -> str:
    data = text.encode("utf-8")
    return hashlib.sha1(b"blob %d\0" % len(data) + data).hexdigest()


class FakeGitHub:
    """Just enough of the GitHub REST API for the vault: trees, contents, commits."""

    def __init__(self, files: Optional[Dict[str, str]] = None) -> None:
        self.files: Dict[str, Tuple[str, str]] = {}
        self.requests: List[httpx.Request] = []
        self.commits: List[dict] = []
        self.dispatched: List[str] = []
        self.after_get: Optional[Callable[[str], None]] = None
        self.before_put: Optional[Callable[[str], None]] = None
        self.fail_with: Optional[httpx.Response] = None
        for path, text in (files or {}).items():
            self.set_file(path, text)

    def set_file(self, path: str, text: str) -> str:
        sha = _blob_sha(text)
        self.files[path] = (text, sha)
        return sha

    def text(self, path: str) -> str:
        return self.files[path][0]

    def sha(self, path: str) -> str:
        return self.files[path][1]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def requests_for(self, method: str, fragment: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and fragment in r.url.path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return self.fail_with

        prefix = f"/repos/{REPO}/"
        if not request.url.path.startswith(prefix):
            return httpx.Response(404, json={"message": "Not Found"})
        rel = request.url.path[len(prefix):]

        if request.method == "GET" and rel.startswith("git/trees/"):
            tree = [
                {"path": p, "type": "blob", "size": len(t.encode("utf-8")), "sha": s}
                for p, (t, s) in sorted(self.files.items())
            ]
            tree.append({"path": "Projects", "type": "tree", "sha": "d" * 40})
            return httpx.Response(200, json={"sha": "root", "tree": tree, "truncated": False})

        if rel.startswith("contents/"):
            path = unquote(rel[len("contents/"):])
            if request.method == "GET":
                return self._get_contents(path)
            if request.method == "PUT":
                return self._put_contents(path, json.loads(request.content))

        if request.method == "GET" and rel == "commits":
            per_page = int(request.url.params.get("per_page", "30"))
            return httpx.Response(200, json=self.commits[:per_page])

        if request.method == "POST" and rel == "dispatches":
            self.dispatched.append(json.loads(request.content)["event_type"])
            return httpx.Response(204)

        return httpx.Response(404, json={"message": "Not Found"})

    def _get_contents(self, path: str) -> httpx.Response:
        if path not in self.files:
            return httpx.Response(404, json={"message": "Not Found"})
        text, sha = self.files[path]
        if self.after_get is not None:
            hook, self.after_get = self.after_get, None
            hook(path)
        return httpx.Response(
            200,
            json={
                "type": "file",
                "path": path,
                "sha": sha,
                "encoding": "base64",
                "content": base64.encodebytes(text.encode("utf-8")).decode("ascii"),
            },
        )

    def _put_contents(self, path: str, body: dict) -> httpx.Response:
        if self.before_put is not None:
            hook, self.before_put = self.before_put, None
            hook(path)
        current = self.files.get(path)
        if current is None and body.get("sha"):
            return httpx.Response(409, json={"message": f"{path} does not match {body['sha']}"})
        if current is not None and not body.get("sha"):
            return httpx.Response(422, json={"message": 'Invalid request. "sha" wasn\'t supplied.'})
        if current is not None and body["sha"] != current[1]:
            return httpx.Response(409, json={"message": f"{path} does not match {body['sha']}"})

        text = base64.b64decode(body["content"]).decode("utf-8")
        sha = self.set_file(path, text)
        commit_sha = hashlib.sha1(f"{path}:{sha}".encode()).hexdigest()
        self.commits.insert(
            0,
            {
                "sha": commit_sha,
                "commit": {
                    "message": body["message"],
                    "author": {"name": "tester", "date": "2026-10-18T09:00:00Z"},
                },
            },
        )
        return httpx.Response(
            201 if current is None else 200,
            json={"content": {"path": path, "sha": sha}, "commit": {"sha": commit_sha}},
        )


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        github_token="test-token",
        github_repo=REPO,
        state_path=tmp_path / "state.json",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def store(app_config: AppConfig, fake_github: FakeGitHub, clock: FakeClock) -> RemoteFileStore:
    return RemoteFileStore(app_config, transport=fake_github.transport, clock=clock)


@pytest.fixture
def notifier(store: RemoteFileStore) -> NotificationService:
    return NotificationService(store, actor="tester")
