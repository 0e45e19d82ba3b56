"""Client for the GitHub repository content API backing the vault."""

from __future__ import annotations

import base64
from datetime import datetime
import logging
import time
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import httpx

from ..models.repo import CommitSummary, FileContent, RemoteFile, WriteResult
from .config import AppConfig
from .errors import (
    ConflictError,
    DashboardError,
    NotFoundError,
    RateLimitedError,
    UnauthorizedError,
    UnknownStoreError,
)
from .response_cache import Clock, ResponseCache

logger = logging.getLogger(__name__)

ACCEPT_HEADER = "application/vnd.github.v3+json"
SKIP_PREFIXES = (".obsidian", "exports", "scripts", ".git", "__pycache__", ".github", "node_modules")
NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


def encode_text(text: str) -> str:
    """Base64-encode text as UTF-8 for the contents API."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_text(envelope: str, path: str = "") -> str:
    """
    Decode the contents API base64 envelope.

    GitHub wraps the payload every 60 characters, so whitespace is stripped
    before decoding. Bytes are decoded as UTF-8 so multi-byte text survives.
    """
    raw = "".join((envelope or "").split())
    data = base64.b64decode(raw)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        logger.warning(f"Content of {path or '<unknown>'} is not UTF-8, decoding as latin-1: {exc}")
        return data.decode("latin-1")


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == 429:
        return True
    return response.status_code == 403 and response.headers.get("x-ratelimit-remaining") == "0"


def error_from_response(response: httpx.Response, path: Optional[str] = None) -> DashboardError:
    """Map a non-2xx response onto the dashboard error taxonomy."""
    status = response.status_code
    excerpt = (response.text or "")[:200]
    logger.error(f"GitHub API request failed: {status} {response.request.url.path} {excerpt}")

    message = f"API {status}: {response.reason_phrase}"
    if excerpt:
        message += f" - {excerpt[:80]}"

    if status == 401:
        return UnauthorizedError(message, status=status, path=path)
    if _is_rate_limited(response):
        return RateLimitedError(message, status=status, path=path)
    if status == 403:
        return UnauthorizedError(message, status=status, path=path)
    if status == 404:
        return NotFoundError(message, status=status, path=path)
    if status == 409 or (status == 422 and "sha" in excerpt.lower()):
        return ConflictError(message, status=status, path=path)
    return UnknownStoreError(message, status=status, path=path)


class RemoteFileStore:
    """
    Read/write access to the vault repository; sole owner of the response cache.

    GET responses are cached by full resolved URL for the configured TTL.
    Writes always re-read the file's revision token with cache bypass right
    before submitting, then clear the cache.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[Clock] = None,
        wall_clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.config = config
        self.base_url = config.repo_api_url
        self.cache = ResponseCache(config.cache_ttl_seconds, clock=clock)
        self._transport = transport
        self._wall_clock = wall_clock or time.time

    # Transport

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {"Accept": ACCEPT_HEADER}
        if self.config.github_token:
            headers["Authorization"] = f"token {self.config.github_token}"
        if extra:
            headers.update(extra)
        return headers

    def _resolve(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        url = path if path.startswith("http") else f"{self.base_url}/{path}"
        return str(httpx.URL(url, params=params)) if params else url

    async def _send(
        self,
        method: str,
        url: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        path: Optional[str] = None,
    ) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.config.request_timeout, transport=self._transport
        ) as client:
            try:
                response = await client.request(method, url, json=json, headers=self._headers(headers))
            except httpx.HTTPError as exc:
                logger.error(f"GitHub API transport failure: {method} {url}: {exc}")
                raise UnknownStoreError(f"Network error: {exc}", status=0, path=path) from exc
        if response.is_error:
            raise error_from_response(response, path)
        return response

    async def request_json(
        self,
        endpoint: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        bypass_cache: bool = False,
        path: Optional[str] = None,
    ) -> Any:
        """GET an endpoint, serving from cache unless bypassed."""
        url = self._resolve(endpoint, params)
        if bypass_cache:
            fresh_params = dict(params or {})
            fresh_params["t"] = int(self._wall_clock() * 1000)
            response = await self._send(
                "GET", self._resolve(endpoint, fresh_params), headers=NO_CACHE_HEADERS, path=path
            )
            return response.json()

        cached = self.cache.get(url)
        if cached is not None:
            return cached
        response = await self._send("GET", url, path=path)
        data = response.json()
        self.cache.put(url, data)
        return data

    async def _mutate(
        self, method: str, endpoint: str, payload: Dict[str, Any], path: Optional[str] = None
    ) -> Dict[str, Any]:
        response = await self._send(
            method,
            self._resolve(endpoint),
            json=payload,
            headers={"Content-Type": "application/json"},
            path=path,
        )
        if not response.content:
            return {}
        return response.json()

    @staticmethod
    def _contents_endpoint(path: str) -> str:
        return "contents/" + quote(path, safe="/")

    # Tree

    async def list_tree(self) -> List[RemoteFile]:
        """Every blob on the configured branch."""
        data = await self.request_json(
            f"git/trees/{quote(self.config.github_branch, safe='')}", params={"recursive": "1"}
        )
        if data.get("truncated"):
            logger.warning("Tree listing was truncated by the API; some files are missing")
        return [
            RemoteFile(path=entry["path"], size=entry.get("size") or 0, sha=entry.get("sha", ""))
            for entry in data.get("tree", [])
            if entry.get("type") == "blob"
        ]

    async def list_md_files(self) -> List[RemoteFile]:
        """Markdown files outside the reserved tooling folders."""
        tree = await self.list_tree()
        return [
            f
            for f in tree
            if f.path.endswith(".md") and not any(f.path.startswith(prefix) for prefix in SKIP_PREFIXES)
        ]

    # Contents

    async def read_file_content(self, path: str, bypass_cache: bool = False) -> FileContent:
        """Decoded text plus the revision token it was read at."""
        data = await self.request_json(
            self._contents_endpoint(path),
            params={"ref": self.config.github_branch},
            bypass_cache=bypass_cache,
            path=path,
        )
        if not isinstance(data, dict) or data.get("type", "file") != "file":
            raise NotFoundError(f"Not a file: {path}", status=404, path=path)
        return FileContent(path=path, text=decode_text(data.get("content", ""), path), sha=data.get("sha"))

    async def read_file(self, path: str, bypass_cache: bool = False) -> str:
        content = await self.read_file_content(path, bypass_cache=bypass_cache)
        return content.text

    async def fetch_revision(self, path: str) -> Optional[str]:
        """Current revision token, read fresh. None means the file does not exist yet."""
        try:
            content = await self.read_file_content(path, bypass_cache=True)
        except NotFoundError:
            return None
        return content.sha

    async def write_file(
        self,
        path: str,
        content: str,
        message: Optional[str] = None,
        *,
        base: Optional[FileContent] = None,
    ) -> WriteResult:
        """
        Create or overwrite a file.

        ``base`` is the fresh read the new content was derived from; its sha is
        submitted as-is (None creates the file). Without it the revision is
        read fresh here. Raises ConflictError when another writer updated the
        file after that read; callers should re-read and retry.
        """
        sha = base.sha if base is not None else await self.fetch_revision(path)
        payload: Dict[str, Any] = {
            "message": message or f"Update {path}",
            "content": encode_text(content),
            "branch": self.config.github_branch,
        }
        if sha:
            payload["sha"] = sha

        data = await self._mutate("PUT", self._contents_endpoint(path), payload, path=path)
        self.invalidate_cache()
        logger.info(f"Wrote {path} ({'created' if sha is None else 'updated'})")
        return WriteResult(
            path=path,
            sha=(data.get("content") or {}).get("sha", ""),
            commit_sha=(data.get("commit") or {}).get("sha"),
            created=sha is None,
        )

    # History

    async def get_commits(self, n: int = 20) -> List[CommitSummary]:
        data = await self.request_json(
            "commits", params={"per_page": n, "sha": self.config.github_branch}
        )
        commits: List[CommitSummary] = []
        for entry in data:
            commit = entry.get("commit") or {}
            author = commit.get("author") or {}
            authored = author.get("date")
            commits.append(
                CommitSummary(
                    sha=entry.get("sha", ""),
                    message=commit.get("message", ""),
                    author_name=author.get("name"),
                    authored_at=datetime.fromisoformat(authored.replace("Z", "+00:00")) if authored else None,
                )
            )
        return commits

    async def dispatch_event(self, event_type: str = "vault-sync") -> None:
        """Fire a repository_dispatch event (used to trigger the vault sync workflow)."""
        await self._mutate("POST", "dispatches", {"event_type": event_type})
        self.invalidate_cache()
        logger.info(f"Dispatched repository event {event_type}")

    # Cache

    def invalidate_cache(self) -> None:
        self.cache.clear()

    clear_cache = invalidate_cache


__all__ = [
    "RemoteFileStore",
    "SKIP_PREFIXES",
    "ACCEPT_HEADER",
    "encode_text",
    "decode_text",
    "error_from_response",
]
