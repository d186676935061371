"""
Publishing widgets to the GitHub-backed content store.

Widgets live at ``<filename>.html`` on the Pages branch; each one has a
metadata record at ``metadata/<userId>/<filename>.json`` that the "recent
tools" listing reads back.
"""

from __future__ import annotations

import base64
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, NamedTuple, Optional

import requests
from pydantic import ValidationError

from toolsmith.config import Settings
from toolsmith.errors import ConflictError, InvalidInput, StoreError
from toolsmith.models import PublishedToolMetadata

log = logging.getLogger(__name__)


class StoredFile(NamedTuple):
    sha: str
    text: str


class ContentStore:
    """Thin client for the GitHub contents API on one repo and branch."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.repo = settings.github_repo
        self.branch = settings.github_branch
        self.base = f"{settings.github_api_url}/repos/{settings.github_repo}/contents"

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self.settings.github_token:
            headers["Authorization"] = f"token {self.settings.github_token}"
        return headers

    def _get(self, path: str) -> Optional[requests.Response]:
        try:
            resp = requests.get(
                f"{self.base}/{path}",
                headers=self._headers(),
                params={"ref": self.branch},
                timeout=30,
            )
        except requests.RequestException as exc:
            raise StoreError(f"Content store read failed for {path}: {exc}") from exc
        if resp.status_code == 404:
            return None
        if resp.status_code != 200:
            log.warning("store: GET %s HTTP %s: %s", path, resp.status_code, (resp.text or "")[:400])
            raise StoreError(f"Content store read for {path} returned HTTP {resp.status_code}")
        return resp

    @staticmethod
    def _json(resp: requests.Response, path: str) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise StoreError(f"Content store answered {path} with a non-JSON body") from exc

    def read(self, path: str) -> Optional[StoredFile]:
        resp = self._get(path)
        if resp is None:
            return None
        data = self._json(resp, path)
        if not isinstance(data, dict):
            raise StoreError(f"{path} is a directory, not a file")
        raw = data.get("content") or ""
        try:
            # binascii.Error and UnicodeDecodeError are both ValueErrors
            text = base64.b64decode(raw).decode("utf-8") if raw else ""
        except ValueError as exc:
            raise StoreError(f"{path} is not valid base64-encoded UTF-8") from exc
        return StoredFile(sha=str(data.get("sha") or ""), text=text)

    def list_dir(self, path: str) -> List[Dict[str, Any]]:
        resp = self._get(path)
        if resp is None:
            return []
        data = self._json(resp, path)
        return [entry for entry in data if isinstance(entry, dict)] if isinstance(data, list) else []

    def write(self, path: str, text: str, message: str, sha: Optional[str] = None) -> None:
        body: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
            "branch": self.branch,
        }
        if sha:
            body["sha"] = sha
        try:
            resp = requests.put(f"{self.base}/{path}", headers=self._headers(), json=body, timeout=30)
        except requests.RequestException as exc:
            raise StoreError(f"Content store write failed for {path}: {exc}") from exc
        if resp.status_code in (409, 422):
            log.warning("store: PUT %s conflict HTTP %s", path, resp.status_code)
            raise ConflictError(f"{path} changed in the content store; retry the publish")
        if resp.status_code not in (200, 201):
            log.warning("store: PUT %s HTTP %s: %s", path, resp.status_code, (resp.text or "")[:400])
            raise StoreError(f"Content store write for {path} returned HTTP {resp.status_code}")


def normalize_filename(filename: str) -> str:
    name = (filename or "").strip()
    # Widgets live at the repo root; anything else could land in metadata/
    if "/" in name or "\\" in name or ".." in name:
        raise InvalidInput("Filename must not contain path separators or '..'")
    return name if name.endswith(".html") else f"{name}.html"


def metadata_path(user_id: str, filename: str) -> str:
    return f"metadata/{user_id}/{filename}.json"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _created_at(prior: Optional[StoredFile]) -> Optional[str]:
    if prior is None:
        return None
    try:
        created = json.loads(prior.text).get("createdAt")
    except (ValueError, AttributeError):
        return None
    return created if isinstance(created, str) and created else None


def publish(
    store: ContentStore,
    user_id: str,
    filename: str,
    html: str,
    now: Optional[str] = None,
) -> PublishedToolMetadata:
    """Create or update a widget page and its per-user metadata record.

    ``createdAt`` is carried over from an existing record; ``updatedAt`` is
    always the publish time. A failed metadata write is logged and does not
    undo the published page.
    """
    if not (filename or "").strip() or not html:
        raise InvalidInput("Missing filename or html")
    path = normalize_filename(filename)
    stamp = now or _now_iso()

    existing = store.read(path)
    store.write(path, html, f"Publish tool: {path}", sha=existing.sha if existing else None)

    meta_path = metadata_path(user_id, path)
    try:
        prior_meta = store.read(meta_path)
    except StoreError as exc:
        log.warning("publish: could not read prior metadata %s: %s", meta_path, exc)
        prior_meta = None
    metadata = PublishedToolMetadata(
        userId=user_id,
        filename=path,
        url=f"{store.settings.pages_base_url}/{path}",
        createdAt=_created_at(prior_meta) or stamp,
        updatedAt=stamp,
    )
    try:
        store.write(
            meta_path,
            json.dumps(metadata.model_dump(), indent=2),
            f"Update tool metadata: {path}",
            sha=prior_meta.sha if prior_meta else None,
        )
    except StoreError as exc:
        log.error("publish: error storing metadata for %s: %s", path, exc)

    log.info("publish: user=%s file=%s", user_id, path)
    return metadata


def list_recent(store: ContentStore, user_id: str) -> List[PublishedToolMetadata]:
    """A user's published tools, newest first."""
    tools: List[PublishedToolMetadata] = []
    for entry in store.list_dir(f"metadata/{user_id}"):
        path = entry.get("path")
        if entry.get("type", "file") != "file" or not path:
            continue
        try:
            stored = store.read(path)
            if stored is None:
                continue
            tools.append(PublishedToolMetadata.model_validate_json(stored.text))
        except (StoreError, ValidationError) as exc:
            log.warning("recent: skipping unreadable metadata %s: %s", path, exc)
    tools.sort(key=lambda t: t.createdAt, reverse=True)
    return tools
