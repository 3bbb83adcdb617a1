"""
HTTP client for the page store (the /api/v1 pages endpoints).

Loads raw content strings and overwrites them with a serialized document.
Saves never raise: failures come back as an unsuccessful SaveResult so the
caller keeps its in-memory edits and can retry.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from pagecms.domain.schema import ContentDocument
from pagecms.errors import PersistenceError
from pagecms.normalizers.content import normalize_content_payload

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class SaveResult:
    success: bool
    data: Any = None
    error: Optional[str] = None


class PageGateway:
    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """
        Sends one request and unwraps the {success, data, error} envelope.

        Raises:
            PersistenceError: network failure, non-2xx status, or an envelope
            reporting success = false.
        """
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise PersistenceError(f"{method} {url} failed: {exc}") from exc

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not resp.ok or not isinstance(body, dict) or body.get("success") is False:
            message = body.get("error") if isinstance(body, dict) else None
            raise PersistenceError(message or f"HTTP {resp.status_code}", status_code=resp.status_code)

        return body.get("data")

    def fetch_page(self, page_id: str) -> Dict[str, Any]:
        data = self._request("GET", f"/pages/{page_id}")
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise PersistenceError(f"Unexpected page payload for {page_id}: {type(data).__name__}")
        return data

    def load(self, page_id: str) -> str:
        """Raw stored content; "" when the page has none yet."""
        content = self.fetch_page(page_id).get("content")
        return content if isinstance(content, str) else ""

    def save(self, page_id: str, document: ContentDocument) -> SaveResult:
        """Overwrites the page content with document (last write wins)."""
        try:
            data = self._request("PUT", f"/pages/{page_id}/content", json=normalize_content_payload(document))
        except PersistenceError as exc:
            log.warning("Saving content of page %s failed: %s", page_id, exc)
            return SaveResult(success=False, error=str(exc))
        return SaveResult(success=True, data=data)
