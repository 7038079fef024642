# shopdash/api/client.py

"""Thin HTTP transport for the remote product/cart API."""

import json
import logging
from typing import Any

from curl_cffi import CurlMime
from curl_cffi import requests as curl_requests

from shopdash.api.errors import (
    NotAuthenticatedError,
    NotFoundError,
    RemoteApiError,
)
from shopdash.config.settings import Settings
from shopdash.models.local_file import LocalImageFile

logger = logging.getLogger("shopdash.api")


class ApiClient:
    """HTTP client bound to the remote API's base URL.

    Requests are issued once; failures are mapped onto the shopdash error
    taxonomy and left to the caller. There is no retry loop.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: int | None = None,
    ) -> None:
        self.base_url = (base_url or Settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout or Settings.REQUEST_TIMEOUT
        self.session = curl_requests.Session()

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    # ── Public verbs ─────────────────────────────────────

    def get(self, path: str, headers: dict[str, str]) -> Any:
        return self._send("GET", path, headers)

    def delete(self, path: str, headers: dict[str, str]) -> Any:
        return self._send("DELETE", path, headers)

    def post_json(
        self,
        path: str,
        payload: dict[str, Any],
        headers: dict[str, str],
    ) -> Any:
        return self._send("POST", path, headers, json_body=payload)

    def post_multipart(
        self,
        path: str,
        fields: dict[str, str],
        files: list[LocalImageFile],
        headers: dict[str, str],
    ) -> Any:
        return self._send_multipart("POST", path, fields, files, headers)

    def put_multipart(
        self,
        path: str,
        fields: dict[str, str],
        files: list[LocalImageFile],
        headers: dict[str, str],
    ) -> Any:
        return self._send_multipart("PUT", path, fields, files, headers)

    def close(self) -> None:
        self.session.close()

    # ── Private helpers ──────────────────────────────────

    def _send_multipart(
        self,
        method: str,
        path: str,
        fields: dict[str, str],
        files: list[LocalImageFile],
        headers: dict[str, str],
    ) -> Any:
        """Encode *fields* and *files* as multipart/form-data and send."""
        mime = CurlMime()
        try:
            for name, value in fields.items():
                mime.addpart(name=name, data=value.encode("utf-8"))
            for image in files:
                # Field name must be "images"; the API's upload handler keys on it
                mime.addpart(
                    name="images",
                    content_type=image.content_type,
                    filename=image.name,
                    local_path=str(image.path),
                )
            return self._send(method, path, headers, multipart=mime)
        finally:
            mime.close()

    def _send(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        json_body: dict[str, Any] | None = None,
        multipart: CurlMime | None = None,
    ) -> Any:
        """Issue one request and decode the JSON body."""
        url = self.url_for(path)
        merged = {**Settings.DEFAULT_HEADERS, **headers}
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(
                method,
                url,
                headers=merged,
                json=json_body,
                multipart=multipart,
                timeout=self.timeout,
            )
        except curl_requests.RequestsError as exc:
            logger.warning(
                "%s %s failed: %s", method, url, exc, exc_info=True,
            )
            raise RemoteApiError(f"Request failed: {exc}") from exc

        status = resp.status_code
        if status in (401, 403):
            logger.warning("%s %s rejected with HTTP %d", method, url, status)
            raise NotAuthenticatedError(
                f"Remote rejected credentials (HTTP {status})"
            )
        if status == 404:
            logger.info("%s %s returned 404", method, url)
            raise NotFoundError(f"Not found: {path}")
        if not 200 <= status < 300:
            logger.error(
                "%s %s returned HTTP %d: %s",
                method,
                url,
                status,
                resp.text[:200],
            )
            raise RemoteApiError(
                f"HTTP {status} from {path}", status_code=status,
            )

        if not resp.content:
            return None
        try:
            return json.loads(resp.content)
        except ValueError as exc:
            logger.error(
                "%s %s returned an undecodable body", method, url,
                exc_info=True,
            )
            raise RemoteApiError(
                f"Invalid JSON from {path}", status_code=status,
            ) from exc
