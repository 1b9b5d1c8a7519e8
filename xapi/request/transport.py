# SPDX-FileCopyrightText: 2025 xapi contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass

import requests
from requests.adapters import HTTPAdapter
from urllib3 import Retry

from xapi.config import Config
from xapi.errors import MissingBodyError, NotOverriddenError, TransportError
from xapi.log import get_child_logger

log = get_child_logger("transport")

XAPI_VERSION = "1.0.3"


@dataclass(slots=True, frozen=True)
class PageResponse:
    """What came back for a single request."""

    content_type: str | None
    body: bytes | None
    status_code: int = 200


def require_body(response: PageResponse, address: str) -> bytes:
    """Returns the body of a response that has to carry one."""
    if not response.body:
        raise MissingBodyError(f"response from '{address}' has no body")
    return response.body


class Transport:
    """Interface for talking HTTP to an LRS."""

    def fetch_page(self, address: str) -> PageResponse:
        """GETs `address`.

        Raises:
            TransportError: If the request could not be made or the LRS answered with an error.
        """
        raise NotOverriddenError()

    def send(self,
             method: str,
             address: str,
             body: str | bytes | None = None,
             content_type: str | None = None) -> PageResponse:
        """Sends a request with an (optional) body, JSON unless `content_type` says otherwise."""
        raise NotOverriddenError()


class RequestsTransport(Transport):
    RETRY_CODES = [429, 500, 502, 503, 504]

    def __init__(self, config: Config) -> None:
        self._timeout = config.timeout

        retry = Retry(
            total=config.retries,
            backoff_factor=config.get("backoff_factor", 0.5),
            status_forcelist=self.RETRY_CODES,
            allowed_methods=["GET", "PUT", "DELETE"],
        )

        self._session = requests.Session()
        adapter = HTTPAdapter(max_retries=retry)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)
        self._session.headers.update({
            "User-Agent": config.user_agent,
            "X-Experience-API-Version": config.get("version", XAPI_VERSION),
            "Accept": "application/json",
        })
        self._session.headers.update(config.get("headers") or {})
        self._session.verify = config.get("verify_ssl", True)

    def fetch_page(self, address: str) -> PageResponse:
        return self.send("GET", address)

    def send(self,
             method: str,
             address: str,
             body: str | bytes | None = None,
             content_type: str | None = None) -> PageResponse:
        log.debug("%s %s", method, address)
        headers = {"Content-Type": content_type or "application/json"} if body is not None else None
        if isinstance(body, str):
            body = body.encode("utf-8")
        try:
            response = self._session.request(
                method,
                address,
                data=body,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as err:
            raise TransportError(f"failed to {method} '{address}': {err}") from err

        if response.status_code >= 300:
            raise TransportError(
                f"failed to {method} '{address}' (HTTP {response.status_code}): {response.text}",
                status_code=response.status_code,
            )

        return PageResponse(
            content_type=response.headers.get("Content-Type"),
            body=response.content or None,
            status_code=response.status_code,
        )

    def close(self) -> None:
        self._session.close()
