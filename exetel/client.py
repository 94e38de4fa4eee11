from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, TypeVar

import requests
from urllib3.exceptions import LocationParseError
from urllib3.util import parse_url

from exetel.auth import JSON_MIME, Authorization, build_auth_headers
from exetel.config import ApiConfig
from exetel.customer import GetServices, Services
from exetel.errors import DecodeError, RequestError, UrlError
from exetel.query import Query

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT")

TEXT_MIME = "text/plain"


def _session_with_headers(headers: dict[str, str]) -> requests.Session:
    sess = requests.Session()
    sess.headers.update(headers)
    return sess


@dataclass
class Client:
    """Authenticated client for the Exetel service API.

    Built from an ``Authorization`` (usually via ``Authorization.into_client``);
    the bearer header is attached to the session once, at construction, and
    the client is not modified afterwards.
    """

    authorization: Authorization
    timeout: float | None = None

    def __post_init__(self) -> None:
        headers = build_auth_headers(self.authorization.access_token)
        self.session = _session_with_headers(headers)

    @property
    def config(self) -> ApiConfig:
        return self.authorization.config

    def url_for(self, path: str) -> str:
        url = f"{self.config.api_url}{path}"
        try:
            parsed = parse_url(url)
        except LocationParseError as exc:
            raise UrlError(f"Invalid request URL {url!r}: {exc}") from exc
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise UrlError(f"Invalid request URL {url!r}")
        return url

    def execute(self, query: Query[ResponseT]) -> ResponseT:
        """Send ``query`` and decode its response.

        Queries with a body are POSTed as JSON; the rest are sent as GET.
        """
        path = query.path()
        url = self.url_for(path)
        body = query.body()
        headers = {"Accept": JSON_MIME}

        try:
            if body is not None:
                headers["Content-Type"] = JSON_MIME
                logger.debug(f"POST {url}")
                res = self.session.post(url, data=json.dumps(body), headers=headers, timeout=self.timeout)
            else:
                headers["Content-Type"] = TEXT_MIME
                logger.debug(f"GET {url}")
                res = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RequestError(f"Request to {path} failed: {exc}") from exc

        logger.debug(f"{path} answered HTTP {res.status_code}")
        try:
            payload: Any = res.json()
        except ValueError as exc:
            raise DecodeError(f"Response from {path} (HTTP {res.status_code}) is not valid JSON: {exc}") from exc
        try:
            return query.decode_response(payload)
        except DecodeError as exc:
            raise DecodeError(f"Unexpected response from {path} (HTTP {res.status_code}): {exc}") from exc

    def services(self) -> Services:
        """Return every service on the account."""
        return self.execute(GetServices()).unwrap()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
