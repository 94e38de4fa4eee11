from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

import requests
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, ValidationError
from pydantic.alias_generators import to_camel
from requests.exceptions import InvalidHeader
from requests.utils import check_header_validity

from exetel.config import DEFAULT_CONFIG, ApiConfig
from exetel.errors import AuthError, describe_validation_error

if TYPE_CHECKING:
    from exetel.client import Client

logger = logging.getLogger(__name__)

JSON_MIME = "application/json"


class TokenType(str, Enum):
    BEARER = "Bearer"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def build_login_body(username: str, password: str, access_token: str | None = None) -> dict[str, Any]:
    """Return the postLogin payload; ``accessToken`` is left out when absent."""
    body: dict[str, Any] = {}
    if access_token is not None:
        body["accessToken"] = access_token
    body["password"] = password
    body["persistLogin"] = False
    body["username"] = username
    return body


def build_login_headers(config: ApiConfig = DEFAULT_CONFIG) -> dict[str, str]:
    # The login endpoint rejects requests that do not look like they came from the portal.
    return {
        "Origin": config.origin_url,
        "Referer": config.referer_url,
        "Accept": JSON_MIME,
        "Content-Type": JSON_MIME,
    }


def build_auth_headers(token: str) -> dict[str, str]:
    """Return the default headers for an authenticated client.

    Raises AuthError if the token cannot be sent as a header value.
    """
    header = ("Authorization", f"Bearer {token}")
    try:
        check_header_validity(header)
        header[1].encode("latin-1")
    except (InvalidHeader, UnicodeEncodeError) as exc:
        raise AuthError(f"Access token cannot be used in an Authorization header: {exc}") from exc
    if "\r" in token or "\n" in token:
        raise AuthError("Access token cannot be used in an Authorization header: contains a line break")
    return dict([header])


class LoginResponse(BaseModel):
    """Body of a successful postLogin call."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    token_type: TokenType
    expires_in: StrictInt = Field(ge=0)
    access_token: StrictStr
    refresh_token: StrictStr
    persist_login: StrictBool


@dataclass(frozen=True, repr=False)
class Authorization:
    """Tokens returned by a successful login.

    ``issued_at`` is taken when the login response arrives, so ``expires_at``
    errs on the late side by the request latency. The refresh token is kept
    for callers but never used here.
    """

    issued_at: datetime
    token: str
    expires_in: int
    refresh_token: str
    token_type: TokenType = TokenType.BEARER
    persist_login: bool = False
    config: ApiConfig = field(default=DEFAULT_CONFIG, compare=False)

    REFRESH_WINDOW: ClassVar[timedelta] = timedelta(minutes=5)

    @classmethod
    def authenticate(
        cls,
        username: str,
        password: str,
        *,
        session: requests.Session | None = None,
        config: ApiConfig | None = None,
    ) -> Authorization:
        """Log in with a username and password.

        Pass ``session`` to reuse an existing connection pool for the login
        request.
        """
        config = config or DEFAULT_CONFIG
        post = session.post if session is not None else requests.post
        payload = json.dumps(build_login_body(username, password))

        logger.debug(f"Logging in to {config.login_url} as {username}")
        try:
            res = post(config.login_url, data=payload, headers=build_login_headers(config))
        except requests.RequestException as exc:
            raise AuthError(f"Login request failed: {exc}") from exc
        issued_at = _now()

        if not 200 <= res.status_code < 300:
            try:
                detail = res.json()
            except ValueError:
                detail = res.text
            logger.error(f"Login failed for {username}: HTTP {res.status_code}")
            raise AuthError(f"Login failed: {res.status_code} {detail}")

        try:
            data = res.json()
        except ValueError as exc:
            raise AuthError(f"Login response is not valid JSON: {exc}") from exc

        auth = cls.from_login_response(data, issued_at=issued_at, config=config)
        logger.info(f"Authenticated {username}; token expires in {auth.expires_in}s")
        return auth

    @classmethod
    def from_login_response(
        cls, data: Any, issued_at: datetime, config: ApiConfig | None = None
    ) -> Authorization:
        try:
            response = LoginResponse.model_validate(data)
        except ValidationError as exc:
            raise AuthError(f"Invalid login response: {describe_validation_error(exc)}") from exc
        try:
            issued_at + timedelta(seconds=response.expires_in)
        except OverflowError as exc:
            raise AuthError(f"Login response expiresIn is out of range: {response.expires_in}") from exc
        return cls(
            issued_at=issued_at,
            token=response.access_token,
            expires_in=response.expires_in,
            refresh_token=response.refresh_token,
            token_type=response.token_type,
            persist_login=response.persist_login,
            config=config or DEFAULT_CONFIG,
        )

    @property
    def access_token(self) -> str:
        return self.token

    @property
    def expires_at(self) -> datetime:
        return self.issued_at + timedelta(seconds=self.expires_in)

    def should_refresh(self, now: datetime | None = None) -> bool:
        """True once the token is more than ``REFRESH_WINDOW`` past its expiry."""
        now = now or _now()
        return now > self.expires_at + self.REFRESH_WINDOW

    def into_client(self, timeout: float | None = None) -> Client:
        """Hand this authorization to a new authenticated Client."""
        from exetel.client import Client

        return Client(authorization=self, timeout=timeout)

    def to_dict(self) -> dict[str, Any]:
        return {
            "issuedAt": self.issued_at.isoformat(),
            "tokenType": self.token_type.value,
            "expiresIn": self.expires_in,
            "accessToken": self.token,
            "refreshToken": self.refresh_token,
            "persistLogin": self.persist_login,
        }

    @classmethod
    def from_dict(cls, data: Any, config: ApiConfig | None = None) -> Authorization:
        """Restore an authorization saved with ``to_dict``."""
        if not isinstance(data, dict):
            raise AuthError(f"Saved authorization is not a JSON object: {type(data).__name__}")
        raw_issued = data.get("issuedAt")
        if not isinstance(raw_issued, str):
            raise AuthError("Saved authorization missing 'issuedAt'")
        try:
            issued_at = datetime.fromisoformat(raw_issued)
        except ValueError as exc:
            raise AuthError(f"Saved authorization has invalid 'issuedAt': {raw_issued!r}") from exc
        if issued_at.tzinfo is None:
            issued_at = issued_at.replace(tzinfo=timezone.utc)
        return cls.from_login_response(data, issued_at=issued_at, config=config)

    def __repr__(self) -> str:
        return (
            f"Authorization(token_type={self.token_type.value!r}, "
            f"issued_at={self.issued_at.isoformat()!r}, expires_in={self.expires_in})"
        )
