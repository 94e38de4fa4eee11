"""Exception hierarchy shared by the exetel modules."""

from __future__ import annotations

from pydantic import ValidationError


class ExetelError(Exception):
    """Base class for every error raised by this package."""

    pass


class FormatError(ExetelError, ValueError):
    """A price, percentage or date value does not match its wire format."""

    pass


class AuthError(ExetelError):
    """Login failed or the resulting token cannot be used."""

    pass


class RequestError(ExetelError):
    """The HTTP request could not be completed."""

    pass


class DecodeError(ExetelError, ValueError):
    """A response body is not JSON or does not match the expected schema."""

    pass


class UrlError(ExetelError):
    """A request URL could not be built."""

    pass


def describe_validation_error(exc: ValidationError) -> str:
    """Render every error as ``'wire.path': message``, joined with ``; ``."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        parts.append(f"'{location}': {error['msg']}" if location else error["msg"])
    return "; ".join(parts)
