from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

ResponseT = TypeVar("ResponseT")


class Query(ABC, Generic[ResponseT]):
    """A request that can be issued against the Exetel service API.

    Subclasses name the path below the API prefix, optionally a JSON body,
    and how to turn the decoded JSON payload into their response type.
    Queries without a body are sent as GET, the rest as POST.
    """

    @abstractmethod
    def path(self) -> str:
        """Path below the API prefix, starting with ``/``."""

    def body(self) -> Any | None:
        return None

    @abstractmethod
    def decode_response(self, payload: Any) -> ResponseT:
        """Build the typed response; raise DecodeError on a schema mismatch."""
