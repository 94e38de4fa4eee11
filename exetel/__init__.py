"""Typed client for the Exetel customer account API.

This package provides:
- Username/password login producing a short-lived bearer ``Authorization``
- An authenticated ``Client`` that issues typed queries
- Typed service records with the API's price, percentage and date encodings

See https://webservices.api.exetel.com.au/doc/ for the upstream API.
"""

from exetel.auth import Authorization, TokenType
from exetel.client import Client
from exetel.config import ApiConfig
from exetel.customer import (
    BroadbandService,
    Envelope,
    GetServices,
    MobileService,
    PhoneService,
    Service,
    Services,
    VoipService,
)
from exetel.errors import AuthError, DecodeError, ExetelError, FormatError, RequestError, UrlError
from exetel.query import Query
from exetel.scalars import Percentage, Price

__all__ = [
    "ApiConfig",
    "AuthError",
    "Authorization",
    "BroadbandService",
    "Client",
    "DecodeError",
    "Envelope",
    "ExetelError",
    "FormatError",
    "GetServices",
    "MobileService",
    "Percentage",
    "PhoneService",
    "Price",
    "Query",
    "RequestError",
    "Service",
    "Services",
    "TokenType",
    "UrlError",
    "VoipService",
]
