"""Customer account records and the queries that fetch them."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Annotated, Any, Generic, TypeVar

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    PlainSerializer,
    PlainValidator,
    SerializerFunctionWrapHandler,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    WrapSerializer,
)
from pydantic.alias_generators import to_camel

from exetel.errors import DecodeError, describe_validation_error
from exetel.query import Query
from exetel.scalars import (
    Percentage,
    Price,
    format_long_date,
    format_short_date,
    parse_long_date,
    parse_short_date,
)

T = TypeVar("T")

SERVICE_CATEGORIES = ("broadband", "mobile", "phone", "voip")

# Wire codecs; FormatError is a ValueError, so pydantic reports it against the field.
WirePrice = Annotated[Price, PlainValidator(Price.parse), PlainSerializer(Price.format, return_type=str)]
WirePercentage = Annotated[
    Percentage, PlainValidator(Percentage.decode), PlainSerializer(Percentage.encode, return_type=int)
]
LongDate = Annotated[date, PlainValidator(parse_long_date), PlainSerializer(format_long_date, return_type=str)]
ShortDate = Annotated[date, PlainValidator(parse_short_date), PlainSerializer(format_short_date, return_type=str)]


class Envelope(BaseModel, Generic[T]):
    """The ``{"data": ...}`` wrapper the API puts around its payloads."""

    model_config = ConfigDict(frozen=True)

    data: T

    def unwrap(self) -> T:
        return self.data

    @classmethod
    def from_dict(cls, payload: Any) -> Envelope[T]:
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise DecodeError(f"Invalid envelope: {describe_validation_error(exc)}") from exc


class Service(BaseModel):
    """A single service on the customer account.

    Wire keys the record does not model are kept verbatim in ``extra`` and
    written back by ``to_dict`` so newer API fields are not lost.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: StrictInt
    description: StrictStr
    monthly_charge: WirePrice
    contract_start_date: LongDate
    contract_end_date: LongDate
    current_contract: StrictInt
    billing_cycle_progress_percentage: WirePercentage
    in_contract: StrictBool
    payment_via: StrictStr
    payment_expiry: StrictStr | None = None
    plan_change: StrictBool
    service_number: StrictStr
    service_type: StrictStr
    next_billing_cycle_start: ShortDate

    @property
    def extra(self) -> dict[str, Any]:
        return self.model_extra or {}

    @classmethod
    def from_dict(cls, payload: Any) -> Service:
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise DecodeError(f"Invalid service: {describe_validation_error(exc)}") from exc

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class BroadbandService(Service):
    pass


class MobileService(Service):
    pass


class PhoneService(Service):
    pass


class VoipService(Service):
    pass


def _unwrap_envelope(value: Any) -> Any:
    if not isinstance(value, Mapping) or "data" not in value:
        raise ValueError(f"expected a {{'data': [...]}} envelope, got {type(value).__name__}")
    return value["data"]


def _wrap_envelope(records: list[Service], handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
    return {"data": handler(records)}


_UNWRAP = BeforeValidator(_unwrap_envelope)
_REWRAP = WrapSerializer(_wrap_envelope)


class Services(BaseModel):
    """Every service on the account, grouped by category.

    Each category arrives as ``{"data": [...]}``; unknown categories are
    dropped.
    """

    model_config = ConfigDict(extra="ignore")

    broadband: Annotated[list[BroadbandService], _UNWRAP, _REWRAP]
    mobile: Annotated[list[MobileService], _UNWRAP, _REWRAP]
    phone: Annotated[list[PhoneService], _UNWRAP, _REWRAP]
    voip: Annotated[list[VoipService], _UNWRAP, _REWRAP]

    @classmethod
    def from_dict(cls, payload: Any) -> Services:
        """Decode ``{"broadband": {"data": [...]}, ...}``; all or nothing."""
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise DecodeError(f"Invalid services response: {describe_validation_error(exc)}") from exc

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def all(self) -> list[Service]:
        return [*self.broadband, *self.mobile, *self.phone, *self.voip]


class GetServices(Query[Envelope[Services]]):
    """List every service on the authenticated account (``GET /service``)."""

    def path(self) -> str:
        return "/service"

    def decode_response(self, payload: Any) -> Envelope[Services]:
        # Accept the categories either bare or inside a top-level envelope.
        if isinstance(payload, Mapping) and "data" in payload and not set(SERVICE_CATEGORIES) & set(payload):
            return Envelope[Services].from_dict(payload)
        return Envelope[Services](data=Services.from_dict(payload))
