"""
Wire shapes for the subscriptions API (requests, DTOs, responses)

Request fields default to their zero values so that a missing field reaches
the validators and is reported together with every other violation, rather
than failing decoding. A JSON null counts as a missing field. Only a wrong
JSON type or a malformed MM-YYYY date is a decode error.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator

from mysubs.domain.year_month import YearMonth

STATUS_CREATED = "subscription created"
STATUS_UPDATED = "subscription updated"
STATUS_DELETED = "subscription deleted"


def _year_month(value) -> YearMonth:
    if isinstance(value, YearMonth):
        return value
    if value is None:
        return YearMonth.unset()
    if not isinstance(value, str):
        raise ValueError("must be a string in MM-YYYY format")
    return YearMonth.parse(value)


class CreateRequest(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    service_name: str = ""
    price: int = Field(default=0, strict=True)
    user_id: str = ""
    start_date: YearMonth = Field(default_factory=YearMonth.unset)  # MM-YYYY
    end_date: YearMonth = Field(default_factory=YearMonth.unset)    # MM-YYYY

    @field_validator("service_name", "user_id", mode="before")
    @classmethod
    def null_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("price", mode="before")
    @classmethod
    def null_to_zero(cls, v):
        return 0 if v is None else v

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_year_month(cls, v):
        return _year_month(v)


class UpdateRequest(CreateRequest):
    id: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def null_id_to_empty(cls, v):
        return "" if v is None else v


class SubscriptionDTO(BaseModel):
    service_name: str
    price: int
    user_id: str
    start_date: str
    end_date: str


class MutationResponse(BaseModel):
    """Response for create / update / delete"""
    subscription_id: str
    status: str


class ListResponse(BaseModel):
    subscriptions: list[SubscriptionDTO]


class TotalCostResponse(BaseModel):
    user_id: str
    service_name: str
    from_: str = Field(alias="from")
    to: str
    total_cost: int


class ErrorResponse(BaseModel):
    error: str
