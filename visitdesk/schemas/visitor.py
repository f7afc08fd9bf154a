"""Visitor sign-in/sign-out schemas. JSON uses camelCase field names."""
import enum
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class VisitReason(str, enum.Enum):
    """Categories offered on the kiosk. Other free-text reasons are accepted too."""
    meeting = "meeting"
    interview = "interview"
    delivery = "delivery"
    maintenance = "maintenance"
    other = "other"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _required_text(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("must not be empty")
    return v


class VisitorSignIn(CamelModel):
    name: str = Field(..., max_length=200)
    company: str | None = Field(None, max_length=200)
    host_name: str = Field(..., max_length=200)
    visit_reason: str = Field(
        ...,
        max_length=100,
        json_schema_extra={"examples": [r.value for r in VisitReason]},
    )
    photo_data: str | None = None  # data:image/jpeg;base64,...

    @field_validator("name", "host_name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("visit_reason")
    @classmethod
    def known_reason_lowercased(cls, v: str) -> str:
        v = _required_text(v)
        try:
            return VisitReason(v.lower()).value
        except ValueError:
            return v

    @field_validator("company", "photo_data")
    @classmethod
    def blank_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class VisitorSignOut(CamelModel):
    name: str

    @field_validator("name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _required_text(v)


class VisitorResponse(CamelModel):
    id: str
    name: str
    company: str | None
    host_name: str
    visit_reason: str
    photo_data: str | None
    sign_in_time: datetime
    sign_out_time: datetime | None
    is_signed_out: bool
    email_sent: bool
