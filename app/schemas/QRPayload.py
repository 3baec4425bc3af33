import enum
import re
from datetime import datetime, timezone
from typing import Annotated, Literal, Optional, Union
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator, model_validator

from app.core.errors import InvalidPayload


class QRPayloadType(str, enum.Enum):
    URL = "url"
    TEXT = "text"
    USSD = "ussd"
    PHONE = "phone"
    SMS = "sms"
    EMAIL = "email"
    WIFI = "wifi"
    LOCATION = "location"
    VCARD = "vcard"
    EVENT = "event"


QR_TYPE_LABELS = {
    "url": "Website URL",
    "text": "Plain Text",
    "ussd": "USSD Code",
    "phone": "Phone Number",
    "sms": "SMS Message",
    "email": "Email",
    "wifi": "WiFi Network",
    "location": "Location",
    "vcard": "Contact Card",
    "event": "Calendar Event",
}

WIFI_SECURITY = {"WPA": "WPA", "WEP": "WEP", "NOPASS": "nopass"}

_PHONE_RE = re.compile(r"\+?[0-9 ()\-.]+")
_EMAIL_RE = re.compile(r"[^@\s]+@[^@\s]+")


def validate_http_url(value: str) -> str:
    value = value.strip()
    # Length check
    if len(value) > 2048:
        raise ValueError('URL must be less than 2048 characters')
    parsed = urlparse(value)
    # Only allow http/https
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError('Only absolute HTTP and HTTPS URLs are allowed')
    return value


def _validate_phone(value: str) -> str:
    value = value.strip()
    if not _PHONE_RE.fullmatch(value) or not any(c.isdigit() for c in value):
        raise ValueError('Invalid phone number')
    return value


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True)


class UrlPayload(_Payload):
    type: Literal["url"] = "url"
    url: str

    @field_validator('url')
    def validate_url(cls, v):
        return validate_http_url(v)


class TextPayload(_Payload):
    type: Literal["text"] = "text"
    text: str = Field(..., min_length=1)


class UssdPayload(_Payload):
    type: Literal["ussd"] = "ussd"
    code: str = Field(..., min_length=1)


class PhonePayload(_Payload):
    type: Literal["phone"] = "phone"
    number: str

    @field_validator('number')
    def validate_number(cls, v):
        return _validate_phone(v)


class SmsPayload(_Payload):
    type: Literal["sms"] = "sms"
    number: str
    message: Optional[str] = None

    @field_validator('number')
    def validate_number(cls, v):
        return _validate_phone(v)


class EmailPayload(_Payload):
    type: Literal["email"] = "email"
    address: str
    subject: Optional[str] = None
    body: Optional[str] = None

    @field_validator('address')
    def validate_address(cls, v):
        v = v.strip()
        if not _EMAIL_RE.fullmatch(v):
            raise ValueError('Invalid email address')
        return v


class WifiPayload(_Payload):
    type: Literal["wifi"] = "wifi"
    ssid: str = Field(..., min_length=1)
    password: str = ""
    security: str = "WPA"
    hidden: bool = False

    @field_validator('security')
    def validate_security(cls, v):
        try:
            return WIFI_SECURITY[v.strip().upper()]
        except KeyError:
            raise ValueError('security must be one of WPA, WEP, nopass')


class LocationPayload(_Payload):
    type: Literal["location"] = "location"
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class VCardPayload(_Payload):
    type: Literal["vcard"] = "vcard"
    full_name: str = Field(..., min_length=1)
    org: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None


class EventPayload(_Payload):
    type: Literal["event"] = "event"
    title: str = Field(..., min_length=1)
    start: datetime
    end: datetime
    description: Optional[str] = None
    location: Optional[str] = None

    @model_validator(mode='after')
    def validate_range(self):
        if to_utc(self.end) < to_utc(self.start):
            raise ValueError('event end must not be before start')
        return self


def to_utc(value: datetime) -> datetime:
    # Naive datetimes are read as local wall-clock time
    return value.astimezone(timezone.utc)


QRPayload = Annotated[
    Union[
        UrlPayload,
        TextPayload,
        UssdPayload,
        PhonePayload,
        SmsPayload,
        EmailPayload,
        WifiPayload,
        LocationPayload,
        VCardPayload,
        EventPayload,
    ],
    Field(discriminator="type"),
]

_payload_adapter = TypeAdapter(QRPayload)


def parse_payload(data: dict):
    """Build the typed payload for ``data['type']``, raising InvalidPayload on bad input."""
    try:
        return _payload_adapter.validate_python(data)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise InvalidPayload(errors) from e
