"""Encoders turning typed QR payloads into the strings scanners expect.

Each payload type has exactly one encoder. ``ENCODERS`` is checked against
``QRPayloadType`` at import so a new type cannot be added without one.
"""
from decimal import Decimal
from typing import Callable, Dict
from urllib.parse import quote

from app.schemas.QRPayload import (
    EmailPayload,
    EventPayload,
    LocationPayload,
    PhonePayload,
    QRPayloadType,
    SmsPayload,
    TextPayload,
    UrlPayload,
    UssdPayload,
    VCardPayload,
    WifiPayload,
    parse_payload,
    to_utc,
)

# Same unreserved set as JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"

_WIFI_SPECIAL = '\\;,:"'
ICAL_DATE_FORMAT = "%Y%m%dT%H%M%SZ"


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def escape_wifi(value: str) -> str:
    return "".join("\\" + c if c in _WIFI_SPECIAL else c for c in value)


def escape_text_value(value: str) -> str:
    """Escape a vCard / iCalendar TEXT value (RFC 2426, RFC 5545)."""
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def format_ical_datetime(value) -> str:
    return to_utc(value).strftime(ICAL_DATE_FORMAT)


def encode_url(payload: UrlPayload) -> str:
    return payload.url


def encode_text(payload: TextPayload) -> str:
    return payload.text


def encode_ussd(payload: UssdPayload) -> str:
    return payload.code


def encode_phone(payload: PhonePayload) -> str:
    return f"tel:{payload.number}"


def encode_sms(payload: SmsPayload) -> str:
    if payload.message:
        return f"sms:{payload.number}?body={encode_uri_component(payload.message)}"
    return f"sms:{payload.number}"


def encode_email(payload: EmailPayload) -> str:
    parts = []
    if payload.subject:
        parts.append(f"subject={encode_uri_component(payload.subject)}")
    if payload.body:
        parts.append(f"body={encode_uri_component(payload.body)}")
    mailto = f"mailto:{payload.address}"
    return f"{mailto}?{'&'.join(parts)}" if parts else mailto


def encode_wifi(payload: WifiPayload) -> str:
    hidden = "true" if payload.hidden else "false"
    return (
        f"WIFI:T:{payload.security};S:{escape_wifi(payload.ssid)};"
        f"P:{escape_wifi(payload.password)};H:{hidden};;"
    )


def format_coordinate(value: float) -> str:
    """Plain decimal degrees: no exponent, no trailing zeros."""
    return format(Decimal(repr(value)).normalize(), "f")


def encode_location(payload: LocationPayload) -> str:
    return f"geo:{format_coordinate(payload.lat)},{format_coordinate(payload.lon)}"


def encode_vcard(payload: VCardPayload) -> str:
    lines = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"FN:{escape_text_value(payload.full_name)}",
        f"ORG:{escape_text_value(payload.org or '')}",
        f"TEL:{payload.phone or ''}",
        f"EMAIL:{payload.email or ''}",
        f"URL:{payload.website or ''}",
        "END:VCARD",
    ]
    return "\n".join(lines)


def encode_event(payload: EventPayload) -> str:
    lines = [
        "BEGIN:VEVENT",
        f"SUMMARY:{escape_text_value(payload.title)}",
        f"DTSTART:{format_ical_datetime(payload.start)}",
        f"DTEND:{format_ical_datetime(payload.end)}",
        f"DESCRIPTION:{escape_text_value(payload.description or '')}",
        f"LOCATION:{escape_text_value(payload.location or '')}",
        "END:VEVENT",
    ]
    return "\n".join(lines)


ENCODERS: Dict[QRPayloadType, Callable] = {
    QRPayloadType.URL: encode_url,
    QRPayloadType.TEXT: encode_text,
    QRPayloadType.USSD: encode_ussd,
    QRPayloadType.PHONE: encode_phone,
    QRPayloadType.SMS: encode_sms,
    QRPayloadType.EMAIL: encode_email,
    QRPayloadType.WIFI: encode_wifi,
    QRPayloadType.LOCATION: encode_location,
    QRPayloadType.VCARD: encode_vcard,
    QRPayloadType.EVENT: encode_event,
}

_missing = set(QRPayloadType) - set(ENCODERS)
if _missing:
    raise RuntimeError(f"No encoder registered for payload types: {sorted(t.value for t in _missing)}")


def encode(payload) -> str:
    """Return the canonical content string for a typed payload."""
    return ENCODERS[QRPayloadType(payload.type)](payload)


def encode_fields(payload_type: str, fields: dict) -> str:
    """Validate raw ``fields`` for ``payload_type`` and encode them."""
    return encode(parse_payload({**fields, "type": payload_type}))
