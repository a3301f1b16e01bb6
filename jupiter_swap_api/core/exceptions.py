from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError


class ProviderMisconfigured(RuntimeError):
    pass


class JupiterClientError(RuntimeError):
    pass


class EncodingError(JupiterClientError, ValueError):
    """A domain value has no wire representation."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class DecodingError(JupiterClientError, ValueError):
    """A wire value is malformed for the field it was read into."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(f"{field}: {message}" if field else message)
        self.reason = message
        self.field = field
        self.value = value


class AmountParseError(DecodingError):
    pass


class AddressFormatError(DecodingError):
    pass


class Base64DecodeError(DecodingError):
    pass


class UnrecognizedVariantError(DecodingError):
    pass


class RequestFailedError(JupiterClientError):
    def __init__(self, status_code: int, body: str, url: Optional[str] = None) -> None:
        super().__init__(f"Request failed with status {status_code}: {body}")
        self.status_code = status_code
        self.body = body
        self.url = url


class TransportError(JupiterClientError):
    pass


def decoding_error_from_validation(exc: ValidationError, context: str, prefix: Optional[str] = None) -> DecodingError:
    """Convert the first validation failure into a ``DecodingError`` naming the wire field."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    parts = [str(part) for part in first.get("loc", ())]
    if prefix:
        parts.insert(0, prefix)
    cause = first.get("ctx", {}).get("error")
    if isinstance(cause, DecodingError):
        if cause.field:
            parts.append(cause.field)
        field = ".".join(parts) or None
        value = first.get("input") if cause.value is None else cause.value
        return type(cause)(f"{context}: {cause.reason}", field=field, value=value)
    field = ".".join(parts) or None
    return DecodingError(f"{context}: {first.get('msg', str(exc))}", field=field, value=first.get("input"))
