from jupiter_swap_api.core.exceptions import (
    AddressFormatError,
    AmountParseError,
    Base64DecodeError,
    DecodingError,
    EncodingError,
    JupiterClientError,
    ProviderMisconfigured,
    RequestFailedError,
    TransportError,
    UnrecognizedVariantError,
    decoding_error_from_validation,
)
from jupiter_swap_api.core.fixtures import FixtureVersionError, load_fixture, load_fixture_set, load_json_fixture
from jupiter_swap_api.core.request_spec import RequestSpec, canonicalize_headers, canonicalize_query

__all__ = [
    "AddressFormatError",
    "AmountParseError",
    "Base64DecodeError",
    "DecodingError",
    "EncodingError",
    "FixtureVersionError",
    "JupiterClientError",
    "ProviderMisconfigured",
    "RequestFailedError",
    "RequestSpec",
    "TransportError",
    "UnrecognizedVariantError",
    "canonicalize_headers",
    "canonicalize_query",
    "decoding_error_from_validation",
    "load_fixture",
    "load_fixture_set",
    "load_json_fixture",
]
