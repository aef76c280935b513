"""
Partner catalog integration.

Modules:
    signing    - AWS Signature Version 4 request signing
    api_client - GetItems client and offer price parsing
"""

from .api_client import CatalogAPIClient, build_payload, encode_payload, parse_prices
from .signing import (
    SigningConfig,
    SigningContext,
    amz_date,
    build_signed_headers,
    canonicalize_headers,
    derive_signing_key,
    sign_request,
)

__all__ = [
    'CatalogAPIClient',
    'SigningConfig',
    'SigningContext',
    'amz_date',
    'build_payload',
    'build_signed_headers',
    'canonicalize_headers',
    'derive_signing_key',
    'encode_payload',
    'parse_prices',
    'sign_request',
]
