"""
Request signing for the partner catalog API.

Implements the AWS Signature Version 4 scheme from hash primitives:

    canonical request -> string to sign -> derived key -> signature

Every function here is pure. The signature covers the exact header set,
payload bytes and timestamp it was computed over; changing any of them
invalidates it.
"""

import hashlib
import hmac
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional, Tuple, Union

from ..common import constants
from ..models import CatalogCredentials

ALGORITHM = "AWS4-HMAC-SHA256"
SCOPE_TERMINATOR = "aws4_request"


@dataclass(frozen=True)
class SigningConfig:
    """Where a signed call goes and which service scope it is signed for."""
    host: str = constants.CATALOG_HOST
    path: str = constants.CATALOG_PATH
    region: str = constants.CATALOG_REGION
    service: str = constants.CATALOG_SERVICE
    target: str = constants.CATALOG_TARGET
    method: str = "POST"


@dataclass(frozen=True)
class SigningContext:
    """Everything a single signature is computed over."""
    method: str
    path: str
    headers: Mapping[str, str]
    payload: bytes
    amz_date: str
    region: str
    service: str
    credentials: CatalogCredentials = field(repr=False)


def sha256_hex(data: Union[str, bytes]) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def hmac_sha256(key: Union[str, bytes], message: str) -> bytes:
    """Raw HMAC-SHA256 digest (bytes, not hex)."""
    if isinstance(key, str):
        key = key.encode("utf-8")
    return hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()


def amz_date(now: Optional[datetime] = None) -> str:
    """
    ISO-8601 basic timestamp in UTC, e.g. ``20240131T094500Z``.

    Naive datetimes are taken as UTC.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def canonicalize_headers(headers: Mapping[str, str]) -> Tuple[str, str]:
    """
    Sort headers by lower-cased name.

    Returns:
        (signed_headers, canonical_headers) where signed_headers is the
        semicolon-joined name list and canonical_headers is ``name:value\\n``
        per header in the same order.
    """
    items = sorted((name.lower(), value) for name, value in headers.items())
    signed = ";".join(name for name, _ in items)
    canonical = "".join(f"{name}:{value}\n" for name, value in items)
    return signed, canonical


def build_canonical_request(method: str, path: str, headers: Mapping[str, str], payload_hash: str) -> str:
    # Query string is always empty
    signed, canonical = canonicalize_headers(headers)
    return f"{method.upper()}\n{path}\n\n{canonical}\n{signed}\n{payload_hash}"


def credential_scope(date_stamp: str, region: str, service: str) -> str:
    return f"{date_stamp}/{region}/{service}/{SCOPE_TERMINATOR}"


def build_string_to_sign(timestamp: str, scope: str, canonical_request: str) -> str:
    return f"{ALGORITHM}\n{timestamp}\n{scope}\n{sha256_hex(canonical_request)}"


def derive_signing_key(secret_key: str, date_stamp: str, region: str, service: str) -> bytes:
    """Chained HMAC: date -> region -> service -> terminator."""
    k_date = hmac_sha256("AWS4" + secret_key, date_stamp)
    k_region = hmac_sha256(k_date, region)
    k_service = hmac_sha256(k_region, service)
    return hmac_sha256(k_service, SCOPE_TERMINATOR)


def sign_request(context: SigningContext) -> str:
    """
    Compute the ``Authorization`` header value for one request.

    Key shape is not validated; bad credentials surface as an upstream
    HTTP error, never here.
    """
    creds = context.credentials
    date_stamp = context.amz_date[:8]

    payload_hash = sha256_hex(context.payload)
    canonical_request = build_canonical_request(
        context.method, context.path, context.headers, payload_hash
    )
    scope = credential_scope(date_stamp, context.region, context.service)
    string_to_sign = build_string_to_sign(context.amz_date, scope, canonical_request)

    signing_key = derive_signing_key(creds.secret_key, date_stamp, context.region, context.service)
    signature = hmac.new(signing_key, string_to_sign.encode("utf-8"), hashlib.sha256).hexdigest()

    signed_headers, _ = canonicalize_headers(context.headers)
    return (
        f"{ALGORITHM} Credential={creds.access_key}/{scope}, "
        f"SignedHeaders={signed_headers}, Signature={signature}"
    )


def build_signed_headers(
    config: SigningConfig,
    credentials: CatalogCredentials,
    payload: bytes,
    now: Optional[datetime] = None,
) -> Dict[str, str]:
    """
    Build the complete header set for a catalog call, Authorization included.

    The timestamp is captured once and used for both ``x-amz-date`` and the
    credential scope.
    """
    timestamp = amz_date(now)
    headers = {
        "content-encoding": constants.CONTENT_ENCODING,
        "content-type": constants.CONTENT_TYPE,
        "host": config.host,
        "x-amz-date": timestamp,
        "x-amz-target": config.target,
    }
    context = SigningContext(
        method=config.method,
        path=config.path,
        headers=dict(headers),
        payload=payload,
        amz_date=timestamp,
        region=config.region,
        service=config.service,
        credentials=credentials,
    )
    headers["Authorization"] = sign_request(context)
    return headers
