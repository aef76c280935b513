"""
HTTP trigger surface.

POST /sign-request     - signed single-item lookup, returns the raw catalog response
POST /update-products  - runs one multi-tenant price refresh, returns run counters

Run:
  uvicorn src.api.app:app --host 127.0.0.1 --port 8000
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from functools import lru_cache
from typing import Iterator, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..catalog import CatalogAPIClient
from ..common.config_loader import CatalogSettings, load_catalog_settings
from ..common.errors import CatalogSyncError, UpstreamError, ValidationError
from ..models import CatalogCredentials, normalize_asin
from ..persistence import PersistenceGateway, SupabaseGateway
from ..pipeline import ProductUpdater

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Catalog Price Sync",
    description="Signed partner-catalog lookups and scheduled price refresh",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "apikey", "x-device-id"],
)


class CatalogKeys(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_key: Optional[str] = Field(None, alias="accessKey")
    secret_key: Optional[str] = Field(None, alias="secretKey")
    partner_tag: Optional[str] = Field(None, alias="partnerTag")


class SignRequestBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    asin: Optional[str] = None
    credentials: Optional[CatalogKeys] = Field(None, alias="amazonKeys")


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

@lru_cache
def get_settings() -> CatalogSettings:
    return load_catalog_settings()


def get_catalog_client(settings: CatalogSettings = Depends(get_settings)) -> Iterator[CatalogAPIClient]:
    client = CatalogAPIClient(settings)
    try:
        yield client
    finally:
        client.close()


def get_gateway() -> Iterator[PersistenceGateway]:
    try:
        gateway = SupabaseGateway.from_env()
    except ValueError as e:
        raise CatalogSyncError(f"Product store not configured: {e}") from e
    try:
        yield gateway
    finally:
        gateway.close()


# ============================================================================
# ERROR MAPPING
# ============================================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    logger.error("Upstream error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"error": str(exc)})


@app.exception_handler(CatalogSyncError)
async def sync_error_handler(request: Request, exc: CatalogSyncError):
    logger.error("Request to %s failed: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


# ============================================================================
# ROUTES
# ============================================================================

@app.post("/sign-request")
def sign_request(body: SignRequestBody, client: CatalogAPIClient = Depends(get_catalog_client)):
    if not body.asin or body.credentials is None:
        raise ValidationError("Missing Parameters (ASIN, Keys)")

    asin = normalize_asin(body.asin)
    credentials = CatalogCredentials(
        body.credentials.access_key,
        body.credentials.secret_key,
        body.credentials.partner_tag,
    )
    if not credentials.complete:
        raise ValidationError("Missing catalog credentials (accessKey, secretKey, partnerTag)")

    data = client.get_item(asin, credentials)
    logger.debug("Catalog response for %s: %s", asin, str(data)[:500])
    return data


@app.post("/update-products")
def update_products(
    gateway: PersistenceGateway = Depends(get_gateway),
    client: CatalogAPIClient = Depends(get_catalog_client),
    settings: CatalogSettings = Depends(get_settings),
):
    try:
        summary = ProductUpdater(gateway, client, settings).run()
    except CatalogSyncError:
        raise
    except Exception as e:
        logger.exception("Price refresh aborted")
        return JSONResponse(status_code=500, content={"error": str(e)})
    return {"ok": True, **summary.to_dict()}
