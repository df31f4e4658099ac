"""
Single-vendor YML import endpoint
"""
from typing import Optional

from fastapi import APIRouter

from feedsync.api.deps import ImportSecretDep, VendorImportDep
from feedsync.core.config import settings
from feedsync.core.exceptions import BadRequestError, ImportFailedError
from feedsync.schemas.feed import VendorImportRequest, VendorImportResponse

router = APIRouter()


@router.post("/yml", response_model=VendorImportResponse)
async def import_yml(
    _: ImportSecretDep,
    service: VendorImportDep,
    request: Optional[VendorImportRequest] = None,
) -> VendorImportResponse:
    """
    Import a YML catalog: new SKUs are created, known SKUs are overwritten.
    Products missing from the catalog file are left untouched.
    """
    url = (request.url if request and request.url else settings.import_feed_url).strip()
    if not url:
        raise BadRequestError("Missing url parameter")

    result = await service.run(url)
    if not result.ok:
        raise ImportFailedError(result.failure)

    return VendorImportResponse(
        ok=True,
        url=url,
        offers=result.seen,
        created=result.created,
        # Full overwrites of known SKUs, reported under the legacy field name
        updatedStock=result.updated,
        skippedNoSku=result.skipped_missing_sku,
        errors=result.errors,
    )
