"""
API Dependencies for dependency injection
"""
import hmac
from typing import Annotated, Optional

from fastapi import Depends, Header
from sqlmodel.ext.asyncio.session import AsyncSession

from feedsync.core.config import settings
from feedsync.core.database import get_async_session
from feedsync.core.exceptions import ForbiddenError
from feedsync.core.logging import log
from feedsync.repositories import FeedRepository
from feedsync.services import DocumentFetcher, FeedPipeline, FeedRunOrchestrator, VendorImportService


# Database session
AsyncSessionDep = Annotated[AsyncSession, Depends(get_async_session)]


async def get_fetcher() -> DocumentFetcher:
    """Document fetcher with the configured timeout"""
    return DocumentFetcher()


FetcherDep = Annotated[DocumentFetcher, Depends(get_fetcher)]


async def get_feed_repository(session: AsyncSessionDep) -> FeedRepository:
    """Get feed repository instance"""
    return FeedRepository(session)


FeedRepoDep = Annotated[FeedRepository, Depends(get_feed_repository)]


# Services
async def get_pipeline(session: AsyncSessionDep, fetcher: FetcherDep) -> FeedPipeline:
    return FeedPipeline(session, fetcher=fetcher)


PipelineDep = Annotated[FeedPipeline, Depends(get_pipeline)]


async def get_orchestrator(session: AsyncSessionDep, pipeline: PipelineDep) -> FeedRunOrchestrator:
    """Get feed run orchestrator instance"""
    return FeedRunOrchestrator(session, pipeline=pipeline)


async def get_vendor_import_service(session: AsyncSessionDep, pipeline: PipelineDep) -> VendorImportService:
    """Get single-vendor import service instance"""
    return VendorImportService(session, pipeline=pipeline)


OrchestratorDep = Annotated[FeedRunOrchestrator, Depends(get_orchestrator)]
VendorImportDep = Annotated[VendorImportService, Depends(get_vendor_import_service)]


# Shared-secret check for the vendor import endpoint
async def require_import_secret(
    x_import_secret: Optional[str] = Header(None, alias="X-Import-Secret")
) -> None:
    """Reject the request unless X-Import-Secret matches the configured secret"""
    expected = settings.import_secret
    if not expected or not x_import_secret or not hmac.compare_digest(x_import_secret, expected):
        log.warning("Import secret check failed", provided=bool(x_import_secret))
        raise ForbiddenError()


ImportSecretDep = Annotated[None, Depends(require_import_secret)]
