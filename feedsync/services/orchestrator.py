"""
Feed run orchestrator: runs feeds one after another with per-feed isolation
"""
from typing import List, Optional
from uuid import UUID

from sqlmodel.ext.asyncio.session import AsyncSession

from feedsync.core.exceptions import NotFoundError, WriteError
from feedsync.core.logging import log
from feedsync.models.feed import FeedMode, SupplierFeed
from feedsync.repositories.feed import FeedRepository
from feedsync.schemas.feed import FeedRunResult, FeedRunSummary
from feedsync.services.feed_pipeline import FeedPipeline
from feedsync.utils.timestamps import utcnow


class FeedRunOrchestrator:
    """Selects feeds, runs each through the pipeline and records its status"""

    def __init__(self, session: AsyncSession, pipeline: Optional[FeedPipeline] = None):
        self.session = session
        self.feed_repo = FeedRepository(session)
        self.pipeline = pipeline or FeedPipeline(session)

    async def select_feeds(self, feed_id: Optional[UUID]) -> List[SupplierFeed]:
        if feed_id is None:
            return await self.feed_repo.get_enabled()

        feed = await self.feed_repo.get(id=feed_id)
        if feed is None:
            raise NotFoundError(f"Feed {feed_id} not found")
        return [feed]

    async def run(self, *, op: Optional[FeedMode] = None, feed_id: Optional[UUID] = None) -> FeedRunSummary:
        """
        Run one feed in its own mode, or every enabled feed in `op`
        (availability sync when no op is given).

        A status that cannot be stored does not stop later feeds; the first
        such WriteError is raised after the last feed has run.
        """
        feeds = await self.select_feeds(feed_id)
        mode = None if feed_id is not None else FeedMode(op or FeedMode.STOCK_ONLY)
        log.info("Feed run started", feeds=len(feeds), mode=mode.value if mode else "per-feed")

        # A rollback expires loaded rows, so each feed is reloaded before it runs
        feed_ids = [feed.id for feed in feeds]

        summary = FeedRunSummary()
        unrecorded: List[WriteError] = []
        for current_id in feed_ids:
            feed = await self.feed_repo.get(id=current_id)
            result = await self._run_one(feed, mode)
            summary.results.append(result)
            if result.ok:
                summary.updated += result.written

            try:
                await self.feed_repo.record_run(current_id, result.status_line(), when=utcnow())
            except WriteError as e:
                log.error("Feed status not recorded", feed_id=str(current_id), error=e.message)
                unrecorded.append(e)

        log.info(
            "Feed run finished",
            feeds=len(feeds),
            updated=summary.updated,
            failed=summary.failed,
            unrecorded=len(unrecorded),
        )
        if unrecorded:
            # Raised only once every feed has run
            raise unrecorded[0]
        return summary

    async def _run_one(self, feed: SupplierFeed, mode: Optional[FeedMode]) -> FeedRunResult:
        feed_id, feed_mode = feed.id, FeedMode(mode or feed.mode)
        try:
            return await self.pipeline.run(feed, mode)
        except Exception as e:
            # Isolate unexpected failures to this feed
            log.opt(exception=e).error("Feed run crashed", feed_id=str(feed_id))
            await self.session.rollback()
            return FeedRunResult(
                feed_id=feed_id,
                mode=feed_mode,
                failure=f"{e.__class__.__name__}: {e}",
            )
