"""
Feed pipeline: fetch, parse, extract, normalize, resolve categories, upsert
"""
from typing import List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from feedsync.core.exceptions import ConfigurationError, IngestionError
from feedsync.core.logging import log
from feedsync.models.feed import FeedMode, SupplierFeed
from feedsync.repositories.category import CategoryRepository
from feedsync.repositories.product import ProductRepository
from feedsync.schemas.feed import FeedRunResult
from feedsync.schemas.product import CanonicalProductRecord, SkipReason
from feedsync.services.category_resolver import CategoryResolver, parse_category_listing
from feedsync.services.fetcher import DocumentFetcher
from feedsync.services.parser import parse_document
from feedsync.services.profiles import get_profile
from feedsync.services.record_builder import ParsedOfferRecord, build_record
from feedsync.services.upsert_engine import UpsertEngine
from feedsync.utils.tree import as_list, extract_path

SKIP_COUNTERS = {
    SkipReason.MISSING_SKU: "skipped_missing_sku",
    SkipReason.MISSING_NAME: "skipped_missing_name",
    SkipReason.INVALID_PRICE: "skipped_invalid_price",
}


class FeedPipeline:
    """Runs one feed end to end and reports its counters"""

    def __init__(
        self,
        session: AsyncSession,
        fetcher: Optional[DocumentFetcher] = None,
        upsert_engine: Optional[UpsertEngine] = None,
    ):
        self.session = session
        self.fetcher = fetcher or DocumentFetcher()
        self.upsert_engine = upsert_engine or UpsertEngine(ProductRepository(session))

    async def run(self, feed: SupplierFeed, mode: Optional[FeedMode] = None) -> FeedRunResult:
        """
        Run the feed in `mode` (defaults to the feed's own mode).

        Fetch, parse, configuration and write failures end the run and are
        reported on the result; they are not raised.
        """
        mode = FeedMode(mode or feed.mode)
        result = FeedRunResult(feed_id=feed.id, mode=mode)
        bound = log.bind(feed_id=str(feed.id), feed=feed.name, mode=mode.value)

        try:
            await self._run(feed, mode, result, bound)
        except IngestionError as e:
            result.failure = str(e)
            if "written" in e.context:
                result.written = e.context["written"]
            bound.error("Feed run failed", error=str(e), error_type=e.__class__.__name__)
            return result

        bound.info(
            "Feed run finished",
            seen=result.seen,
            written=result.written,
            created=result.created,
            updated=result.updated,
            skipped=result.skipped,
        )
        return result

    async def _run(self, feed: SupplierFeed, mode: FeedMode, result: FeedRunResult, bound):
        profile = get_profile(feed.vendor_profile)
        item_path = feed.item_path or profile.item_path
        if not item_path:
            raise ConfigurationError("Feed has no item path")

        # Fetching / Parsing
        document = parse_document(await self.fetcher.fetch(feed.url))

        # Extracting / Normalizing
        records: List[CanonicalProductRecord] = []
        for node in as_list(extract_path(document, item_path)):
            result.seen += 1
            outcome = build_record(ParsedOfferRecord(node, feed, profile), mode)
            if isinstance(outcome, SkipReason):
                counter = SKIP_COUNTERS[outcome]
                setattr(result, counter, getattr(result, counter) + 1)
                bound.debug("Offer skipped", reason=outcome.value, position=result.seen)
                continue
            records.append(outcome)
        bound.debug("Offers extracted", seen=result.seen, usable=len(records), skipped=result.skipped)

        # Resolving categories (availability syncs never write categories)
        if mode == FeedMode.FULL_IMPORT:
            await self._resolve_categories(document, feed, profile.category_list_path, records, result)

        # Upserting
        written = await self.upsert_engine.write(records, mode)
        result.written = written.written
        result.created = written.created
        result.updated = written.updated

    async def _resolve_categories(self, document, feed, default_listing_path, records, result: FeedRunResult):
        if not any(record.category_ref for record in records):
            return

        resolver = CategoryResolver(CategoryRepository(self.session))
        listing = parse_category_listing(document, feed.category_list_path or default_listing_path)
        if listing:
            await resolver.load_listing(listing)

        for record in records:
            record.category_id = await resolver.resolve(record.category_ref)
        result.errors.extend(resolver.errors)
