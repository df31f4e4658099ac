"""
Upsert engine: chunked, SKU-keyed writes of canonical records
"""
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, TypeVar

from feedsync.core.config import settings
from feedsync.core.exceptions import WriteError
from feedsync.core.logging import log
from feedsync.models.feed import FeedMode
from feedsync.repositories.product import ProductRepository
from feedsync.schemas.product import CanonicalProductRecord

T = TypeVar("T")


def chunked(items: List[T], size: int) -> Iterator[List[T]]:
    """Consecutive slices of at most `size` items"""
    if size < 1:
        raise ValueError("chunk size must be positive")
    for start in range(0, len(items), size):
        yield items[start:start + size]


def dedupe_by_sku(records: List[CanonicalProductRecord]) -> List[CanonicalProductRecord]:
    """One record per SKU; the last offer wins, the first position is kept"""
    by_sku: Dict[str, CanonicalProductRecord] = {}
    for record in records:
        by_sku[record.sku] = record
    return list(by_sku.values())


@dataclass
class UpsertOutcome:
    written: int = 0
    created: int = 0
    updated: int = 0


class UpsertEngine:
    """
    Writes records chunk by chunk. Each chunk commits on its own: a failing
    chunk stops the remaining ones, earlier chunks stay written.
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        stock_only_chunk_size: Optional[int] = None,
        full_import_chunk_size: Optional[int] = None,
    ):
        self.product_repo = product_repo
        self.chunk_sizes = {
            FeedMode.STOCK_ONLY: stock_only_chunk_size or settings.stock_only_chunk_size,
            FeedMode.FULL_IMPORT: full_import_chunk_size or settings.full_import_chunk_size,
        }

    async def write(self, records: List[CanonicalProductRecord], mode: FeedMode) -> UpsertOutcome:
        records = dedupe_by_sku(records)
        if not records:
            return UpsertOutcome()

        existing = await self.product_repo.get_availability_by_skus(record.sku for record in records)
        if mode == FeedMode.STOCK_ONLY:
            return await self._write_stock(records, existing)
        return await self._write_full(records, existing)

    async def _write_full(self, records: List[CanonicalProductRecord], existing: Dict[str, bool]) -> UpsertOutcome:
        outcome = UpsertOutcome()
        for chunk in chunked(records, self.chunk_sizes[FeedMode.FULL_IMPORT]):
            await self._write_chunk(self.product_repo.upsert_full, [record.full_row() for record in chunk], outcome)
            known = sum(1 for record in chunk if record.sku in existing)
            outcome.updated += known
            outcome.created += len(chunk) - known
        return outcome

    async def _write_stock(self, records: List[CanonicalProductRecord], existing: Dict[str, bool]) -> UpsertOutcome:
        # Unknown SKUs are never created; unchanged availability is not rewritten
        changed = [
            record for record in records
            if record.sku in existing and existing[record.sku] != record.in_stock
        ]
        log.debug(
            "Availability changes selected",
            offered=len(records),
            known=sum(1 for record in records if record.sku in existing),
            changed=len(changed),
        )

        outcome = UpsertOutcome()
        for chunk in chunked(changed, self.chunk_sizes[FeedMode.STOCK_ONLY]):
            await self._write_chunk(self.product_repo.update_availability, [record.stock_row() for record in chunk], outcome)
            outcome.updated += len(chunk)
        return outcome

    async def _write_chunk(self, write, rows, outcome: UpsertOutcome):
        try:
            outcome.written += await write(rows)
        except WriteError as e:
            e.context["written"] = outcome.written
            log.error("Chunk write failed", written=outcome.written, error=str(e))
            raise
