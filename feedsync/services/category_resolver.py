"""
Category resolver: supplier category references -> canonical category ids
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from uuid import UUID

from feedsync.core.exceptions import WriteError
from feedsync.core.logging import log
from feedsync.repositories.category import CategoryRepository
from feedsync.utils.normalization import slugify
from feedsync.utils.tree import as_list, extract_path, text_of


@dataclass(frozen=True)
class FeedCategory:
    """One entry of a supplier's own category listing"""

    id: str
    name: str
    parent_id: Optional[str] = None


def parse_category_listing(tree: Any, path: Optional[str]) -> List[FeedCategory]:
    """Category entries found at `path`; entries without an id or a name are ignored"""
    categories = []
    for entry in as_list(extract_path(tree, path)):
        if not isinstance(entry, dict):
            continue
        category_id = (text_of(entry.get("id")) or "").strip()
        name = (text_of(entry) or text_of(entry.get("name")) or "").strip()
        if not category_id or not name:
            continue
        parent_id = (text_of(entry.get("parentId")) or text_of(entry.get("parent_id")) or "").strip()
        categories.append(FeedCategory(id=category_id, name=name, parent_id=parent_id or None))
    return categories


class CategoryResolver:
    """
    Resolves categories for the duration of one feed run.

    The store is the source of truth (upsert by slug); the in-memory maps only
    avoid repeated round-trips and are dropped with the resolver. Failures are
    logged and yield no category rather than aborting the offer.
    """

    def __init__(self, category_repo: CategoryRepository):
        self.category_repo = category_repo
        self._by_slug: Dict[str, UUID] = {}
        self._by_supplier_id: Dict[str, UUID] = {}
        self._listed_ids = set()
        self.errors: List[str] = []

    async def resolve_name(self, name: str, parent_id: Optional[UUID] = None) -> Optional[UUID]:
        """Canonical id for a category name, creating the category when absent"""
        slug = slugify(name)
        if not slug:
            self.errors.append(f"category '{name}': empty slug")
            return None

        if slug in self._by_slug:
            return self._by_slug[slug]

        try:
            category_id = await self.category_repo.upsert_by_slug(name=name.strip(), slug=slug, parent_id=parent_id)
        except WriteError as e:
            log.warning("Category could not be resolved", category=name, error=str(e))
            self.errors.append(f"category '{name}': {e}")
            return None

        self._by_slug[slug] = category_id
        return category_id

    async def load_listing(self, categories: List[FeedCategory]) -> Dict[str, UUID]:
        """Resolve a supplier listing, parents before children"""
        listed = {category.id: category for category in categories}
        self._listed_ids.update(listed)
        pending = list(categories)

        while pending:
            ready = [
                category for category in pending
                if not category.parent_id
                or category.parent_id not in listed
                or category.parent_id in self._by_supplier_id
            ]
            in_cycle = not ready
            if in_cycle:
                # Parent cycle: the rest are created as roots
                ready = pending

            for category in ready:
                parent_id = None
                if category.parent_id and not in_cycle:
                    parent_id = self._by_supplier_id.get(category.parent_id)
                category_id = await self.resolve_name(category.name, parent_id=parent_id)
                if category_id is not None:
                    self._by_supplier_id[category.id] = category_id
                else:
                    # Children of a failed parent become roots
                    listed.pop(category.id, None)

            ready_ids = {id(category) for category in ready}
            pending = [category for category in pending if id(category) not in ready_ids]

        log.debug("Category listing resolved", listed=len(categories), resolved=len(self._by_supplier_id))
        return dict(self._by_supplier_id)

    async def resolve(self, ref: Optional[str]) -> Optional[UUID]:
        """Canonical id for an offer's category reference (listing id, else a name)"""
        if not ref:
            return None
        if ref in self._by_supplier_id:
            return self._by_supplier_id[ref]
        if ref in self._listed_ids:
            # Listed but failed to resolve
            return None
        return await self.resolve_name(ref)
