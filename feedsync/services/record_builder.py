"""
Record builder: one supplier offer -> one canonical product record
"""
from decimal import Decimal
from typing import Any, List, Optional, Union

from feedsync.models.feed import FeedMode, SupplierFeed
from feedsync.schemas.product import CanonicalProductRecord, SkipReason
from feedsync.services.profiles import VendorProfile
from feedsync.utils.normalization import (
    dedupe_photos,
    normalize_availability,
    normalize_price,
    split_photos,
)
from feedsync.utils.tree import as_list, extract_path, first_text, text_of

# Upper bound for numbered photo paths such as "picture{n}"
PHOTO_VARIANT_LIMIT = 20


def expand_photo_paths(spec: Optional[str]) -> List[str]:
    """
    Photo paths from a feed setting: comma separated, and a "{n}" placeholder
    expands to the numbered variants 1..PHOTO_VARIANT_LIMIT in order.
    """
    paths = []
    for raw in (spec or "").split(","):
        path = raw.strip()
        if not path:
            continue
        if "{n}" in path:
            paths.extend(path.replace("{n}", str(n)) for n in range(1, PHOTO_VARIANT_LIMIT + 1))
        else:
            paths.append(path)
    return paths


class ParsedOfferRecord:
    """Field lookups over one offer subtree, feed paths first then profile fallbacks"""

    def __init__(self, node: Any, feed: SupplierFeed, profile: VendorProfile):
        self.node = node
        self.feed = feed
        self.profile = profile

    def _candidates(self, configured: Optional[str], fallbacks: List[str]) -> List[str]:
        paths = [configured] if configured else []
        return paths + [path for path in fallbacks if path != configured]

    def sku(self) -> Optional[str]:
        return first_text(self.node, self._candidates(self.feed.sku_path, self.profile.sku_paths))

    def name(self) -> Optional[str]:
        return first_text(self.node, self._candidates(self.feed.name_path, self.profile.name_paths))

    def description(self) -> Optional[str]:
        return first_text(self.node, self._candidates(self.feed.description_path, self.profile.description_paths))

    def price(self) -> Optional[Decimal]:
        for path in self._candidates(self.feed.price_path, self.profile.price_paths):
            value = extract_path(self.node, path)
            if value is not None:
                return normalize_price(value)
        return None

    def in_stock(self) -> bool:
        # The first stock field that is present decides
        for path in self._candidates(self.feed.stock_path, self.profile.stock_paths):
            value = extract_path(self.node, path)
            if isinstance(value, bool):
                return value
            text = text_of(value)
            if text is not None and text.strip():
                return normalize_availability(text)
        return self.profile.default_in_stock

    def photos(self) -> List[str]:
        values = []
        for path in expand_photo_paths(self.feed.photo_path) + self.profile.photo_paths:
            values.extend(as_list(extract_path(self.node, path)))
        return dedupe_photos(values)

    def category_ref(self) -> Optional[str]:
        return first_text(self.node, self._candidates(self.feed.category_path, self.profile.category_paths))


def build_record(
    offer: ParsedOfferRecord, mode: FeedMode
) -> Union[CanonicalProductRecord, SkipReason]:
    """
    Map an offer onto the catalog shape.

    SKU is always required. Full imports may create products, so they also
    need a name and a usable price; availability syncs only touch known
    products and need neither.
    """
    sku = offer.sku()
    if not sku:
        return SkipReason.MISSING_SKU

    name = offer.name()
    if not name and offer.profile.name_from_sku:
        name = sku
    price = offer.price()

    if mode == FeedMode.FULL_IMPORT:
        if not name:
            return SkipReason.MISSING_NAME
        if price is None:
            return SkipReason.INVALID_PRICE

    image_url, gallery = split_photos(offer.photos())
    return CanonicalProductRecord(
        sku=sku,
        name=name,
        description=offer.description(),
        price=price,
        in_stock=offer.in_stock(),
        image_url=image_url,
        gallery=gallery,
        category_ref=offer.category_ref(),
    )
