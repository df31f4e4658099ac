"""
Vendor profiles: per-supplier fallback paths layered under a feed's own mapping
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from feedsync.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class VendorProfile:
    """Fallback paths tried after the feed's configured path for each field"""

    name: str
    item_path: Optional[str] = None
    category_list_path: Optional[str] = None
    sku_paths: List[str] = field(default_factory=list)
    name_paths: List[str] = field(default_factory=list)
    description_paths: List[str] = field(default_factory=list)
    price_paths: List[str] = field(default_factory=list)
    stock_paths: List[str] = field(default_factory=list)
    photo_paths: List[str] = field(default_factory=list)
    category_paths: List[str] = field(default_factory=list)

    # Offers without a name take their SKU as the name
    name_from_sku: bool = False

    # Availability when no stock field is present at all
    default_in_stock: bool = False


GENERIC = VendorProfile(name="generic")

# YML (Yandex Market Language) catalogs as published by dropshipping suppliers
YML = VendorProfile(
    name="yml",
    item_path="yml_catalog.shop.offers.offer",
    category_list_path="yml_catalog.shop.categories.category",
    sku_paths=["vendorCode", "sku", "артикул", "код", "id"],
    name_paths=["name", "model", "title", "назва", "название"],
    description_paths=["description", "body"],
    price_paths=["price"],
    stock_paths=["available", "stock_quantity", "quantity", "stock_status"],
    photo_paths=["picture", "images.image"],
    category_paths=["categoryId"],
    name_from_sku=True,
    default_in_stock=True,
)

PROFILES: Dict[str, VendorProfile] = {profile.name: profile for profile in (GENERIC, YML)}


def get_profile(name: Optional[str]) -> VendorProfile:
    """Look up a profile by name; an empty name means generic"""
    if not name:
        return GENERIC
    try:
        return PROFILES[name]
    except KeyError:
        raise ConfigurationError(f"Unknown vendor profile '{name}'")
