"""
Test mapping supplier offers onto canonical product records
"""

from decimal import Decimal

import pytest

from feedsync.core.exceptions import ConfigurationError
from feedsync.models.feed import FeedMode, SupplierFeed
from feedsync.schemas.product import CanonicalProductRecord, SkipReason
from feedsync.services.parser import parse_document
from feedsync.services.profiles import GENERIC, YML, get_profile
from feedsync.services.record_builder import ParsedOfferRecord, build_record, expand_photo_paths
from feedsync.utils.tree import extract_path


def generic_feed(**paths) -> SupplierFeed:
    values = {
        "name": "Test feed",
        "url": "https://feeds.example.com/test.xml",
        "item_path": "catalog.item",
        "sku_path": "code",
        "name_path": "title",
        "price_path": "cost",
        "stock_path": "stock",
        "photo_path": "photo",
        "category_path": "group",
    }
    values.update(paths)
    return SupplierFeed(**values)


def yml_feed() -> SupplierFeed:
    return SupplierFeed(name="YML", url="https://vendor.example.com/export.yml", item_path=YML.item_path, vendor_profile="yml")


def first_offer(body: str, path: str):
    nodes = extract_path(parse_document(body), path)
    return nodes[0] if isinstance(nodes, list) else nodes


def build(body: str, feed: SupplierFeed, mode: FeedMode = FeedMode.FULL_IMPORT):
    node = first_offer(body, feed.item_path)
    return build_record(ParsedOfferRecord(node, feed, get_profile(feed.vendor_profile)), mode)


class TestGenericMapping:
    """Feeds mapped purely by their configured paths"""

    def test_full_record(self):
        body = """<catalog><item>
            <code> A-1 </code><title>Lamp</title><cost>1 234,56 ₴</cost><stock>yes</stock>
            <photo>a.jpg</photo><photo>b.jpg</photo><photo>a.jpg</photo><group>Lighting</group>
        </item></catalog>"""

        record = build(body, generic_feed())

        assert isinstance(record, CanonicalProductRecord)
        assert record.sku == "A-1"
        assert record.name == "Lamp"
        assert record.price == Decimal("1234.56")
        assert record.in_stock is True
        assert record.image_url == "a.jpg"
        assert record.gallery == ["b.jpg"]
        assert record.category_ref == "Lighting"
        assert record.description is None

    def test_missing_sku(self):
        body = "<catalog><item><title>Lamp</title><cost>10</cost></item></catalog>"

        assert build(body, generic_feed()) == SkipReason.MISSING_SKU
        assert build(body, generic_feed(), FeedMode.STOCK_ONLY) == SkipReason.MISSING_SKU

    def test_blank_sku_counts_as_missing(self):
        body = "<catalog><item><code>   </code><title>Lamp</title><cost>10</cost></item></catalog>"

        assert build(body, generic_feed()) == SkipReason.MISSING_SKU

    def test_missing_name_in_full_import(self):
        body = "<catalog><item><code>A-1</code><cost>10</cost></item></catalog>"

        assert build(body, generic_feed()) == SkipReason.MISSING_NAME

    def test_invalid_price_in_full_import(self):
        body = "<catalog><item><code>A-1</code><title>Lamp</title><cost>call us</cost></item></catalog>"

        assert build(body, generic_feed()) == SkipReason.INVALID_PRICE

    def test_stock_only_needs_only_a_sku(self):
        body = "<catalog><item><code>A-1</code><stock>out of stock</stock></item></catalog>"

        record = build(body, generic_feed(), FeedMode.STOCK_ONLY)

        assert isinstance(record, CanonicalProductRecord)
        assert record.sku == "A-1"
        assert record.in_stock is False
        assert record.stock_row() == {"sku": "A-1", "in_stock": False}

    def test_missing_stock_field_is_out_of_stock(self):
        body = "<catalog><item><code>A-1</code><title>Lamp</title><cost>10</cost></item></catalog>"

        assert build(body, generic_feed()).in_stock is False

    def test_attribute_paths(self):
        body = '<catalog><item sku="X-9" qty="3"><title>Lamp</title><cost>10</cost></item></catalog>'

        record = build(body, generic_feed(sku_path="@sku", stock_path="@qty"))

        assert record.sku == "X-9"
        assert record.in_stock is True

    def test_numbered_photo_paths(self):
        body = """<catalog><item><code>A-1</code><title>Lamp</title><cost>10</cost>
            <image2>two.jpg</image2><image1>one.jpg</image1><main>main.jpg</main>
        </item></catalog>"""

        record = build(body, generic_feed(photo_path="main, image{n}"))

        assert record.image_url == "main.jpg"
        assert record.gallery == ["one.jpg", "two.jpg"]

    def test_full_row_columns(self):
        body = "<catalog><item><code>A-1</code><title>Lamp</title><cost>10</cost></item></catalog>"

        row = build(body, generic_feed()).full_row()

        assert row == {
            "sku": "A-1",
            "name": "Lamp",
            "description": None,
            "price_dropship": Decimal("10.00"),
            "in_stock": False,
            "image_url": None,
            "gallery_json": [],
            "category_id": None,
        }


class TestYmlProfile:
    """Single-vendor YML catalogs with fallback field names"""

    def offer(self, inner: str, attrs: str = "") -> str:
        return f"<yml_catalog><shop><offers><offer {attrs}>{inner}</offer></offers></shop></yml_catalog>"

    def test_sku_fallbacks_in_order(self):
        body = self.offer("<sku>S-2</sku><vendorCode>V-1</vendorCode><name>A</name><price>1</price>", 'id="9"')
        assert build(body, yml_feed()).sku == "V-1"

        body = self.offer("<sku>S-2</sku><name>A</name><price>1</price>", 'id="9"')
        assert build(body, yml_feed()).sku == "S-2"

        body = self.offer("<артикул>U-3</артикул><name>A</name><price>1</price>", 'id="9"')
        assert build(body, yml_feed()).sku == "U-3"

        body = self.offer("<name>A</name><price>1</price>", 'id="9"')
        assert build(body, yml_feed()).sku == "9"

    def test_name_fallbacks_and_sku_as_last_resort(self):
        body = self.offer("<vendorCode>V-1</vendorCode><model>Model X</model><price>1</price>")
        assert build(body, yml_feed()).name == "Model X"

        body = self.offer("<vendorCode>V-1</vendorCode><назва>Чайник</назва><price>1</price>")
        assert build(body, yml_feed()).name == "Чайник"

        body = self.offer("<vendorCode>V-1</vendorCode><price>1</price>")
        assert build(body, yml_feed()).name == "V-1"

    def test_availability_attribute(self):
        body = self.offer("<vendorCode>V-1</vendorCode><name>A</name><price>1</price>", 'available="false"')

        assert build(body, yml_feed()).in_stock is False

    def test_first_present_stock_field_decides(self):
        body = self.offer("<vendorCode>V-1</vendorCode><name>A</name><price>1</price>"
                          "<quantity>0</quantity><stock_status>in stock</stock_status>")

        assert build(body, yml_feed()).in_stock is False

    def test_unmentioned_availability_is_in_stock(self):
        body = self.offer("<vendorCode>V-1</vendorCode><name>A</name><price>1</price>")

        assert build(body, yml_feed()).in_stock is True

    def test_pictures_and_nested_images(self):
        body = self.offer("<vendorCode>V-1</vendorCode><name>A</name><price>1</price>"
                          "<picture>p1.jpg</picture><images><image>i1.jpg</image><image>p1.jpg</image></images>")

        record = build(body, yml_feed())

        assert record.image_url == "p1.jpg"
        assert record.gallery == ["i1.jpg"]

    def test_category_reference(self):
        body = self.offer("<vendorCode>V-1</vendorCode><name>A</name><price>1</price><categoryId>17</categoryId>")

        assert build(body, yml_feed()).category_ref == "17"


def test_configured_path_takes_precedence_over_profile():
    feed = yml_feed()
    feed.sku_path = "barcode"
    body = "<yml_catalog><shop><offers><offer id='9'><barcode>482000</barcode><vendorCode>V-1</vendorCode>" \
           "<name>A</name><price>1</price></offer></offers></shop></yml_catalog>"

    assert build(body, feed).sku == "482000"


def test_generic_profile_has_no_fallbacks():
    assert GENERIC.sku_paths == []
    assert GENERIC.item_path is None


def test_unknown_profile():
    with pytest.raises(ConfigurationError):
        get_profile("unknown-vendor")


def test_expand_photo_paths():
    paths = expand_photo_paths(" picture , image{n} ,")

    assert paths[0] == "picture"
    assert paths[1:4] == ["image1", "image2", "image3"]
    assert len(paths) == 21
    assert expand_photo_paths(None) == []
