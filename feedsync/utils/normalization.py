"""
Value normalizers for supplier feed fields
"""
import math
import re
import unicodedata
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional, Tuple

from feedsync.utils.tree import text_of

# Negative phrases are checked first: several contain a positive token
# ("unavailable", "нет в наличии").
OUT_OF_STOCK_TOKENS = (
    "unavailable",
    "not available",
    "out of stock",
    "outofstock",
    "нет в наличии",
    "немає",
    "нема в наявності",
    "відсутн",
    "отсутств",
    "not in stock",
    "not instock",
    "no stock",
)

IN_STOCK_TOKENS = (
    "true",
    "yes",
    "available",
    "instock",
    "in stock",
    "в наличии",
    "в наявності",
    "є в наявності",
    "есть",
)

# Too short for substring matching
IN_STOCK_EXACT = frozenset({"y", "+", "да", "так"})

PRICE_PATTERN = re.compile(r"\d+(?:\.\d*)?|\.\d+")
CENTS = Decimal("0.01")


def _as_number(text: str) -> Optional[float]:
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def normalize_availability(value: Any) -> bool:
    """
    Normalize an availability value to a boolean:
    - booleans pass through
    - numbers and numeric strings are in stock when > 0
    - text is matched case-insensitively against known in-stock phrases
    Anything else, including blank input, is out of stock.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return math.isfinite(value) and value > 0

    text = text_of(value)
    if text is None:
        return False

    text = text.strip().lower()
    if not text:
        return False

    number = _as_number(text)
    if number is not None:
        return number > 0

    if any(token in text for token in OUT_OF_STOCK_TOKENS):
        return False
    if text in IN_STOCK_EXACT:
        return True
    return any(token in text for token in IN_STOCK_TOKENS)


def normalize_price(value: Any) -> Optional[Decimal]:
    """
    Parse a price such as "1 234,56 ₴" into Decimal("1234.56").

    Comma is read as the decimal separator and every character other than
    digits and dots is dropped. Returns None when no finite number remains.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        text = str(value)
    else:
        text = text_of(value)
    if text is None:
        return None

    cleaned = re.sub(r"[^\d.]", "", text.replace(",", "."))
    match = PRICE_PATTERN.match(cleaned)
    if not match:
        return None

    try:
        price = Decimal(match.group())
    except InvalidOperation:
        return None
    if not price.is_finite():
        return None
    return price.quantize(CENTS, rounding=ROUND_HALF_UP)


def dedupe_photos(values: Iterable[Any]) -> List[str]:
    """Trim photo URLs, drop blanks and keep the first occurrence of each"""
    seen = set()
    photos = []
    for value in values:
        text = text_of(value)
        if text is None:
            continue
        url = text.strip()
        if not url or url in seen:
            continue
        seen.add(url)
        photos.append(url)
    return photos


def split_photos(photos: List[str]) -> Tuple[Optional[str], List[str]]:
    """Primary image and gallery (everything after the primary)"""
    if not photos:
        return None, []
    return photos[0], photos[1:]


def slugify(name: str) -> str:
    """
    Build a category slug:
    - lowercase, diacritics stripped
    - runs of non-word characters become a single hyphen
    - no leading or trailing hyphens
    """
    if not name:
        return ""

    text = unicodedata.normalize("NFKD", str(name))
    text = "".join(char for char in text if not unicodedata.combining(char))
    text = text.lower().strip()
    text = re.sub(r"[\W_]+", "-", text)
    return text.strip("-")
