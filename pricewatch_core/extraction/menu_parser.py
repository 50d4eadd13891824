"""
Menu Parser - turn raw storefront text into a ``VendorMenu``.

Prices on the storefront are written with Persian digits and thousands
separators ("۷۳۶,۲۵۰ تومان"). Rules:

- a price is every digit in the text read as one integer
- if neither dedicated price element yields a final price, the footer text
  is scanned: two numbers mean (original, final), one means final
- the original price defaults to the final price
- the discount percentage comes from the badge
- items with no price and an "unavailable" marker are dropped
- the coupon category (id -99) and empty categories are skipped
"""

import logging
import re
from typing import Any, Dict, List, Optional

from .models import MenuCategory, MenuItem, VendorMenu

logger = logging.getLogger(__name__)

COUPON_CATEGORY_ID = "-99"
UNAVAILABLE_MARKERS = ("ناموجود", "unavailable")
CURRENCY_LABEL = "تومان"

_DIGITS = str.maketrans("۰۱۲۳۴۵۶۷۸۹٠١٢٣٤٥٦٧٨٩", "01234567890123456789")
_NUMBER_RE = re.compile(r"[\d,،٬]+")


def to_ascii_digits(text: str) -> str:
    return text.translate(_DIGITS)


def parse_price(text: Optional[str]) -> Optional[int]:
    """All digits of ``text`` as one integer, or None when there are none."""
    if not text:
        return None
    digits = re.sub(r"\D", "", to_ascii_digits(text))
    return int(digits) if digits else None


def parse_discount(text: Optional[str]) -> Optional[int]:
    """First run of digits in a discount badge ("۵" -> 5)."""
    if not text:
        return None
    match = re.search(r"\d+", to_ascii_digits(text))
    return int(match.group(0)) if match else None


def footer_prices(text: Optional[str]) -> List[int]:
    if not text:
        return []
    prices = []
    for chunk in _NUMBER_RE.findall(to_ascii_digits(text)):
        value = parse_price(chunk)
        if value:
            prices.append(value)
    return prices


def is_unavailable(name: str, description: str, footer: Optional[str]) -> bool:
    haystack = " ".join(t for t in (name, description, footer or "") if t).lower()
    return any(marker in haystack for marker in UNAVAILABLE_MARKERS)


def parse_item(raw: Dict[str, Any]) -> Optional[MenuItem]:
    """Build one item, or None when it is unavailable."""
    name = (raw.get("name") or "").strip()
    description = (raw.get("description") or "").strip()
    footer = raw.get("footer")

    original = parse_price(raw.get("original"))
    final = parse_price(raw.get("final"))
    if not final and raw.get("finalFull"):
        final = parse_price(raw["finalFull"].replace(CURRENCY_LABEL, ""))

    if not final:
        prices = footer_prices(footer)
        if len(prices) >= 2:
            original, final = prices[0], prices[1]
        elif len(prices) == 1:
            final = prices[0]

    if not final and not original and is_unavailable(name, description, footer):
        logger.debug(f"Skipping unavailable product: {name}")
        return None

    return MenuItem(
        name=name,
        description=description,
        final_price=final or None,
        original_price=original or final or None,
        discount_pct=parse_discount(raw.get("badge")),
        image_url=raw.get("image") or None,
    )


def parse_menu(raw: Dict[str, Any]) -> VendorMenu:
    categories = []
    for raw_category in raw.get("categories") or []:
        category_id = str(raw_category.get("id") or "")
        if category_id == COUPON_CATEGORY_ID:
            continue
        name = (raw_category.get("name") or "").strip()
        if not name:
            continue

        items = [item for item in map(parse_item, raw_category.get("items") or []) if item is not None]
        if items:
            categories.append(MenuCategory(id=category_id, name=name, items=items))

    menu = VendorMenu(
        restaurant_name=(raw.get("name") or "").strip(),
        url=raw.get("url") or "",
        categories=categories,
    )
    logger.info(
        f"Parsed menu '{menu.restaurant_name}': "
        f"{len(menu.categories)} categories, {menu.total_items} items"
    )
    return menu
