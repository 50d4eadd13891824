"""Data models for vendor menus and the price records derived from them"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class VendorRef:
    """A vendor known to the price store"""
    vendor_id: str
    vendor_name: str


@dataclass
class MenuItem:
    name: str
    description: str = ""
    final_price: Optional[int] = None
    original_price: Optional[int] = None
    discount_pct: Optional[int] = None
    image_url: Optional[str] = None

    @property
    def has_discount(self) -> bool:
        return self.discount_pct is not None

    @property
    def discount_label(self) -> Optional[str]:
        return f"{self.discount_pct}%" if self.discount_pct is not None else None


@dataclass
class MenuCategory:
    id: str
    name: str
    items: List[MenuItem] = field(default_factory=list)

    @property
    def item_count(self) -> int:
        return len(self.items)


@dataclass
class PriceRecord:
    """One menu item as handed to the price store"""
    article_id: str
    vendor_id: str
    vendor_name: str
    group: str
    price: Optional[int]
    original_price: Optional[int] = None
    discount: Optional[str] = None
    item_count: int = 1
    description: Optional[str] = None
    image_url: Optional[str] = None
    has_discount: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class VendorMenu:
    """Normalized menu of one vendor storefront"""
    restaurant_name: str
    url: str
    categories: List[MenuCategory] = field(default_factory=list)
    scraped_at: datetime = field(default_factory=datetime.now)

    @property
    def total_items(self) -> int:
        return sum(c.item_count for c in self.categories)

    def to_price_records(self, vendor: VendorRef) -> List[PriceRecord]:
        records = []
        for category in self.categories:
            for item in category.items:
                records.append(PriceRecord(
                    article_id=item.name or "Unknown Product",
                    vendor_id=vendor.vendor_id,
                    vendor_name=vendor.vendor_name,
                    group=category.name,
                    price=item.final_price,
                    original_price=item.original_price,
                    discount=item.discount_label,
                    description=item.description or None,
                    image_url=item.image_url,
                    has_discount=item.has_discount,
                ))
        return records

    def to_dict(self) -> Dict[str, Any]:
        return {
            "restaurant": {"name": self.restaurant_name, "url": self.url},
            "categories": [
                {
                    "id": c.id,
                    "name": c.name,
                    "itemCount": c.item_count,
                    "items": [asdict(i) for i in c.items],
                }
                for c in self.categories
            ],
            "totalItems": self.total_items,
            "scrapedAt": self.scraped_at.isoformat(),
        }
