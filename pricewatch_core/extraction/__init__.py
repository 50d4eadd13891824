"""Vendor menu extraction"""

from .menu_parser import parse_menu, parse_price
from .models import MenuCategory, MenuItem, PriceRecord, VendorMenu, VendorRef
from .vendor_extractor import ExtractionError, MenuStructureError, VendorExtractor

__all__ = [
    "ExtractionError",
    "MenuCategory",
    "MenuItem",
    "MenuStructureError",
    "PriceRecord",
    "VendorExtractor",
    "VendorMenu",
    "VendorRef",
    "parse_menu",
    "parse_price",
]
