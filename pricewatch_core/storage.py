"""
Price Store - SQLite history of menu prices.

Every scrape offers the full menu of a vendor, but a row is written only
when an article's price, original price or discount differs from the
latest row stored for that vendor, article and category. An article listed
under two categories is tracked once per category. The table therefore
holds one row per observed price change.
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .extraction.models import PriceRecord, VendorRef

logger = logging.getLogger(__name__)


class PriceStore:
    """
    Persistence collaborator of the update orchestrator.

    Methods are blocking; async callers run them in a worker thread.
    """

    def __init__(self, db_path: str = "workspace/prices.db"):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self):
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS menus (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    article_id TEXT NOT NULL,
                    vendor_id TEXT NOT NULL,
                    vendor_name TEXT NOT NULL,
                    "group" TEXT,
                    price INTEGER,
                    original_price INTEGER,
                    discount TEXT,
                    item_count INTEGER DEFAULT 1,
                    description TEXT,
                    image_url TEXT,
                    has_discount INTEGER DEFAULT 0,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_menus_vendor_article_group
                ON menus(vendor_id, article_id, "group", id)
            """)

    def ping(self) -> bool:
        try:
            with self._connect() as conn:
                conn.execute("SELECT 1").fetchone()
            return True
        except sqlite3.Error as e:
            logger.error(f"Database connection failed: {e}")
            return False

    def list_vendors(self) -> List[VendorRef]:
        """Every vendor with stored rows, ordered by name."""
        with self._connect() as conn:
            rows = conn.execute("""
                SELECT vendor_id, MAX(vendor_name) AS vendor_name
                FROM menus
                WHERE vendor_id IS NOT NULL AND vendor_id != ''
                GROUP BY vendor_id
                ORDER BY vendor_name, vendor_id
            """).fetchall()
        return [VendorRef(row["vendor_id"], row["vendor_name"]) for row in rows]

    def upsert_items(self, vendor_id: str, items: Iterable[PriceRecord]) -> int:
        """Insert the records whose price differs from the latest stored one; returns rows inserted."""
        inserted = 0
        now = datetime.now().isoformat()

        with self._connect() as conn:
            for item in items:
                latest = conn.execute("""
                    SELECT price, original_price, discount
                    FROM menus
                    WHERE vendor_id = ? AND article_id = ? AND "group" IS ?
                    ORDER BY id DESC
                    LIMIT 1
                """, (vendor_id, item.article_id, item.group)).fetchone()

                if latest is not None and (
                    latest["price"] == item.price
                    and latest["original_price"] == item.original_price
                    and latest["discount"] == item.discount
                ):
                    continue

                conn.execute("""
                    INSERT INTO menus
                    (article_id, vendor_id, vendor_name, "group", price, original_price,
                     discount, item_count, description, image_url, has_discount, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    item.article_id,
                    vendor_id,
                    item.vendor_name,
                    item.group,
                    item.price,
                    item.original_price,
                    item.discount,
                    item.item_count,
                    item.description,
                    item.image_url,
                    1 if item.has_discount else 0,
                    now,
                ))
                inserted += 1

        logger.info(f"Inserted {inserted} price rows for vendor {vendor_id}")
        return inserted

    def items_for_vendor(self, vendor_id: str) -> List[Dict[str, Any]]:
        """Latest row of every article of a vendor, per category."""
        with self._connect() as conn:
            rows = conn.execute("""
                SELECT m.* FROM menus m
                JOIN (
                    SELECT MAX(id) AS id FROM menus
                    WHERE vendor_id = ?
                    GROUP BY article_id, "group"
                ) latest ON latest.id = m.id
                ORDER BY m."group", m.article_id
            """, (vendor_id,)).fetchall()

        items = []
        for row in rows:
            item = dict(row)
            item["has_discount"] = bool(item["has_discount"])
            items.append(item)
        return items

    def stats(self) -> Dict[str, Any]:
        """Aggregate figures over priced rows."""
        with self._connect() as conn:
            row = conn.execute("""
                SELECT
                    COUNT(DISTINCT vendor_id) AS total_vendors,
                    COUNT(*) AS total_items,
                    MAX(created_at) AS last_update_time,
                    AVG(price) AS average_price,
                    COUNT(CASE WHEN has_discount THEN 1 END) AS discounted_items
                FROM menus
                WHERE price IS NOT NULL AND price > 0
            """).fetchone()

        return {
            "totalVendors": row["total_vendors"] or 0,
            "totalItems": row["total_items"] or 0,
            "lastUpdateTime": row["last_update_time"],
            "averagePrice": row["average_price"],
            "discountedItems": row["discounted_items"] or 0,
        }

    def latest_update(self, vendor_id: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT MAX(created_at) AS ts FROM menus WHERE vendor_id = ?", (vendor_id,)
            ).fetchone()
        return row["ts"] if row else None
