#!/usr/bin/env python3
from dataclasses import dataclass
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass
class Config:
    """Application configuration"""
    headless: bool = os.getenv("PRICEWATCH_HEADLESS", "true").lower() == "true"
    locale: str = os.getenv("PRICEWATCH_LOCALE", "fa-IR")
    timezone_id: str = os.getenv("PRICEWATCH_TIMEZONE", "Asia/Tehran")
    user_agent: str = os.getenv("PRICEWATCH_USER_AGENT", DEFAULT_USER_AGENT)
    accept_language: str = os.getenv("PRICEWATCH_ACCEPT_LANGUAGE", "en-US,en;q=0.9,fa;q=0.8")
    viewport_width: int = int(os.getenv("PRICEWATCH_VIEWPORT_WIDTH", "1920"))
    viewport_height: int = int(os.getenv("PRICEWATCH_VIEWPORT_HEIGHT", "1080"))

    # Neutral page every fresh browser session lands on
    start_url: str = os.getenv("PRICEWATCH_START_URL", "https://snappfood.ir/")
    # {vendor_id} is substituted; ids that are already URLs are used as-is
    vendor_url_template: str = os.getenv(
        "PRICEWATCH_VENDOR_URL_TEMPLATE", "https://snappfood.ir/restaurant/menu/{vendor_id}/"
    )

    # Browser lifecycle
    browser_launch_attempts: int = int(os.getenv("PRICEWATCH_BROWSER_LAUNCH_ATTEMPTS", "3"))
    browser_retry_delay: float = float(os.getenv("PRICEWATCH_BROWSER_RETRY_DELAY", "2.0"))

    # Page timing (milliseconds)
    navigation_timeout_ms: int = int(os.getenv("PRICEWATCH_NAVIGATION_TIMEOUT_MS", "60000"))
    settle_delay_ms: int = int(os.getenv("PRICEWATCH_SETTLE_DELAY_MS", "3000"))
    readiness_timeout_ms: int = int(os.getenv("PRICEWATCH_READINESS_TIMEOUT_MS", "15000"))
    survey_settle_ms: int = int(os.getenv("PRICEWATCH_SURVEY_SETTLE_MS", "5000"))

    # Storage and documents
    db_path: Path = Path(os.getenv("PRICEWATCH_DB_PATH", "./workspace/prices.db"))
    config_dir: Path = Path(os.getenv("PRICEWATCH_CONFIG_DIR", "./config"))
    log_dir: Path = Path(os.getenv("PRICEWATCH_LOG_DIR", "./logs"))
    log_level: str = os.getenv("PRICEWATCH_LOG_LEVEL", "INFO")
    write_session_reports: bool = os.getenv("PRICEWATCH_SESSION_REPORTS", "true").lower() in ["true", "1", "yes"]

    # Cron triggers fire in this zone
    scheduler_timezone: str = os.getenv("PRICEWATCH_SCHEDULER_TIMEZONE", "Asia/Tehran")

    def vendor_url(self, vendor_id: str) -> str:
        if vendor_id.startswith(("http://", "https://")):
            return vendor_id
        return self.vendor_url_template.format(vendor_id=vendor_id)


config = Config()
