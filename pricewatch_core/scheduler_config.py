#!/usr/bin/env python3
"""
Scheduler configuration documents.

Two JSON files live in the config directory:

    price-update-config.json   schedule, batch limits, active vendor ids
    vendor-config.json         per-vendor auto-update flags

A missing or unreadable document falls back to the defaults below.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "price-update-config.json"
VENDOR_CONFIG_FILENAME = "vendor-config.json"

WEEKDAYS = ["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]
UPDATE_FREQUENCIES = ("daily", "weekly", "monthly")
PRIORITIES = ("high", "medium", "low")


@dataclass
class ScheduleSpec:
    """Days of week (empty = every day) plus time of day"""
    days: List[str] = field(default_factory=list)
    hour: int = 6
    minute: int = 0

    def __post_init__(self):
        self.days = [d.lower() for d in self.days]
        unknown = [d for d in self.days if d not in WEEKDAYS]
        if unknown:
            raise ValueError(f"Unknown weekday(s): {', '.join(unknown)}")
        if not 0 <= self.hour <= 23:
            raise ValueError(f"hour must be 0-23, got {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"minute must be 0-59, got {self.minute}")


@dataclass
class BatchSettings:
    max_vendors_per_run: int = 50
    delay_between_vendors: int = 5000  # ms
    retry_attempts: int = 3
    timeout: int = 60000  # ms, per vendor


@dataclass
class SchedulerConfig:
    enabled: bool = False
    schedule: ScheduleSpec = field(default_factory=ScheduleSpec)
    batch: BatchSettings = field(default_factory=BatchSettings)
    active_vendors: List[str] = field(default_factory=list)
    last_config_update: str = field(default_factory=lambda: datetime.now().isoformat())

    # Flat accessors used by the orchestrator
    @property
    def max_vendors_per_run(self) -> int:
        return self.batch.max_vendors_per_run

    @property
    def delay_between_vendors(self) -> int:
        return self.batch.delay_between_vendors

    @property
    def retry_attempts(self) -> int:
        return self.batch.retry_attempts

    @property
    def timeout(self) -> int:
        return self.batch.timeout

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchedulerConfig":
        defaults = cls()
        schedule = data.get("schedule") or {}
        batch = data.get("batch_settings") or {}
        return cls(
            enabled=bool(data.get("global_enabled", defaults.enabled)),
            schedule=ScheduleSpec(
                days=list(schedule.get("days", [])),
                hour=int(schedule.get("hour", defaults.schedule.hour)),
                minute=int(schedule.get("minute", defaults.schedule.minute)),
            ),
            batch=BatchSettings(
                max_vendors_per_run=int(batch.get("max_vendors_per_run", defaults.batch.max_vendors_per_run)),
                delay_between_vendors=int(batch.get("delay_between_vendors", defaults.batch.delay_between_vendors)),
                retry_attempts=int(batch.get("retry_attempts", defaults.batch.retry_attempts)),
                timeout=int(batch.get("timeout", defaults.batch.timeout)),
            ),
            active_vendors=list(data.get("active_vendors", [])),
            last_config_update=data.get("last_config_update") or defaults.last_config_update,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "global_enabled": self.enabled,
            "schedule": asdict(self.schedule),
            "batch_settings": asdict(self.batch),
            "active_vendors": list(self.active_vendors),
            "last_config_update": self.last_config_update,
        }


@dataclass
class VendorConfig:
    vendor_id: str
    vendor_name: str = ""
    auto_update_enabled: bool = False
    last_update: Optional[str] = None
    update_frequency: str = "daily"
    priority: str = "medium"

    def __post_init__(self):
        if self.update_frequency not in UPDATE_FREQUENCIES:
            raise ValueError(f"Unknown update frequency: {self.update_frequency}")
        if self.priority not in PRIORITIES:
            raise ValueError(f"Unknown priority: {self.priority}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VendorConfig":
        return cls(
            vendor_id=data["vendor_id"],
            vendor_name=data.get("vendor_name", ""),
            auto_update_enabled=bool(data.get("auto_update_enabled", False)),
            last_update=data.get("last_update"),
            update_frequency=data.get("update_frequency", "daily"),
            priority=data.get("priority", "medium"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ConfigStore:
    """
    JSON-backed configuration collaborator.

    Usage:
        store = ConfigStore("config")
        cfg = store.load_config()
        cfg.enabled = True
        store.save_config(cfg)
    """

    def __init__(self, config_dir: str = "config"):
        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_path = self.config_dir / CONFIG_FILENAME
        self.vendor_config_path = self.config_dir / VENDOR_CONFIG_FILENAME

    def _read(self, path: Path):
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Error loading {path.name}: {e}")
            return None

    def _write(self, path: Path, data) -> None:
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    # scheduler config

    def load_config(self) -> SchedulerConfig:
        data = self._read(self.config_path)
        if data is None:
            return SchedulerConfig()
        return SchedulerConfig.from_dict(data)

    def save_config(self, cfg: SchedulerConfig) -> None:
        cfg.last_config_update = datetime.now().isoformat()
        self._write(self.config_path, cfg.to_dict())
        logger.info("Configuration saved successfully")

    def get_active_vendors(self) -> List[str]:
        return self.load_config().active_vendors

    # vendor configs

    def load_vendor_configs(self) -> List[VendorConfig]:
        data = self._read(self.vendor_config_path) or []
        return [VendorConfig.from_dict(item) for item in data]

    def save_vendor_configs(self, vendor_configs: List[VendorConfig]) -> None:
        self._write(self.vendor_config_path, [v.to_dict() for v in vendor_configs])

    def get_vendor_config(self, vendor_id: str) -> Optional[VendorConfig]:
        for vendor_config in self.load_vendor_configs():
            if vendor_config.vendor_id == vendor_id:
                return vendor_config
        return None

    def set_vendor_auto_update(self, vendor_id: str, enabled: bool, vendor_name: str = "") -> VendorConfig:
        """Flip a vendor's auto-update flag and keep ``active_vendors`` in step."""
        vendor_configs = self.load_vendor_configs()
        cfg = self.load_config()

        vendor_config = next((v for v in vendor_configs if v.vendor_id == vendor_id), None)
        if vendor_config is None:
            vendor_config = VendorConfig(vendor_id=vendor_id, vendor_name=vendor_name)
            vendor_configs.append(vendor_config)
        elif vendor_name:
            vendor_config.vendor_name = vendor_name
        vendor_config.auto_update_enabled = enabled

        if enabled and vendor_id not in cfg.active_vendors:
            cfg.active_vendors.append(vendor_id)
        elif not enabled:
            cfg.active_vendors = [v for v in cfg.active_vendors if v != vendor_id]

        self.save_vendor_configs(vendor_configs)
        self.save_config(cfg)
        logger.info(f"Vendor {vendor_id} auto-update {'enabled' if enabled else 'disabled'}")
        return vendor_config

    def update_vendor_name(self, vendor_id: str, vendor_name: str) -> bool:
        vendor_configs = self.load_vendor_configs()
        for vendor_config in vendor_configs:
            if vendor_config.vendor_id == vendor_id:
                vendor_config.vendor_name = vendor_name
                self.save_vendor_configs(vendor_configs)
                return True
        return False

    def update_vendor_last_update(self, vendor_id: str, when: Optional[datetime] = None) -> bool:
        vendor_configs = self.load_vendor_configs()
        for vendor_config in vendor_configs:
            if vendor_config.vendor_id == vendor_id:
                vendor_config.last_update = (when or datetime.now()).isoformat()
                self.save_vendor_configs(vendor_configs)
                return True
        return False
