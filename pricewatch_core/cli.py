"""
pricewatch CLI

Usage:
    pricewatch run [--vendor ID ...]
    pricewatch survey https://snappfood.ir/
    pricewatch schedule
    pricewatch vendors [--items ID]
    pricewatch vendor <vendor_id>
    pricewatch vendor-toggle <vendor_id> --on
    pricewatch vendor-rename <vendor_id> <name>
    pricewatch browser
    pricewatch config
    pricewatch stats
"""

import argparse
import asyncio
import json
import logging
import sys

from .app import Services, build_services
from .config import config


def _print_json(data):
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


async def _run(services: Services, vendor_ids):
    try:
        session = await services.orchestrator.run(vendor_ids or None)
    finally:
        await services.browser.close()

    for result in session.results:
        if result.success:
            services.config_store.update_vendor_last_update(result.vendor_id, result.timestamp)
    _print_json(session.to_dict())
    return 0 if session.status.value == "completed" else 1


async def _survey(services: Services, url: str, include_elements: bool):
    try:
        live = await services.browser.acquire()
        result = await services.classifier.survey(
            live.page,
            url,
            settle_ms=services.settings.survey_settle_ms,
            timeout_ms=services.settings.navigation_timeout_ms,
            capture_screenshot=False,
        )
    finally:
        await services.browser.close()
    _print_json(result.to_dict(include_elements=include_elements))
    return 0


async def _browser(services: Services):
    try:
        await services.browser.acquire()
        _print_json(services.browser.info())
    finally:
        await services.browser.close()
    return 0


async def _schedule(services: Services):
    if not await services.trigger.arm():
        print("Scheduling is disabled; enable it in the price update config first")
        return 1
    print(f"Next run: {services.trigger.next_fire_time()}")
    try:
        await asyncio.Event().wait()
    finally:
        await services.close()
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Monitor vendor menu prices"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    run_parser = subparsers.add_parser("run", help="Run a price update now")
    run_parser.add_argument("--vendor", dest="vendors", action="append", default=[],
                            help="Vendor id to update (repeatable; default: all)")

    survey_parser = subparsers.add_parser("survey", help="Classify interactive elements of a page")
    survey_parser.add_argument("url", help="Page to survey")
    survey_parser.add_argument("--elements", action="store_true",
                               help="Include the full ranked element list")

    subparsers.add_parser("schedule", help="Run scheduled updates until interrupted")
    vendors_parser = subparsers.add_parser("vendors", help="List known vendors")
    vendors_parser.add_argument("--items", metavar="VENDOR_ID",
                                help="Show the latest stored price of every item of one vendor")

    vendor_parser = subparsers.add_parser("vendor", help="Show the stored config of one vendor")
    vendor_parser.add_argument("vendor_id", help="Vendor id")

    toggle_parser = subparsers.add_parser("vendor-toggle", help="Enable/disable auto-update for a vendor")
    toggle_parser.add_argument("vendor_id", help="Vendor id")
    state = toggle_parser.add_mutually_exclusive_group(required=True)
    state.add_argument("--on", dest="enabled", action="store_true")
    state.add_argument("--off", dest="enabled", action="store_false")

    rename_parser = subparsers.add_parser("vendor-rename", help="Rename a configured vendor")
    rename_parser.add_argument("vendor_id", help="Vendor id")
    rename_parser.add_argument("name", help="New display name")

    subparsers.add_parser("browser", help="Open the browser once and show its session info")

    subparsers.add_parser("config", help="Show the scheduler config")
    subparsers.add_parser("stats", help="Show price statistics")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    services = build_services(config)

    if args.command == "run":
        return asyncio.run(_run(services, args.vendors))

    elif args.command == "survey":
        return asyncio.run(_survey(services, args.url, args.elements))

    elif args.command == "schedule":
        try:
            return asyncio.run(_schedule(services))
        except KeyboardInterrupt:
            print("Stopped")
            return 0

    elif args.command == "vendors":
        if args.items:
            items = services.price_store.items_for_vendor(args.items)
            if not items:
                print(f"No prices stored for vendor {args.items}")
                return 1
            _print_json(items)
            return 0

        active = set(services.config_store.get_active_vendors())
        vendors = services.price_store.list_vendors()
        if not vendors:
            print("No vendors stored yet")
        for vendor in vendors:
            flag = "on " if vendor.vendor_id in active else "off"
            last = services.price_store.latest_update(vendor.vendor_id) or "-"
            print(f"[{flag}] {vendor.vendor_name}  ({vendor.vendor_id})  last price change: {last}")
        return 0

    elif args.command == "vendor":
        vendor_config = services.config_store.get_vendor_config(args.vendor_id)
        if vendor_config is None:
            print(f"Vendor {args.vendor_id} is not configured")
            return 1
        _print_json(vendor_config.to_dict())
        return 0

    elif args.command == "vendor-toggle":
        names = {v.vendor_id: v.vendor_name for v in services.price_store.list_vendors()}
        vendor_config = services.config_store.set_vendor_auto_update(
            args.vendor_id, args.enabled, names.get(args.vendor_id, "")
        )
        _print_json(vendor_config.to_dict())
        return 0

    elif args.command == "vendor-rename":
        if not services.config_store.update_vendor_name(args.vendor_id, args.name):
            print(f"Vendor {args.vendor_id} is not configured")
            return 1
        print(f"Renamed {args.vendor_id} to {args.name}")
        return 0

    elif args.command == "browser":
        return asyncio.run(_browser(services))

    elif args.command == "config":
        _print_json(services.config_store.load_config().to_dict())
        return 0

    elif args.command == "stats":
        _print_json(services.price_store.stats())
        return 0

    return 0


if __name__ == "__main__":
    sys.exit(main())
