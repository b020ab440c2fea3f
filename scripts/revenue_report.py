#!/usr/bin/env python
"""Offline revenue dashboard from JSON exports.

Reads the payloads of ``GET /orders`` and ``GET /products`` saved to disk and
prints the same dashboard the admin endpoint serves.

Usage:
    python scripts/revenue_report.py --orders orders.json --products products.json
    python scripts/revenue_report.py --orders orders.json --products products.json \\
        --time-range 12months --now 2024-06-15T00:00:00+00:00
"""

import argparse
import json
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from app.core.config import get_settings
from app.core.exceptions import ValidationError
from app.core.logging import configure_logging, get_logger
from app.features.analytics.aggregator import build_revenue_dashboard
from app.features.analytics.schemas import RevenueDashboardResponse, TimeRange
from app.features.analytics.snapshot import orders_from_records, products_from_records

logger = get_logger(__name__)


def parse_now(value: str) -> datetime:
    """Parse an ISO-8601 reference time.

    Raises:
        argparse.ArgumentTypeError: If the value is not ISO-8601.
    """
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid timestamp: {value}. Use ISO-8601") from e


def load_records(path: Path) -> list[dict[str, Any]]:
    """Load a JSON export: a list, or a paginated object with ``items``.

    A paginated object must hold every record (``total``/``pages`` agree
    with ``items``); a single page of a larger listing is rejected.

    Raises:
        ValueError: If the file is not a list of records or is one page of many.
    """
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict) and "items" in data:
        items = data["items"]
        total = data.get("total")
        if isinstance(items, list) and (
            (isinstance(total, int) and len(items) < total)
            or (isinstance(data.get("pages"), int) and data["pages"] > 1)
        ):
            raise ValueError(
                f"{path}: export is one page of {total if total is not None else 'many'}; "
                "export all records"
            )
        data = items
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of records")
    return data


def build_report(
    order_records: list[dict[str, Any]],
    product_records: list[dict[str, Any]],
    time_range: TimeRange,
    now: datetime,
    timezone: str,
) -> RevenueDashboardResponse:
    """Compute the dashboard from raw exported records.

    Raises:
        InvalidAmountError: If any amount in the export is malformed.
        ValidationError: If an id, quantity, timestamp or record shape is malformed.
    """
    dashboard = build_revenue_dashboard(
        orders_from_records(order_records),
        products_from_records(product_records),
        window_length=time_range.months,
        now=now,
        tz=ZoneInfo(timezone),
    )
    return RevenueDashboardResponse.from_dashboard(dashboard, time_range, generated_at=now)


def create_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Compute the revenue dashboard from JSON exports.",
    )
    parser.add_argument("--orders", type=Path, required=True, help="Orders export (JSON)")
    parser.add_argument("--products", type=Path, required=True, help="Products export (JSON)")
    parser.add_argument(
        "--time-range",
        type=TimeRange,
        choices=list(TimeRange),
        default=TimeRange(settings.analytics_default_time_range),
        help="Trailing window (default: %(default)s)",
    )
    parser.add_argument(
        "--now",
        type=parse_now,
        default=None,
        help="Reference time, ISO-8601 (default: current UTC time)",
    )
    parser.add_argument(
        "--timezone",
        default=settings.analytics_timezone,
        help="Reporting time zone (default: %(default)s)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = create_parser().parse_args(argv)

    try:
        orders = load_records(args.orders)
        products = load_records(args.products)
    except (OSError, ValueError) as e:
        print(f"[FAIL] {e}", file=sys.stderr)
        return 1

    try:
        report = build_report(
            orders,
            products,
            time_range=args.time_range,
            now=args.now or datetime.now(UTC),
            timezone=args.timezone,
        )
    except ValidationError as e:
        logger.error("analytics.revenue_report_rejected", error=e.message, details=e.details)
        print(f"[FAIL] {e.message}", file=sys.stderr)
        return 2

    print(report.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
