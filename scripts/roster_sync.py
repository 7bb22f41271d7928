#!/usr/bin/env python3
"""Fetch the employee roster and print it.

Run from the project root:

    python3 scripts/roster_sync.py [--format table|json] [--timeout SECONDS] [--verbose]

The remote service may be asleep; the fetch is retried every
ROSTER_RETRY_DELAY_SECONDS until it answers or --timeout expires.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from roster.core.config import Settings  # noqa: E402
from roster.core.exceptions import RosterError  # noqa: E402
from roster.models.employee import Employee  # noqa: E402
from roster.services.employee_gateway import EmployeeGateway  # noqa: E402
from roster.services.roster_cache import RosterCache  # noqa: E402

logger = logging.getLogger(__name__)

_COLUMNS: list[tuple[str, str]] = [
    ("ID", "employee_id"),
    ("Name", "name"),
    ("Age", "age"),
    ("Salary", "salary"),
    ("Dept", "department_id"),
    ("Mgr", "manager_id"),
]


def _cell(value: object) -> str:
    if value is None:
        return "—"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_table(employees: list[Employee]) -> str:
    if not employees:
        return "No data found"

    rows = [[header for header, _ in _COLUMNS]]
    for employee in employees:
        rows.append([_cell(getattr(employee, attr)) for _, attr in _COLUMNS])

    widths = [max(len(row[i]) for row in rows) for i in range(len(_COLUMNS))]
    lines = ["  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip() for row in rows]
    lines.insert(1, "  ".join("-" * width for width in widths))
    return "\n".join(lines)


def format_json(employees: list[Employee]) -> str:
    return json.dumps([employee.to_payload() for employee in employees], indent=2)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print the employee roster from the remote service")
    parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format (default: table)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Give up waiting for the backend after this many seconds (default: wait forever)",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Override ROSTER_API_URL",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


async def fetch_roster(roster: RosterCache, timeout: float | None) -> bool:
    load = asyncio.ensure_future(roster.load())
    if timeout is None:
        return await load

    try:
        return await asyncio.wait_for(asyncio.shield(load), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Backend did not answer within %.1fs — giving up", timeout)
        await roster.close()
        return await load


async def sync(args: argparse.Namespace) -> int:
    settings = Settings()
    if args.base_url:
        settings.ROSTER_API_URL = args.base_url

    gateway = EmployeeGateway()
    await gateway.initialize(settings)
    if not gateway.initialized:
        logger.error("ROSTER_API_URL is not configured")
        return 2

    roster = RosterCache(gateway, retry_delay=settings.ROSTER_RETRY_DELAY_SECONDS)
    try:
        loaded = await fetch_roster(roster, args.timeout)
    except RosterError as e:
        logger.error("%s", e)
        return 1
    finally:
        await roster.close()
        await gateway.close()

    if not loaded:
        return 1

    employees = list(roster.employees)
    print(format_json(employees) if args.format == "json" else format_table(employees))
    return 0


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(sync(args)))


if __name__ == "__main__":
    main()
