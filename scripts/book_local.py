#!/usr/bin/env python3
"""
Run one booking end to end without the HTTP layer.

Usage:
  python3 scripts/book_local.py --email john.doe@example.com --url https://calendly.com/acme/intro
  python3 scripts/book_local.py --email ... --url ... --guest a@example.com --notes "See you" --headed

Uses the same wiring as the API (store from DATABASE_URL, browser settings from the
environment) and prints the final booking record.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.application.use_cases.automate_booking import AutomateBookingUseCase
from app.application.utils.form_details import build_form_details
from app.core.config import settings
from app.wiring.dependencies import get_booking_store, get_scheduling_automation


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Book the first available slot on a scheduling link.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--url", required=True, help="Scheduling link to book")
    parser.add_argument("--guest", action="append", default=[], help="Guest email (repeatable)")
    parser.add_argument("--notes", default=None)
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    if args.headed:
        settings.BROWSER_HEADLESS = False
    store = get_booking_store()
    use_case = AutomateBookingUseCase(store=store, automation=get_scheduling_automation())

    booking = store.create(args.email)
    print(f"Created booking id={booking.id} uuid={booking.uuid} status={booking.status.value}")
    details = build_form_details(args.email, args.guest, args.notes)

    exit_code = 0
    try:
        slot = await use_case.execute(booking.id, args.url, details)
        print(f"Booked slot: {slot.date_label} {slot.start_time} ({slot.starts_at.isoformat()})")
    except Exception as e:
        print(f"Booking failed: {type(e).__name__}: {e}")
        exit_code = 1

    final = store.find_by_id(booking.id)
    if final is not None:
        booked_for = final.booked_for.isoformat() if final.booked_for else "-"
        print(f"Final status: {final.status.value} booked_for={booked_for}")
    return exit_code


def main() -> None:
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    sys.exit(asyncio.run(_run(_parse_args())))


if __name__ == "__main__":
    main()
