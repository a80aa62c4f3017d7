#!/usr/bin/env python3
"""
Interactive local booking harness (no HTTP).

Usage:
  python3 scripts/book_local.py

What it does:
- Builds one BookingFlow through the project wiring (mock backend unless Supabase is configured)
- Lets you pick a day and slot, fill the form, move between steps and submit
- Prints the flow state after every command
"""

from __future__ import annotations

import asyncio
import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.application.exceptions import BookingError
from app.application.use_cases.booking_flow import BookingFlow
from app.wiring.dependencies import (
    build_booking_flow,
    default_widget_options,
    get_availability_policy,
    get_booking_backend,
)


def _print_header(flow: BookingFlow) -> None:
    print("\nLocal Booking Harness")
    print("-" * 60)
    print(f"session_id: {flow.session_id}")
    print("Commands: /days, /slots YYYY-MM-DD, /date YYYY-MM-DD, /slot ID,")
    print("          /form key=value ..., /next, /prev, /confirm, /cancel,")
    print("          /complete, /reset, /state, /quit")
    print("-" * 60)


def _print_state(flow: BookingFlow) -> None:
    state = flow.state
    form = state.form_data
    print(f"step={state.step} date={state.selected_date} slot={state.selected_time_slot}")
    print(f"name={form.name!r} phone={form.phone!r} email={form.email!r} notes={form.notes!r}")
    print(
        f"confirmation_open={state.is_confirmation_open} loading={state.is_loading} "
        f"complete={state.is_booking_complete} booking_id={state.booking_id} error={state.submission_error}"
    )


def _print_days(flow: BookingFlow) -> None:
    for day in flow.state.available_days:
        if not day.available:
            print(f"  {day.date} {day.date:%a}  closed")
            continue
        print(f"  {day.date} {day.date:%a}  {len(day.open_slots)}/{len(day.time_slots)} open")


def _print_slots(flow: BookingFlow, raw: str) -> None:
    day = flow.state.find_day(date.fromisoformat(raw))
    if day is None:
        print("Day outside the booking window.")
        return
    for slot in day.time_slots:
        print(f"  {slot.id}  {'open' if slot.available else 'taken'}")


def _parse_form_args(args: list[str]) -> dict[str, str]:
    fields: dict[str, str] = {}
    for arg in args:
        key, _, value = arg.partition("=")
        fields[key.strip()] = value.strip()
    return fields


def main() -> None:
    flow = build_booking_flow(
        today=date.today(),
        options=default_widget_options(),
        backend=get_booking_backend(),
        policy=get_availability_policy(),
    )
    _print_header(flow)

    while True:
        try:
            line = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not line:
            continue

        cmd, *args = line.split()
        cmd = cmd.lower()
        try:
            if cmd in ("/quit", "/exit"):
                print("Bye!")
                return
            if cmd == "/days":
                _print_days(flow)
                continue
            if cmd == "/slots" and args:
                _print_slots(flow, args[0])
                continue
            if cmd == "/date" and args:
                flow.set_selected_date(date.fromisoformat(args[0]))
            elif cmd == "/slot" and args:
                flow.set_selected_time_slot(args[0])
            elif cmd == "/form":
                flow.update_form_data(**_parse_form_args(args))
            elif cmd == "/next":
                flow.go_to_next_step()
            elif cmd == "/prev":
                flow.go_to_previous_step()
            elif cmd == "/confirm":
                flow.open_confirmation()
            elif cmd == "/cancel":
                flow.close_confirmation()
            elif cmd == "/complete":
                print("Submitting...")
                receipt = asyncio.run(flow.complete_booking())
                print(f"Booked: {receipt.booking_id}")
            elif cmd == "/reset":
                flow.reset_booking()
            elif cmd != "/state":
                print("Unknown command.")
                continue
        except (BookingError, ValueError, TypeError) as e:
            print(f"Error: {e}")
        _print_state(flow)


if __name__ == "__main__":
    main()
