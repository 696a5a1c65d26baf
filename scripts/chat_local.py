#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP).

Usage:
  python3 scripts/chat_local.py

What it does:
- Keeps a stable chat session for the run
- Sends your typed messages through the same HandleChatMessageUseCase the API uses
- Prints the classified intent, the action taken and the reply text

Seed a booking first with /book, e.g.:
  /book 2025-08-19 2:00 PM Facial Jane Doe
"""
from __future__ import annotations

import os
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from spa_manager.application.exceptions import BookingRejected, ParseError, ValidationFailed  # noqa: E402
from spa_manager.wiring.dependencies import (  # noqa: E402
    get_booking_use_case,
    get_handle_chat_message_use_case,
)


def _print_header(session_id: str) -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print(f"session_id: {session_id}")
    print("Type your message and press Enter.")
    print("Commands: /book <date> <h:mm> <AM|PM> <category> <client>, /slots <date>, /new, /quit, /help")
    print("-" * 60)


def _book(args: list[str]) -> None:
    if len(args) < 5:
        print("usage: /book 2025-08-19 2:00 PM Facial Jane Doe")
        return
    date_text, time_text = args[0], f"{args[1]} {args[2]}"
    category, client = args[3], " ".join(args[4:])
    if category.lower() == "combo":
        category = "Facial + Massage"
    try:
        appointment = get_booking_use_case().create_appointment(date_text, time_text, client, category)
    except BookingRejected as e:
        print(f"(rejected) {e.reason}")
        return
    except (ParseError, ValidationFailed) as e:
        print(f"(invalid) {e}")
        return
    print(f"(booked) #{appointment.id} {appointment.client} {appointment.date} {appointment.time}")


def _slots(args: list[str]) -> None:
    if not args:
        print("usage: /slots 2025-08-19")
        return
    result = get_booking_use_case().get_availability(args[0])
    if not result.available:
        print(f"(unavailable) {result.reason}")
        return
    print("available: " + ", ".join(result.available_times))


def main() -> None:
    session_id = os.getenv("CHAT_SESSION_ID", "local_user_1")
    use_case = get_handle_chat_message_use_case()
    _print_header(session_id)

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue

        cmd, *args = user_text.split()
        cmd = cmd.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /book <date> <h:mm> <AM|PM> <Facial|Massage|combo> <client> -> create a booking")
            print("  /slots <date> -> show bookable times")
            print("  /new  -> start a new session (drops any pending cancellation or completion)")
            print("  /quit -> exit")
            continue
        if cmd == "/new":
            session_id = f"local_user_{int(time.time())}"
            print(f"New session_id: {session_id}")
            continue
        if cmd == "/book":
            _book(args)
            continue
        if cmd == "/slots":
            _slots(args)
            continue

        reply = use_case.handle(user_text, session_id=session_id)
        session_id = reply.session_id

        print("\n--- Decision ---")
        print(f"intent: {reply.intent}")
        print(f"action: {reply.action}")
        print("\n--- Reply ---")
        print(reply.text.strip() or "(empty reply)")
        print("-" * 60)


if __name__ == "__main__":
    main()
