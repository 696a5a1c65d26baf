#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
from typing import Any

import httpx
from httpx import ConnectError


def build_payload(text: str, session_id: str | None, year_hint: str | None) -> dict[str, Any]:
    payload: dict[str, Any] = {"text": text}
    if session_id:
        payload["sessionId"] = session_id
    if year_hint:
        payload["yearHint"] = year_hint
    return payload


def main() -> None:
    parser = argparse.ArgumentParser(description="Send a chat message to a running server")
    parser.add_argument("--url", default="http://127.0.0.1:8001/api/chat/messages")
    parser.add_argument("--text", default="cancel the appointment for Jane Doe at 2:00 PM on August 19th")
    parser.add_argument("--session", default="", help="reuse a session id, e.g. to send 'yes'")
    parser.add_argument("--year", default="", help="four-digit year hint")
    args = parser.parse_args()

    payload = build_payload(args.text, args.session or None, args.year or None)

    try:
        resp = httpx.post(args.url, json=payload, timeout=10.0)
    except ConnectError:
        print("Connection refused. Is the FastAPI server running?")
        print("Try: uvicorn spa_manager.main:app --reload --port 8001")
        return

    print(resp.status_code)
    if resp.text:
        try:
            print(json.dumps(resp.json(), indent=2))
        except ValueError:
            print(resp.text)


if __name__ == "__main__":
    main()
