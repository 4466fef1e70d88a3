#!/usr/bin/env python3
"""Smoke test against a running server: book a slot, hit the conflict, clean up via admin."""

import os
import sys
from datetime import date, timedelta

import httpx


BASE_URL = os.environ.get("BASE_URL", "http://127.0.0.1:8000")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "")


def check_slots(day: str) -> list[dict]:
    print("=" * 60)
    print(f"GET /api/slots?date={day}")
    print("=" * 60)
    response = httpx.get(f"{BASE_URL}/api/slots", params={"date": day}, timeout=10.0)
    response.raise_for_status()
    slots = response.json()
    for s in slots:
        print(f"  {s['time']}  {s['state']}")
    return slots


def book(day: str, time: str) -> dict | None:
    print("\n" + "=" * 60)
    print(f"POST /api/bookings {day} {time}")
    print("=" * 60)
    payload = {
        "name": "Smoke Test",
        "email": "smoke@example.com",
        "service": "Portrait",
        "price": 0,
        "date": day,
        "time": time,
    }
    response = httpx.post(f"{BASE_URL}/api/bookings", json=payload, timeout=10.0)
    if response.status_code != 200:
        print(f"HTTP {response.status_code}: {response.text}")
        return None
    data = response.json()
    print(f"Booked {data['id']} status={data['status']} warning={data.get('warning')}")
    return data


def delete(booking_id: str) -> None:
    if not ADMIN_PASSWORD:
        print("ADMIN_PASSWORD not set, leaving booking in place")
        return
    response = httpx.delete(
        f"{BASE_URL}/api/admin-bookings",
        params={"id": booking_id},
        headers={"x-admin-password": ADMIN_PASSWORD},
        timeout=10.0,
    )
    print(f"DELETE {booking_id}: HTTP {response.status_code}")


def main():
    try:
        httpx.get(f"{BASE_URL}/health", timeout=5.0)
    except httpx.HTTPError:
        print("Server is not running!")
        print("   Please start it with: uvicorn studio_booking.main:app --reload")
        sys.exit(1)

    day = (date.today() + timedelta(days=30)).isoformat()
    free = [s["time"] for s in check_slots(day) if s["state"] == "available"]
    if not free:
        print("No free slot to test with")
        sys.exit(1)

    booking = book(day, free[0])
    if booking is None:
        sys.exit(1)

    second = book(day, free[0])
    print("Conflict detected" if second is None else "Double booking was accepted!")

    delete(booking["id"])


if __name__ == "__main__":
    main()
