from __future__ import annotations

import logging
from datetime import date, time
from typing import Any

import httpx

from studio_booking.application.exceptions import SlotConflictError, StoreError
from studio_booking.application.ports.booking_store import BookingStorePort
from studio_booking.application.utils.date_parser import format_iso_date, format_slot_time
from studio_booking.core.config import settings
from studio_booking.domain.entities.booking import Booking, NewBooking
from studio_booking.infrastructure.store.records import booking_from_row, new_booking_to_row

UNIQUE_VIOLATION = "23505"
INVALID_TEXT_REPRESENTATION = "22P02"


class SupabaseBookingStore(BookingStorePort):
    """
    Bookings table behind Supabase's PostgREST API.

    Double-booking protection relies on a unique index in the database:

        create unique index bookings_date_time_key on bookings (date, time);

    PostgREST answers a violating insert with 409, which becomes SlotConflictError.
    """

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        table: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._url = (url or settings.SUPABASE_URL or "").rstrip("/")
        self._api_key = api_key or settings.SUPABASE_KEY
        self._table = table or settings.SUPABASE_TABLE
        self._client = client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._url or not self._api_key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY are required for the Supabase store")

    def list_bookings(
        self,
        date: date | None = None,
        time: time | None = None,
        limit: int | None = None,
    ) -> list[Booking]:
        params: dict[str, Any] = {"select": "*", "order": "created_at.desc"}
        if date is not None:
            params["date"] = f"eq.{format_iso_date(date)}"
        if time is not None:
            params["time"] = f"eq.{format_slot_time(time)}"
        if limit is not None:
            params["limit"] = limit

        rows = self._request("GET", params=params)
        return self._to_bookings(rows)

    def insert_booking(self, booking: NewBooking) -> Booking:
        row = new_booking_to_row(booking)
        row["status"] = "pending"
        rows = self._request(
            "POST",
            json=[row],
            headers={"Prefer": "return=representation"},
        )
        bookings = self._to_bookings(rows)
        if not bookings:
            raise StoreError("Insert returned no row")
        return bookings[0]

    def update_booking(self, booking_id: str, fields: dict[str, Any]) -> Booking | None:
        payload = {
            key: getattr(value, "value", value)
            for key, value in fields.items()
            if key in ("status", "notes")
        }
        rows = self._request(
            "PATCH",
            params={"id": f"eq.{booking_id}"},
            json=payload,
            headers={"Prefer": "return=representation"},
            missing_ok=True,
        )
        bookings = self._to_bookings(rows)
        return bookings[0] if bookings else None

    def delete_booking(self, booking_id: str) -> bool:
        rows = self._request(
            "DELETE",
            params={"id": f"eq.{booking_id}"},
            headers={"Prefer": "return=representation"},
            missing_ok=True,
        )
        return bool(rows)

    def _request(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
        missing_ok: bool = False,
    ) -> list[dict[str, Any]]:
        url = f"{self._url}/rest/v1/{self._table}"
        request_headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        request_headers.update(headers or {})

        try:
            resp = self._client.request(method, url, params=params, json=json, headers=request_headers)
        except httpx.HTTPError as e:
            self._logger.error("Supabase request failed", extra={"error": str(e)})
            raise StoreError(f"Supabase request failed: {e}") from e

        if resp.status_code >= 400:
            code, message = _error_details(resp)
            # Only an insert can violate the slot uniqueness constraint.
            if method == "POST" and (resp.status_code == 409 or code == UNIQUE_VIOLATION):
                raise SlotConflictError()
            # A malformed uuid can never match a row.
            if missing_ok and code == INVALID_TEXT_REPRESENTATION:
                return []
            self._logger.error(
                "Supabase error",
                extra={"error": message, "reason": f"{method} {resp.status_code} {code}"},
            )
            raise StoreError(message or f"Supabase returned {resp.status_code}")

        if not resp.content:
            return []
        try:
            data = resp.json()
        except ValueError as e:
            raise StoreError("Supabase returned invalid JSON") from e
        if isinstance(data, dict):
            return [data]
        return list(data)

    def _to_bookings(self, rows: list[dict[str, Any]]) -> list[Booking]:
        try:
            return [booking_from_row(row) for row in rows]
        except (KeyError, TypeError, ValueError) as e:
            self._logger.error("Unexpected booking row", extra={"error": str(e)})
            raise StoreError(f"Unexpected booking row: {e}") from e


def _error_details(resp: httpx.Response) -> tuple[str | None, str]:
    try:
        body = resp.json()
    except ValueError:
        return None, resp.text
    if not isinstance(body, dict):
        return None, resp.text
    return body.get("code"), body.get("message") or resp.text
