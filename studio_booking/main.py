import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studio_booking.api.admin_bookings import router as admin_bookings_router
from studio_booking.api.bookings import router as bookings_router
from studio_booking.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("booking_id", "date", "time", "service", "status", "error", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="Studio Booking", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "x-admin-password"],
)

app.include_router(bookings_router, tags=["bookings"])
app.include_router(admin_bookings_router, tags=["admin"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
