from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from studio_booking.api.schemas import BookingSchema, BookingUpdateSchema, DeleteResponseSchema
from studio_booking.application.exceptions import (
    NotFoundError,
    StoreError,
    Unauthorized,
    ValidationError,
)
from studio_booking.application.use_cases.admin_bookings import AdminBookingsUseCase
from studio_booking.wiring.dependencies import get_admin_use_case

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/admin-bookings", response_model=list[BookingSchema])
def admin_list_bookings(
    date: str | None = Query(None, description="YYYY-MM-DD"),
    limit: int | None = Query(None),
    x_admin_password: str | None = Header(None, alias="x-admin-password"),
    uc: AdminBookingsUseCase = Depends(get_admin_use_case),
):
    try:
        bookings = uc.list(x_admin_password, date=date, limit=limit)
    except Unauthorized:
        raise HTTPException(status_code=401, detail="Unauthorized")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except StoreError as e:
        logger.exception("Store failed while listing bookings", extra={"error": str(e)})
        raise HTTPException(status_code=500, detail=str(e))

    return [BookingSchema.from_entity(b) for b in bookings]


@router.patch("/api/admin-bookings", response_model=BookingSchema)
def admin_update_booking(
    req: BookingUpdateSchema,
    x_admin_password: str | None = Header(None, alias="x-admin-password"),
    uc: AdminBookingsUseCase = Depends(get_admin_use_case),
):
    try:
        booking = uc.update(x_admin_password, req.id, status=req.status, notes=req.notes)
    except Unauthorized:
        raise HTTPException(status_code=401, detail="Unauthorized")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        logger.exception("Store failed while updating booking", extra={"error": str(e)})
        raise HTTPException(status_code=500, detail=str(e))

    return BookingSchema.from_entity(booking)


@router.delete("/api/admin-bookings", response_model=DeleteResponseSchema)
def admin_delete_booking(
    id: str | None = Query(None),
    x_admin_password: str | None = Header(None, alias="x-admin-password"),
    uc: AdminBookingsUseCase = Depends(get_admin_use_case),
):
    try:
        uc.delete(x_admin_password, id)
    except Unauthorized:
        raise HTTPException(status_code=401, detail="Unauthorized")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        logger.exception("Store failed while deleting booking", extra={"error": str(e)})
        raise HTTPException(status_code=500, detail=str(e))

    return DeleteResponseSchema(ok=True)
