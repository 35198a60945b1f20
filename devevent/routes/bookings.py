"""Booking routes."""

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from devevent.core.dependencies import get_db
from devevent.schemas import MAX_RECORD_ID, BookingCreate, BookingEnvelope, BookingPatch
from devevent.services.booking_manager import BookingManager

router = APIRouter(
    prefix="/api/bookings",
    tags=["bookings"],
)


@router.post("", response_model=BookingEnvelope, status_code=status.HTTP_201_CREATED)
async def create_booking(payload: BookingCreate, session: AsyncSession = Depends(get_db)):
    """Book a spot on an event."""
    booking = await BookingManager(session).create(payload.event_id, payload.email)
    await session.commit()
    return {"message": "Booking created successfully", "booking": booking.to_dict()}


@router.patch("/{booking_id}", response_model=BookingEnvelope)
async def update_booking(
    patch: BookingPatch,
    booking_id: int = Path(..., ge=1, le=MAX_RECORD_ID),
    session: AsyncSession = Depends(get_db),
):
    """Change the email or move the booking to another event."""
    booking = await BookingManager(session).update(booking_id, patch)
    await session.commit()
    return {"message": "Booking updated successfully", "booking": booking.to_dict()}
