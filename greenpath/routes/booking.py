from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from greenpath.auth.accessControl import Requester
from greenpath.auth.dependencies import getDb, getRequester
from greenpath.db.bookingLifecycle import (
    cancelBooking,
    createBooking,
    getBooking,
    listBookings,
    updateBooking,
)
from greenpath.models.booking import Booking
from greenpath.schemas.booking import (
    BookingCreateRequest,
    BookingMessageResponse,
    BookingResponse,
    BookingTourSummary,
    BookingUpdateRequest,
    BookingUserSummary,
)

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])


def toBookingResponse(booking: Booking, includeTour: bool = True, includeUser: bool = True) -> BookingResponse:
    tour = booking.tour if includeTour else None
    user = booking.user if includeUser else None

    return BookingResponse(
        id=str(booking.id),
        tourId=str(booking.tour_id),
        userId=str(booking.user_id),
        numberOfPeople=booking.number_of_people,
        totalPrice=float(booking.total_price),
        status=booking.status,
        paymentId=booking.payment_id,
        paymentStatus=booking.payment_status,
        paymentMethod=booking.payment_method,
        createdAt=booking.created_at,
        updatedAt=booking.updated_at,
        tour=BookingTourSummary(
            id=str(tour.id),
            title=tour.title,
            destination=tour.destination,
            price=float(tour.price),
            startDate=tour.start_date,
            endDate=tour.end_date,
            isActive=tour.is_active
        ) if tour else None,
        user=BookingUserSummary(
            id=str(user.id),
            email=user.email,
            firstName=user.first_name,
            lastName=user.last_name
        ) if user else None
    )


@router.post("", response_model=BookingMessageResponse, status_code=201)
def create(
    request: BookingCreateRequest,
    requester: Requester = Depends(getRequester),
    db: Session = Depends(getDb)
):
    """
    Book spots on a tour.

    If `paymentData` is sent it must carry paymentStatus COMPLETED; the
    booking is then CONFIRMED straight away, otherwise it starts PENDING.
    """
    booking = createBooking(
        db,
        requester,
        request.tourId,
        request.numberOfPeople,
        request.paymentData
    )
    return BookingMessageResponse(
        message="Booking created successfully",
        booking=toBookingResponse(booking)
    )


@router.get("", response_model=List[BookingResponse])
def listAll(requester: Requester = Depends(getRequester), db: Session = Depends(getDb)):
    """Admins get every booking, users get their own. Newest first."""
    return [toBookingResponse(b) for b in listBookings(db, requester)]


@router.get("/{bookingId}", response_model=BookingResponse)
def getOne(bookingId: UUID, requester: Requester = Depends(getRequester), db: Session = Depends(getDb)):
    return toBookingResponse(getBooking(db, requester, bookingId))


@router.put("/{bookingId}", response_model=BookingMessageResponse)
def update(
    bookingId: UUID,
    request: BookingUpdateRequest,
    requester: Requester = Depends(getRequester),
    db: Session = Depends(getDb)
):
    """
    Change numberOfPeople (owner or admin) and/or status (admin only).
    """
    booking = updateBooking(
        db,
        requester,
        bookingId,
        numberOfPeople=request.numberOfPeople,
        status=request.status
    )
    return BookingMessageResponse(
        message="Booking updated successfully",
        booking=toBookingResponse(booking)
    )


@router.delete("/{bookingId}", response_model=BookingMessageResponse)
def cancel(bookingId: UUID, requester: Requester = Depends(getRequester), db: Session = Depends(getDb)):
    """Cancel a booking. The record stays, with status CANCELLED."""
    booking = cancelBooking(db, requester, bookingId)
    return BookingMessageResponse(
        message="Booking cancelled successfully",
        booking=toBookingResponse(booking)
    )
