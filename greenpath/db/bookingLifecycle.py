"""
Booking lifecycle: create, read, change quantity or status, cancel.

Every capacity-affecting write follows the same shape:
1. lock the tour row (SELECT ... FOR UPDATE)
2. recompute available spots from the bookings table
3. write and commit in the same transaction
Any failure rolls the session back, so a rejected request persists nothing.
"""
import logging
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from greenpath.auth.accessControl import Requester, bookingVisibilityFilter, requireAdmin
from greenpath.db.tourAvailability import availableSpots, lockTour, rawAvailableSpots
from greenpath.errors import (
    CapacityExceededError,
    InactiveTourError,
    InvalidRequestError,
    NotFoundError,
    PaymentIncompleteError,
)
from greenpath.models.booking import ACTIVE_STATUSES, Booking, BookingStatus
from greenpath.models.tour import Tour
from greenpath.schemas.booking import PaymentData

logger = logging.getLogger(__name__)

PAYMENT_COMPLETED = "COMPLETED"


def calculateTotalPrice(price, numberOfPeople: int) -> Decimal:
    return Decimal(str(price)) * numberOfPeople


def isPaymentCompleted(payment: PaymentData) -> bool:
    return payment.paymentStatus == PAYMENT_COMPLETED


def _ensureCapacity(db: Session, tour: Tour, numberOfPeople: int, excludeBookingId: Optional[UUID] = None):
    if numberOfPeople > rawAvailableSpots(db, tour, excludeBookingId):
        spots = availableSpots(db, tour, excludeBookingId)
        logger.warning(
            "Capacity check failed for tour %s: requested %s, available %s",
            tour.id, numberOfPeople, spots,
        )
        raise CapacityExceededError(
            f"Not enough spots available. Only {spots} spots remaining.",
            availableSpots=spots,
        )


def _ensureValidQuantity(numberOfPeople: int):
    if numberOfPeople is None or numberOfPeople < 1:
        raise InvalidRequestError("numberOfPeople must be at least 1")


def _withDetails(query):
    return query.options(joinedload(Booking.tour), joinedload(Booking.user))


# ============================================
# CREATE
# ============================================

def createBooking(
    db: Session,
    requester: Requester,
    tourId: UUID,
    numberOfPeople: int,
    payment: Optional[PaymentData] = None,
) -> Booking:
    """
    Book `numberOfPeople` spots on a tour for the requester.

    The booking starts CONFIRMED when a completed payment confirmation comes
    with the request, PENDING otherwise.
    """
    _ensureValidQuantity(numberOfPeople)

    try:
        tour = lockTour(db, tourId)
        if not tour:
            raise NotFoundError("Tour not found")

        if not tour.is_active:
            raise InactiveTourError("Tour is not available for booking")

        _ensureCapacity(db, tour, numberOfPeople)

        if payment is not None and not isPaymentCompleted(payment):
            raise PaymentIncompleteError("Payment was not completed successfully")

        booking = Booking(
            tour_id=tour.id,
            user_id=requester.userId,
            number_of_people=numberOfPeople,
            total_price=calculateTotalPrice(tour.price, numberOfPeople),
            status=BookingStatus.CONFIRMED if payment is not None else BookingStatus.PENDING,
        )

        if payment is not None:
            booking.payment_id = payment.paymentId
            booking.payment_status = payment.paymentStatus
            booking.payment_method = payment.paymentMethod

        db.add(booking)
        db.commit()

    except Exception:
        db.rollback()
        raise

    logger.info(
        "Booking %s created on tour %s for %s people (%s)",
        booking.id, tourId, numberOfPeople, booking.status.value,
    )
    return getBooking(db, requester, booking.id)


# ============================================
# READ
# ============================================

def listBookings(db: Session, requester: Requester) -> List[Booking]:
    """Admins see every booking, everyone else only their own. Newest first."""
    return (
        _withDetails(db.query(Booking))
        .filter(bookingVisibilityFilter(requester))
        .order_by(Booking.created_at.desc())
        .all()
    )


def getBooking(db: Session, requester: Requester, bookingId: UUID) -> Booking:
    booking = (
        _withDetails(db.query(Booking))
        .filter(Booking.id == bookingId)
        .filter(bookingVisibilityFilter(requester))
        .first()
    )
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


# ============================================
# UPDATE
# ============================================

def _applyChanges(
    db: Session,
    requester: Requester,
    booking: Booking,
    numberOfPeople: Optional[int],
    status: Optional[BookingStatus],
):
    """Validate and stage quantity/status changes on a booking. Does not commit."""
    quantityChanged = numberOfPeople is not None and numberOfPeople != booking.number_of_people
    if numberOfPeople is not None:
        _ensureValidQuantity(numberOfPeople)

    newPeople = numberOfPeople if quantityChanged else booking.number_of_people
    newStatus = status if status is not None else booking.status

    holdsSpots = newStatus in ACTIVE_STATUSES
    reactivating = holdsSpots and booking.status not in ACTIVE_STATUSES
    growing = holdsSpots and quantityChanged and newPeople > booking.number_of_people

    tour = lockTour(db, booking.tour_id)

    if reactivating or growing:
        _ensureCapacity(db, tour, newPeople, excludeBookingId=booking.id)

    if quantityChanged:
        booking.number_of_people = newPeople
        booking.total_price = calculateTotalPrice(tour.price, newPeople)

    if status is not None and status != booking.status:
        logger.info(
            "Booking %s status %s -> %s by admin %s",
            booking.id, booking.status.value, status.value, requester.userId,
        )
        booking.status = status


def updateBooking(
    db: Session,
    requester: Requester,
    bookingId: UUID,
    numberOfPeople: Optional[int] = None,
    status: Optional[BookingStatus] = None,
) -> Booking:
    """
    Change the number of people and/or the status of a booking.

    Quantity: owner or admin, capacity re-checked excluding this booking,
    totalPrice recomputed from the tour's current price.
    Status: admin only, any status to any status.
    """
    if numberOfPeople is None and status is None:
        raise InvalidRequestError("No valid updates provided")

    if status is not None:
        requireAdmin(requester, "change booking status")

    booking = getBooking(db, requester, bookingId)

    try:
        _applyChanges(db, requester, booking, numberOfPeople, status)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return getBooking(db, requester, bookingId)


def updateQuantity(db: Session, requester: Requester, bookingId: UUID, numberOfPeople: int) -> Booking:
    _ensureValidQuantity(numberOfPeople)
    return updateBooking(db, requester, bookingId, numberOfPeople=numberOfPeople)


def updateStatus(db: Session, requester: Requester, bookingId: UUID, status: BookingStatus) -> Booking:
    return updateBooking(db, requester, bookingId, status=status)


# ============================================
# CANCEL
# ============================================

def cancelBooking(db: Session, requester: Requester, bookingId: UUID) -> Booking:
    """
    Cancel a booking (owner or admin).

    The record is kept with status CANCELLED, which frees its spots; this is
    the same end state an admin reaches through a status update.
    """
    booking = getBooking(db, requester, bookingId)

    if booking.status is BookingStatus.CANCELLED:
        return booking

    try:
        booking.status = BookingStatus.CANCELLED
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Booking %s cancelled by %s", bookingId, requester.userId)
    return getBooking(db, requester, bookingId)
