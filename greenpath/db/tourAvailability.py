"""
Remaining capacity for a tour.

availableSpots = maxCapacity - sum(numberOfPeople) over the tour's
PENDING/CONFIRMED bookings. Always computed from the bookings table, never
stored on the tour.
"""
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from greenpath.models.booking import ACTIVE_STATUSES, Booking
from greenpath.models.tour import Tour


def _activeBookings(db: Session, tourId: UUID, excludeBookingId: Optional[UUID] = None):
    query = db.query(Booking).filter(
        Booking.tour_id == tourId,
        Booking.status.in_(ACTIVE_STATUSES),
    )
    if excludeBookingId is not None:
        query = query.filter(Booking.id != excludeBookingId)
    return query


def bookedPeople(db: Session, tourId: UUID, excludeBookingId: Optional[UUID] = None) -> int:
    total = (
        _activeBookings(db, tourId, excludeBookingId)
        .with_entities(func.coalesce(func.sum(Booking.number_of_people), 0))
        .scalar()
    )
    return int(total or 0)


def activeBookingCount(db: Session, tourId: UUID) -> int:
    return _activeBookings(db, tourId).count()


def rawAvailableSpots(db: Session, tour: Tour, excludeBookingId: Optional[UUID] = None) -> int:
    """Can go negative if the tour was overbooked."""
    return tour.max_capacity - bookedPeople(db, tour.id, excludeBookingId)


def availableSpots(db: Session, tour: Tour, excludeBookingId: Optional[UUID] = None) -> int:
    """The value callers see: never below zero."""
    return max(0, rawAvailableSpots(db, tour, excludeBookingId))


def lockTourStatement(tourId: UUID):
    return select(Tour).where(Tour.id == tourId).with_for_update()


def lockTour(db: Session, tourId: UUID) -> Optional[Tour]:
    """
    Load a tour with a row lock (SELECT ... FOR UPDATE).

    Capacity checks and the booking write that follows must happen while
    this lock is held, i.e. before the session commits or rolls back.
    """
    return db.execute(lockTourStatement(tourId)).scalars().first()
