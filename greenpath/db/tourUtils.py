import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from greenpath.auth.accessControl import Requester, requireAdmin
from greenpath.db.tourAvailability import bookedPeople, lockTour
from greenpath.errors import CapacityExceededError, HasBookingsError, InvalidRequestError, NotFoundError
from greenpath.models.booking import Booking
from greenpath.models.tour import Tour
from greenpath.schemas.tour import TourCreateRequest, TourUpdateRequest

logger = logging.getLogger(__name__)

# request field -> column
TOUR_FIELDS = {
    "title": "title",
    "description": "description",
    "destination": "destination",
    "price": "price",
    "duration": "duration",
    "maxCapacity": "max_capacity",
    "startDate": "start_date",
    "endDate": "end_date",
    "imageUrl": "image_url",
    "isActive": "is_active",
}

# the only optional tour column
NULLABLE_FIELDS = {"imageUrl"}


def listTours(db: Session, requester: Requester, active: Optional[bool] = None) -> List[Tour]:
    """
    Regular users only ever see active tours. Admins see everything unless
    they ask for active=true.
    """
    query = db.query(Tour)
    if not requester.isAdmin or active:
        query = query.filter(Tour.is_active.is_(True))
    return query.order_by(Tour.created_at.desc()).all()


def getTour(db: Session, tourId: UUID) -> Tour:
    tour = db.query(Tour).filter(Tour.id == tourId).first()
    if not tour:
        raise NotFoundError("Tour not found")
    return tour


def createTour(db: Session, requester: Requester, request: TourCreateRequest) -> Tour:
    requireAdmin(requester, "create tours")

    tour = Tour(**{column: getattr(request, field) for field, column in TOUR_FIELDS.items()})
    try:
        db.add(tour)
        db.commit()
        db.refresh(tour)
    except Exception:
        db.rollback()
        raise

    logger.info("Tour %s created by admin %s", tour.id, requester.userId)
    return tour


def updateTour(db: Session, requester: Requester, tourId: UUID, request: TourUpdateRequest) -> Tour:
    """Apply the fields present in the request. Only imageUrl may be set to null."""
    requireAdmin(requester, "update tours")

    changes = request.model_dump(exclude_unset=True)
    if not changes:
        raise InvalidRequestError("No valid updates provided")

    for field, value in changes.items():
        if value is None and field not in NULLABLE_FIELDS:
            raise InvalidRequestError(f"{field} cannot be null")

    try:
        tour = lockTour(db, tourId)
        if not tour:
            raise NotFoundError("Tour not found")

        startDate = changes.get("startDate", tour.start_date)
        endDate = changes.get("endDate", tour.end_date)
        if endDate < startDate:
            raise InvalidRequestError("endDate must not be before startDate")

        newCapacity = changes.get("maxCapacity")
        if newCapacity is not None and newCapacity < tour.max_capacity:
            booked = bookedPeople(db, tour.id)
            if newCapacity < booked:
                raise CapacityExceededError(
                    f"Cannot reduce capacity to {newCapacity}: {booked} spots are already booked."
                )

        for field, value in changes.items():
            setattr(tour, TOUR_FIELDS[field], value)

        db.commit()
        db.refresh(tour)
    except Exception:
        db.rollback()
        raise

    return tour


def toggleTour(db: Session, requester: Requester, tourId: UUID) -> Tour:
    requireAdmin(requester, "toggle tour status")

    tour = getTour(db, tourId)
    try:
        tour.is_active = not tour.is_active
        db.commit()
        db.refresh(tour)
    except Exception:
        db.rollback()
        raise

    logger.info("Tour %s %s", tour.id, "activated" if tour.is_active else "deactivated")
    return tour


def deleteTour(db: Session, requester: Requester, tourId: UUID):
    """Only tours nobody ever booked can be deleted; the rest are deactivated."""
    requireAdmin(requester, "delete tours")

    try:
        tour = lockTour(db, tourId)
        if not tour:
            raise NotFoundError("Tour not found")

        if db.query(Booking).filter(Booking.tour_id == tour.id).count() > 0:
            raise HasBookingsError("Cannot delete tour with existing bookings. Deactivate instead.")

        db.delete(tour)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Tour %s deleted by admin %s", tourId, requester.userId)
