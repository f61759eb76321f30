from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from greenpath.auth.accessControl import Requester
from greenpath.auth.dependencies import getDb, getRequester
from greenpath.db.tourAvailability import activeBookingCount, availableSpots
from greenpath.db.tourUtils import createTour, deleteTour, getTour, listTours, toggleTour, updateTour
from greenpath.models.booking import Booking
from greenpath.models.tour import Tour
from greenpath.routes.booking import toBookingResponse
from greenpath.schemas.tour import TourCreateRequest, TourMessageResponse, TourResponse, TourUpdateRequest

router = APIRouter(prefix="/api/tours", tags=["Tours"])


def toTourResponse(db: Session, tour: Tour, includeBookings: bool = False) -> TourResponse:
    bookings = None
    if includeBookings:
        rows = (
            db.query(Booking)
            .filter(Booking.tour_id == tour.id)
            .order_by(Booking.created_at.desc())
            .all()
        )
        bookings = [toBookingResponse(b, includeTour=False) for b in rows]

    return TourResponse(
        id=str(tour.id),
        title=tour.title,
        description=tour.description,
        destination=tour.destination,
        price=float(tour.price),
        duration=tour.duration,
        maxCapacity=tour.max_capacity,
        startDate=tour.start_date,
        endDate=tour.end_date,
        imageUrl=tour.image_url,
        isActive=tour.is_active,
        availableSpots=availableSpots(db, tour),
        totalBookings=activeBookingCount(db, tour.id),
        createdAt=tour.created_at,
        updatedAt=tour.updated_at,
        bookings=bookings
    )


@router.get("", response_model=List[TourResponse])
def listAll(
    active: Optional[bool] = None,
    requester: Requester = Depends(getRequester),
    db: Session = Depends(getDb)
):
    """
    Tours with live availability. Users see active tours only; admins see
    all tours unless `active=true` is passed.
    """
    return [toTourResponse(db, tour) for tour in listTours(db, requester, active)]


@router.get("/{tourId}", response_model=TourResponse)
def getOne(tourId: UUID, requester: Requester = Depends(getRequester), db: Session = Depends(getDb)):
    """Admins also get the tour's bookings."""
    tour = getTour(db, tourId)
    return toTourResponse(db, tour, includeBookings=requester.isAdmin)


@router.post("", response_model=TourMessageResponse, status_code=201)
def create(
    request: TourCreateRequest,
    requester: Requester = Depends(getRequester),
    db: Session = Depends(getDb)
):
    tour = createTour(db, requester, request)
    return TourMessageResponse(message="Tour created successfully", tour=toTourResponse(db, tour))


@router.put("/{tourId}", response_model=TourMessageResponse)
def update(
    tourId: UUID,
    request: TourUpdateRequest,
    requester: Requester = Depends(getRequester),
    db: Session = Depends(getDb)
):
    tour = updateTour(db, requester, tourId, request)
    return TourMessageResponse(message="Tour updated successfully", tour=toTourResponse(db, tour))


@router.patch("/{tourId}/toggle", response_model=TourMessageResponse)
def toggle(tourId: UUID, requester: Requester = Depends(getRequester), db: Session = Depends(getDb)):
    """Activate or deactivate a tour. Inactive tours cannot be booked."""
    tour = toggleTour(db, requester, tourId)
    state = "activated" if tour.is_active else "deactivated"
    return TourMessageResponse(message=f"Tour {state} successfully", tour=toTourResponse(db, tour))


@router.delete("/{tourId}")
def delete(tourId: UUID, requester: Requester = Depends(getRequester), db: Session = Depends(getDb)):
    """Fails with HasBookings if the tour was ever booked; deactivate it instead."""
    deleteTour(db, requester, tourId)
    return {"message": "Tour deleted successfully"}
