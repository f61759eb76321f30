from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from greenpath.schemas.booking import BookingResponse


class TourCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    destination: str = Field(min_length=1)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    duration: int = Field(gt=0)  # days
    maxCapacity: int = Field(gt=0)
    startDate: date
    endDate: date
    imageUrl: Optional[str] = None
    isActive: bool = True

    @model_validator(mode="after")
    def checkDates(self):
        if self.endDate < self.startDate:
            raise ValueError("endDate must not be before startDate")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Costa Rica Wildlife Sanctuary Volunteer Tour",
                "description": "Help care for rescued sloths and tropical birds.",
                "destination": "Manuel Antonio, Costa Rica",
                "price": 1799.99,
                "duration": 7,
                "maxCapacity": 15,
                "startDate": "2026-11-05",
                "endDate": "2026-11-12"
            }
        }


class TourUpdateRequest(BaseModel):
    """Partial update, only the fields sent are changed"""
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    destination: Optional[str] = Field(default=None, min_length=1)
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    duration: Optional[int] = Field(default=None, gt=0)
    maxCapacity: Optional[int] = Field(default=None, gt=0)
    startDate: Optional[date] = None
    endDate: Optional[date] = None
    imageUrl: Optional[str] = None
    isActive: Optional[bool] = None


class TourResponse(BaseModel):
    id: str
    title: str
    description: str
    destination: str
    price: float
    duration: int
    maxCapacity: int
    startDate: date
    endDate: date
    imageUrl: Optional[str] = None
    isActive: bool
    availableSpots: int
    totalBookings: int
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    bookings: Optional[List[BookingResponse]] = None


class TourMessageResponse(BaseModel):
    message: str
    tour: TourResponse
