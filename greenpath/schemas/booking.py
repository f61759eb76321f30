from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from greenpath.models.booking import BookingStatus


class PaymentData(BaseModel):
    """Confirmation handed back by the checkout provider (e.g. PayPal)."""
    paymentId: Optional[str] = None
    paymentStatus: Optional[str] = None
    paymentMethod: Optional[str] = None


class BookingCreateRequest(BaseModel):
    tourId: UUID
    numberOfPeople: int = Field(ge=1)
    paymentData: Optional[PaymentData] = None

    class Config:
        json_schema_extra = {
            "example": {
                "tourId": "6f1c1a52-8d5e-4a49-9d0e-2c8f5d1f3b7a",
                "numberOfPeople": 2,
                "paymentData": {
                    "paymentId": "8AB12345CD678901E",
                    "paymentStatus": "COMPLETED",
                    "paymentMethod": "paypal"
                }
            }
        }


class BookingUpdateRequest(BaseModel):
    """Quantity (owner or admin) and/or status (admin only)"""
    numberOfPeople: Optional[int] = Field(default=None, ge=1)
    status: Optional[BookingStatus] = None


class BookingTourSummary(BaseModel):
    id: str
    title: str
    destination: str
    price: float
    startDate: date
    endDate: date
    isActive: bool


class BookingUserSummary(BaseModel):
    id: str
    email: str
    firstName: str
    lastName: str


class BookingResponse(BaseModel):
    id: str
    tourId: str
    userId: str
    numberOfPeople: int
    totalPrice: float
    status: BookingStatus
    paymentId: Optional[str] = None
    paymentStatus: Optional[str] = None
    paymentMethod: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    tour: Optional[BookingTourSummary] = None
    user: Optional[BookingUserSummary] = None


class BookingMessageResponse(BaseModel):
    message: str
    booking: BookingResponse
