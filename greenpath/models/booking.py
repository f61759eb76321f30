import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import relationship

from greenpath.db.database import Base
from greenpath.models.user import utcNow


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


# Only these statuses hold spots on a tour
ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tour_id = Column(Uuid(as_uuid=True), ForeignKey("tours.id"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    number_of_people = Column(Integer, nullable=False)

    # price x people as of the last quantity change
    total_price = Column(Numeric(10, 2), nullable=False)

    status = Column(
        Enum(BookingStatus, name="booking_status"),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True,
    )

    # Filled from the checkout confirmation, if one was supplied
    payment_id = Column(String, nullable=True)
    payment_status = Column(String, nullable=True)
    payment_method = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcNow)
    updated_at = Column(DateTime(timezone=True), default=utcNow, onupdate=utcNow)

    tour = relationship("Tour", back_populates="bookings")
    user = relationship("User", back_populates="bookings")

    @property
    def holdsSpots(self) -> bool:
        return self.status in ACTIVE_STATUSES
