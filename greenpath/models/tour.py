import uuid

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship

from greenpath.db.database import Base
from greenpath.models.user import utcNow


class Tour(Base):
    __tablename__ = "tours"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    destination = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    duration = Column(Integer, nullable=False)  # days
    max_capacity = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    image_url = Column(String, nullable=True)

    # Tours with bookings are deactivated, never deleted
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=utcNow)
    updated_at = Column(DateTime(timezone=True), default=utcNow, onupdate=utcNow)

    bookings = relationship("Booking", back_populates="tour")
