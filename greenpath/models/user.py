import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, String, Uuid
from sqlalchemy.orm import relationship

from greenpath.db.database import Base


def utcNow():
    return datetime.now(timezone.utc)


class Role(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)  # bcrypt hash
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)

    # Assigned at registration; only changed by the createAdmin command
    role = Column(Enum(Role, name="user_role"), nullable=False, default=Role.USER)

    created_at = Column(DateTime(timezone=True), default=utcNow)
    updated_at = Column(DateTime(timezone=True), default=utcNow, onupdate=utcNow)

    bookings = relationship("Booking", back_populates="user")
