"""
Who may do what.

Tours are managed by admins only. Bookings are visible to, and mutable by,
their owner or any admin; booking status is admin-only.
"""
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import true

from greenpath.errors import ForbiddenError
from greenpath.models.booking import Booking
from greenpath.models.user import Role


@dataclass(frozen=True)
class Requester:
    """Identity of the caller, as supplied by the auth provider."""

    userId: UUID
    role: Role

    @property
    def isAdmin(self) -> bool:
        return isAdminRole(self.role)


def isAdminRole(role: Role) -> bool:
    if role is Role.ADMIN:
        return True
    if role is Role.USER:
        return False
    raise ValueError(f"Unknown role: {role!r}")


def requireAdmin(requester: Requester, action: str):
    if not requester.isAdmin:
        raise ForbiddenError(f"Only administrators can {action}")


def bookingVisibilityFilter(requester: Requester):
    """SQL criteria limiting a Booking query to what the requester may see."""
    if requester.isAdmin:
        return true()
    return Booking.user_id == requester.userId
