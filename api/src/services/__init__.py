"""Business logic services.

This package contains one service per entity. Services validate input,
translate store signals into domain errors and orchestrate operations
across repositories; they know nothing about HTTP.
"""

from api.src.services.bookings_service import BookingService
from api.src.services.classes_service import ClassService
from api.src.services.members_service import MemberService

__all__ = ["BookingService", "ClassService", "MemberService"]
