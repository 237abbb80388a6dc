"""ORM models package export."""

from intranet.models.apartment import Apartment
from intranet.models.audit_event import AuditEvent, AuditEventType
from intranet.models.booking import Booking, BookingStatus
from intranet.models.page import Page
from intranet.models.season import SeasonSetting, SeasonType, SeasonWeek
from intranet.models.user import User, UserRole, UserStatus

__all__ = [
    "Apartment",
    "AuditEvent",
    "AuditEventType",
    "Booking",
    "BookingStatus",
    "Page",
    "SeasonSetting",
    "SeasonType",
    "SeasonWeek",
    "User",
    "UserRole",
    "UserStatus",
]
