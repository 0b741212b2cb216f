from .notification_service import NotificationService
from .party_service import PartyService
from .reminder_repository import ReminderRepository, SQLAlchemyReminderRepository
from .reminder_service import ReminderService
from .rsvp_service import RSVPService

__all__ = [
    "NotificationService",
    "PartyService",
    "ReminderRepository",
    "SQLAlchemyReminderRepository",
    "ReminderService",
    "RSVPService",
]
