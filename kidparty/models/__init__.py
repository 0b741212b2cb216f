from .user import User
from .child import Child
from .party import Party
from .guest import Guest
from .rsvp import RSVP
from .reminder import Reminder
from .email_notification import EmailNotification


__all__ = [
    "User",
    "Child",
    "Party",
    "Guest",
    "RSVP",
    "Reminder",
    "EmailNotification",
]
