# kidparty/routers/__init__.py

from . import children
from . import notifications
from . import parties
from . import reminders
from . import rsvp

__all__ = [
    "children",
    "notifications",
    "parties",
    "reminders",
    "rsvp",
]
