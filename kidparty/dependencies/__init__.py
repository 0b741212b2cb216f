# kidparty/dependencies/__init__.py

from .permissions import (
    get_current_user,
    verify_cron_secret,
)
from .services import get_email_service

__all__ = [
    "get_current_user",
    "verify_cron_secret",
    "get_email_service",
]
