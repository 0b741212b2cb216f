from .email import EmailService, EmailDeliveryError
from .date_helpers import DateHelpers
from .constants import AppConstants, ReminderConstants, NotificationConstants
from .qr import generate_qr_code, QRCodeError

__all__ = [
    "EmailService", "EmailDeliveryError",
    "DateHelpers",
    "AppConstants", "ReminderConstants", "NotificationConstants",
    "generate_qr_code", "QRCodeError",
]
