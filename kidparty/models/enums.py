from enum import Enum


class RSVPStatus(str, Enum):
    YES = "YES"
    NO = "NO"
    MAYBE = "MAYBE"


class ReminderType(str, Enum):
    SEVEN_DAYS = "SEVEN_DAYS"
    TWO_DAYS = "TWO_DAYS"
    SAME_DAY = "SAME_DAY"


class EmailNotificationType(str, Enum):
    PHOTO_SHARING_AVAILABLE = "PHOTO_SHARING_AVAILABLE"
    BIRTHDAY_PARTY_REMINDER = "BIRTHDAY_PARTY_REMINDER"


class EmailNotificationStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
