from datetime import timedelta

from ..models.enums import ReminderType


class AppConstants:
    # Party validation
    MAX_GUESTS_PER_INVITE = 100

    # Links
    DEFAULT_PUBLIC_BASE_URL = "http://localhost:3000"
    DEFAULT_EMAIL_FROM = "noreply@kidparty.app"


class ReminderConstants:
    # Parties further out than this are ignored by a scheduler run
    LOOKAHEAD_WINDOW = timedelta(days=8)

    # Offsets used when pre-creating reminder rows
    SEVEN_DAYS_OFFSET = timedelta(days=7)
    TWO_DAYS_OFFSET = timedelta(days=2)
    SAME_DAY_HOUR = 9

    # Exact day-count match; other values send nothing
    CHECKPOINT_BY_DAYS = {
        7: ReminderType.SEVEN_DAYS,
        2: ReminderType.TWO_DAYS,
        0: ReminderType.SAME_DAY,
    }


class NotificationConstants:
    MAX_EMAIL_ATTEMPTS = 3
    EMAIL_BATCH_SIZE = 50

    PHOTO_SHARING_NOTIFY_HOUR = 10

    # Birthday reminders go out three weeks ahead, give or take two days
    BIRTHDAY_REMINDER_MIN_DAYS = 19
    BIRTHDAY_REMINDER_MAX_DAYS = 23
