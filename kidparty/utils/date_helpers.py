import math
from datetime import datetime, date, timedelta
from typing import Optional, Union
from dateutil.relativedelta import relativedelta


class DateHelpers:
    @staticmethod
    def calculate_age(birth_date: Union[date, datetime], on_date: date) -> int:
        """Full years between birth_date and on_date"""
        if isinstance(birth_date, datetime):
            birth_date = birth_date.date()
        if isinstance(on_date, datetime):
            on_date = on_date.date()
        return relativedelta(on_date, birth_date).years

    @staticmethod
    def days_until(target: datetime, now: datetime) -> int:
        """Whole days until target, rounded up (a partial day counts as one)"""
        delta = (target - now) / timedelta(days=1)
        return math.ceil(delta)

    @staticmethod
    def at_hour(moment: datetime, hour: int) -> datetime:
        """Same calendar day as moment, at hour:00"""
        return moment.replace(hour=hour, minute=0, second=0, microsecond=0)

    @staticmethod
    def next_birthday(birth_date: date, today: date) -> date:
        """Next occurrence of birth_date's month/day on or after today"""
        years = today.year - birth_date.year
        candidate = birth_date + relativedelta(years=years)
        if candidate < today:
            candidate = birth_date + relativedelta(years=years + 1)
        return candidate

    @staticmethod
    def start_of_year(moment: datetime) -> datetime:
        return datetime(moment.year, 1, 1)

    @staticmethod
    def format_event_datetime(moment: Optional[datetime]) -> str:
        """Long human-readable form, e.g. 'Saturday, June 14, 2025 at 2:30 PM'"""
        if not moment:
            return ""
        hour = moment.strftime("%I").lstrip("0") or "12"
        return (
            f"{moment.strftime('%A, %B')} {moment.day}, {moment.year} "
            f"at {hour}:{moment.strftime('%M %p')}"
        )
