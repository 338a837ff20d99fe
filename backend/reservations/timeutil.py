"""Timestamp normalisation between the booking form, the database and UTC."""
from datetime import datetime, timedelta
from typing import Annotated

import pytz
from pydantic import AfterValidator

from reservations.config import settings


def facility_tz():
    return pytz.timezone(settings.TIMEZONE)


def to_utc(value: datetime) -> datetime:
    """Normalise user input. Naive values are local to the facility."""
    if value.tzinfo is None:
        value = facility_tz().localize(value)
    return value.astimezone(pytz.utc)


def stored_utc(value: datetime) -> datetime:
    """Normalise a value read back from the database. Naive values are UTC."""
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)


def utcnow() -> datetime:
    return datetime.now(pytz.utc)


def local_day_bounds(day) -> tuple[datetime, datetime]:
    """UTC bounds of a calendar day in the facility timezone."""
    start = facility_tz().localize(datetime(day.year, day.month, day.day))
    return start.astimezone(pytz.utc), (start + timedelta(days=1)).astimezone(pytz.utc)


# Response-side datetime: naive database values are tagged as UTC so clients
# never read them back as facility-local time.
UTCDateTime = Annotated[datetime, AfterValidator(stored_utc)]
