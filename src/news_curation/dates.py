"""Country-local time helpers."""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from news_curation.data import Country

COUNTRY_TIMEZONES: dict[Country, str] = {
    Country.US: "America/New_York",
    Country.FR: "Europe/Paris",
    Country.GLOBAL: "UTC",
}


def timezone_for(country: Country) -> ZoneInfo:
    return ZoneInfo(COUNTRY_TIMEZONES[country])


def local_time(country: Country, now: datetime) -> datetime:
    """Express an aware datetime in the country's timezone."""
    return now.astimezone(timezone_for(country))


def local_day_bounds(country: Country, now: datetime) -> tuple[datetime, datetime]:
    """Start (inclusive) and end (exclusive) of the country's current day."""
    local = local_time(country, now)
    start = local.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)
