"""Display formatting for session start and end times."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Final, NamedTuple

from conference_companion.models import Session

_TIME_FORMAT: Final = "%H:%M"
_TIME_MISSING: Final = "--:--"


class SessionTimes(NamedTuple):
    start: str
    end: str


def format_time(dt: datetime | None, zone: tzinfo) -> str:
    """Format an instant as a 24h clock time in the given zone.

    :param dt: An aware datetime, or None
    :param zone: The zone the conference times are displayed in
    :return: A time like "09:30", or a placeholder if there is no time
    """
    if dt is None:
        return _TIME_MISSING
    return dt.astimezone(zone).strftime(_TIME_FORMAT)


def format_session_times(session: Session, zone: tzinfo) -> SessionTimes:
    """Format the start and end time of a session for display.

    :param session: The session
    :param zone: The zone the conference times are displayed in
    :return: The formatted start and end time
    """
    return SessionTimes(
        start=format_time(session.start_time, zone),
        end=format_time(session.end_time, zone),
    )
