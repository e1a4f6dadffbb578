"""Answer "what is on now" and "what is on next" for a list of sessions."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime

from conference_companion.models import Session


def current_session(sessions: Iterable[Session], at: datetime) -> Session | None:
    """Get the session running at the given instant.

    A session is running if ``start_time <= at <= end_time``, so it is
    current at the exact instant it starts and at the exact instant it
    ends. If several sessions are running, the one that started first is
    returned. If several of those share the same start time, the first
    one in iteration order wins.

    Sessions with ``start_time > end_time`` are not rejected. They can
    never be current.

    :param sessions: The sessions to search
    :param at: An aware datetime
    :return: The current session, or None if no session is running
    """
    return _earliest_start(sessions, lambda s: s.start_time <= at <= s.end_time)


def next_session(sessions: Iterable[Session], at: datetime) -> Session | None:
    """Get the first session starting strictly after the given instant.

    A session starting exactly at ``at`` is current, not next. Ties on
    the start time are resolved like in :func:`current_session`.

    :param sessions: The sessions to search
    :param at: An aware datetime
    :return: The next session, or None if no session starts later
    """
    return _earliest_start(sessions, lambda s: s.start_time > at)


def _earliest_start(
    sessions: Iterable[Session], predicate: Callable[[Session], bool]
) -> Session | None:
    earliest = None
    for session in sessions:
        if not predicate(session):
            continue
        # strict comparison keeps the first session among equal start times
        if earliest is None or session.start_time < earliest.start_time:
            earliest = session
    return earliest


class SessionTimeIndex:
    """Now/next lookups over a fixed collection of sessions."""

    def __init__(self, sessions: Iterable[Session]) -> None:
        self._sessions: tuple[Session, ...] = tuple(sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def current_session(self, at: datetime) -> Session | None:
        return current_session(self._sessions, at)

    def next_session(self, at: datetime) -> Session | None:
        return next_session(self._sessions, at)
