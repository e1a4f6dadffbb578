from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from datetime import UTC, date, datetime, tzinfo

from pydantic import ValidationError
from unidecode import unidecode

from conference_companion.app_data.client import AppDataClient
from conference_companion.app_data.results import Failed, Loaded, LoadResult
from conference_companion.config import DisplayConfig
from conference_companion.models import (
    AppData,
    Day,
    Location,
    LocationType,
    Session,
    SessionItem,
    Speaker,
    Sponsor,
)
from conference_companion.session_time_index import SessionTimeIndex

_logger = logging.getLogger(__name__)


def group_sessions_by_day(sessions: list[Session], zone: tzinfo) -> list[Day]:
    """Group sessions by the day they start on in the given zone.

    :param sessions: The sessions to group
    :param zone: The zone that defines where a day starts and ends
    :return: The days in chronological order, each with its sessions
      ordered by start time
    """
    sessions_by_day: dict[date, list[Session]] = defaultdict(list)
    for session in sessions:
        sessions_by_day[session.start_time.astimezone(zone).date()].append(session)

    return [
        Day(date=day, sessions=sorted(day_sessions, key=lambda s: s.start_time))
        for day, day_sessions in sorted(sessions_by_day.items())
    ]


def _speaker_sort_key(speaker: Speaker) -> str:
    # "Émile" sorts next to "Emma", not after "Zoe"
    return unidecode(speaker.name).casefold()


class AppDataSnapshot:
    """Loaded conference data with the lookups derived from it.

    A snapshot is never modified after it was created. Reloading data
    creates a new snapshot.
    """

    def __init__(self, data: AppData, zone: tzinfo) -> None:
        self.data = data
        self.days = group_sessions_by_day(data.sessions, zone)
        self.speakers = sorted(data.speakers, key=_speaker_sort_key)
        self.session_index = SessionTimeIndex(data.sessions)
        self.session_item_dictionary = {item.record_name: item for item in data.session_items}


class AppDataManager:
    """Owner of the locally available conference data."""

    def __init__(self, client: AppDataClient, settings: DisplayConfig | None = None) -> None:
        self._client = client
        self._settings = settings or DisplayConfig()

        self._alternative_time: datetime | None = None
        self._load_lock = asyncio.Lock()
        self._image_task: asyncio.Task[list[str]] | None = None

        self._snapshot: AppDataSnapshot | None = None

    def settings(self) -> DisplayConfig:
        return self._settings

    def current_time(self) -> datetime:
        """Get the current time, or the alternative time if one was set."""
        return self._alternative_time or datetime.now(tz=UTC)

    def set_alternative_date(self, dt: datetime) -> None:
        """Use a fixed time instead of the clock, e.g. to preview the conference."""
        if dt.tzinfo is None:
            raise ValueError("The alternative date must be timezone-aware")
        _logger.info(f"Using alternative time {dt}")
        self._alternative_time = dt

    def start_date(self) -> datetime | None:
        """Get the start date of the conference, or None if no data is loaded."""
        return self._snapshot.data.start_date if self._snapshot else None

    def end_date(self) -> datetime | None:
        """Get the end date of the conference, or None if no data is loaded."""
        return self._snapshot.data.end_date if self._snapshot else None

    async def initialise_data(self) -> LoadResult:
        """Fetch the latest conference data from the server.

        On success the data is used right away and missing images are
        downloaded in the background, see :meth:`wait_for_images`.

        :return: ``Loaded`` with the new data, or ``Failed`` with a
          message that can be shown to the user
        """
        async with self._load_lock:
            app_data_raw = await self._client.fetch_app_data()
            if app_data_raw is None:
                _logger.warning("Unable to retrieve the app data")
                return Failed(reason="Unable to access app data.")

            try:
                data = AppData.model_validate(app_data_raw)
            except ValidationError as e:
                _logger.exception("Received invalid app data")
                return Failed(reason=f"Received invalid app data ({e.error_count()} errors).")

            self._setup_data(data)
            return Loaded(data=data)

    async def load_local_data(self) -> bool:
        """Load the cached copy of the conference data, if there is one.

        :return: True if local data was found and loaded
        """
        async with self._load_lock:
            app_data_raw = await self._client.load_existing_copy_from_local_store()
            if app_data_raw is None:
                return False

            try:
                data = AppData.model_validate(app_data_raw)
            except ValidationError:
                _logger.exception("Cached app data is invalid, ignoring it")
                return False

            self._setup_data(data)
            _logger.info("App data loaded from cache file.")
            return True

    def _setup_data(self, data: AppData) -> None:
        # readers see either the old or the new snapshot, never a mix
        self._snapshot = AppDataSnapshot(data, self._settings.zone)
        _logger.info(
            f"Loaded app data version {data.data_version} with {len(data.sessions)} sessions"
        )
        self._image_task = asyncio.create_task(self._process_images_after(self._image_task))

    async def _process_images_after(self, previous: asyncio.Task[list[str]] | None) -> list[str]:
        # one download run at a time, each run skips the images stored by the one before
        if previous is not None:
            await asyncio.wait([previous])
            if not previous.cancelled() and previous.exception() is not None:
                _logger.error("Previous image download failed", exc_info=previous.exception())
        return await self.process_images()

    async def process_images(self) -> list[str]:
        """Download the speaker and sponsor images that are not available yet."""
        images_to_load = [
            speaker.record_name
            for speaker in self.speakers()
            if speaker.image_version is not None
            and not self._client.image_exists(speaker.record_name)
        ]
        images_to_load.extend(
            sponsor.record_name
            for sponsor in self.sponsors()
            if sponsor.image_version != 0 and not self._client.image_exists(sponsor.record_name)
        )

        return await self._client.download_images(images_to_load)

    async def wait_for_images(self) -> list[str]:
        """Wait until the images of the last load are downloaded.

        :return: The record names of the downloaded images
        """
        if self._image_task is None:
            return []
        return await self._image_task

    def days(self) -> list[Day]:
        return self._snapshot.days if self._snapshot else []

    def sessions(self) -> list[Session]:
        return self._snapshot.data.sessions if self._snapshot else []

    def session_items(self) -> list[SessionItem]:
        return self._snapshot.data.session_items if self._snapshot else []

    def session_item_dictionary(self) -> dict[str, SessionItem]:
        return self._snapshot.session_item_dictionary if self._snapshot else {}

    def sponsors(self) -> list[Sponsor]:
        return self._snapshot.data.sponsors if self._snapshot else []

    def speakers(self) -> list[Speaker]:
        """Get all speakers, sorted by name."""
        return self._snapshot.speakers if self._snapshot else []

    def locations(self) -> list[Location]:
        return self._snapshot.data.locations if self._snapshot else []

    def location_types(self) -> list[LocationType]:
        return self._snapshot.data.location_types if self._snapshot else []

    def is_data_loaded(self) -> bool:
        return self._snapshot is not None

    def now_session(self, at: datetime) -> Session | None:
        """Get the session running at the given time, see :func:`current_session`."""
        snapshot = self._snapshot
        return snapshot.session_index.current_session(at) if snapshot else None

    def next_session(self, at: datetime) -> Session | None:
        """Get the next session after the given time, see :func:`next_session`."""
        snapshot = self._snapshot
        return snapshot.session_index.next_session(at) if snapshot else None
