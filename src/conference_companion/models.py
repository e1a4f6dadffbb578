from __future__ import annotations

import datetime

from pydantic import AwareDatetime, BaseModel, Field


class Session(BaseModel):
    """Time slot in the conference programme, containing one or more items."""

    record_name: str
    start_time: AwareDatetime
    end_time: AwareDatetime
    location_record_name: str | None = None
    session_item_record_names: list[str] = Field(default_factory=list)


class SessionItem(BaseModel):
    """Talk, workshop, break or other entry shown inside a session."""

    record_name: str
    title: str
    content: str = ""
    type: str = "talk"
    session_record_name: str | None = None
    location_record_name: str | None = None
    speaker_record_names: list[str] = Field(default_factory=list)


class Speaker(BaseModel):
    """Speaker of one or more session items."""

    record_name: str
    name: str
    biography: str = ""
    twitter_id: str | None = None
    linkedin_url: str | None = None
    web_link: str | None = None
    image_version: int | None = None


class Sponsor(BaseModel):
    """Conference sponsor."""

    record_name: str
    name: str
    tagline: str = ""
    url: str | None = None
    sponsor_category: str = ""
    image_version: int = 0


class LocationType(BaseModel):
    record_name: str
    name: str
    note: str = ""


class Location(BaseModel):
    """Venue, room or point of interest."""

    record_name: str
    name: str
    note: str = ""
    latitude: float | None = None
    longitude: float | None = None
    location_type_record_name: str | None = None
    web_link: str | None = None


class AppData(BaseModel):
    """Complete conference data as provided by the app data server."""

    data_version: int = 0
    start_date: AwareDatetime | None = None
    end_date: AwareDatetime | None = None
    sessions: list[Session] = Field(default_factory=list)
    session_items: list[SessionItem] = Field(default_factory=list)
    speakers: list[Speaker] = Field(default_factory=list)
    sponsors: list[Sponsor] = Field(default_factory=list)
    locations: list[Location] = Field(default_factory=list)
    location_types: list[LocationType] = Field(default_factory=list)


class Day(BaseModel):
    """Sessions starting on a single conference day, ordered by start time."""

    date: datetime.date
    sessions: list[Session]
