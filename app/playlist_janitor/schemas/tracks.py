from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime


class SkippedTrackOut(BaseModel):
    track_id: str
    playlist_id: str
    skipped_date: datetime

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class SkippedTrackHistoryOut(BaseModel):
    track_id: str
    playlist_id: str
    skipped_date: datetime
    archived_at: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class SpotifyTrackOut(BaseModel):
    id: str
    name: str
    artists: List[str]
    album: Optional[str] = None
    duration_ms: Optional[int] = None
    uri: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class CleanupResult(BaseModel):
    playlist_id: str
    archived_track_ids: List[str] = []
    archived_count: int = 0
    removed_from_spotify: bool = False

    class Config:
        alias_generator = to_camel
        populate_by_name = True
