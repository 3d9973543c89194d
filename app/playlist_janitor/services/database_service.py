"""
Database service.

DatabaseService is the persistence-facing interface the HTTP layer talks to.
SqlDatabaseService implements it on top of a SQLAlchemy session; tests swap
in a fake or a mock.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from playlist_janitor.db.models import Playlist, SkippedTrack, SkippedTrackHistory
from playlist_janitor.schemas.playlists import PlaylistCreate, PlaylistUpdate

logger = logging.getLogger(__name__)


class DatabaseService(ABC):

    @abstractmethod
    def get_playlists(self) -> List[Playlist]:
        """All monitored playlists, empty list if there are none."""

    @abstractmethod
    def get_playlist(self, playlist_id: str) -> Optional[Playlist]:
        """The playlist with this id, or None."""

    @abstractmethod
    def add_playlist(self, request: PlaylistCreate) -> Playlist:
        """
        Persist a new playlist built from the request.

        Does not check whether the id is already taken; callers do that first.
        """

    @abstractmethod
    def update_playlist(self, playlist_id: str, request: PlaylistUpdate) -> Optional[Playlist]:
        """Apply the fields that were set on the request. None if the playlist is absent."""

    @abstractmethod
    def delete_playlist(self, playlist_id: str) -> None:
        """Remove the playlist together with its skipped tracks and history."""

    @abstractmethod
    def get_playlist_skipped_tracks(self, playlist_id: str) -> List[SkippedTrack]:
        ...

    @abstractmethod
    def get_playlist_skipped_track_history(self, playlist_id: str) -> List[SkippedTrackHistory]:
        ...

    @abstractmethod
    def archive_skipped_tracks(self, playlist_id: str, track_ids: Iterable[str]) -> List[SkippedTrackHistory]:
        """Move every skip event of the given tracks into the history table."""


class SqlDatabaseService(DatabaseService):
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_playlists(self) -> List[Playlist]:
        return list(self.db.scalars(select(Playlist).order_by(Playlist.id)))

    def get_playlist(self, playlist_id: str) -> Optional[Playlist]:
        return self.db.get(Playlist, playlist_id)

    def add_playlist(self, request: PlaylistCreate) -> Playlist:
        pl = Playlist(
            id=request.id,
            skip_threshold=request.skip_threshold,
            ignore_initial_skips=request.ignore_initial_skips,
            auto_cleanup_limit=request.auto_cleanup_limit,
        )
        self.db.add(pl)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(pl)
        logger.info(f"Added playlist '{pl.id}'")
        return pl

    def update_playlist(self, playlist_id: str, request: PlaylistUpdate) -> Optional[Playlist]:
        pl = self.get_playlist(playlist_id)
        if pl is None:
            return None

        data = request.model_dump(exclude_unset=True)
        for k, v in data.items():
            setattr(pl, k, v)

        self.db.add(pl)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(pl)
        logger.info(f"Updated playlist '{playlist_id}': {sorted(data)}")
        return pl

    def delete_playlist(self, playlist_id: str) -> None:
        pl = self.get_playlist(playlist_id)
        if pl is None:
            return

        self.db.delete(pl)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Deleted playlist '{playlist_id}'")

    def get_playlist_skipped_tracks(self, playlist_id: str) -> List[SkippedTrack]:
        q = (
            select(SkippedTrack)
            .where(SkippedTrack.playlist_id == playlist_id)
            .order_by(SkippedTrack.skipped_date, SkippedTrack.track_id)
        )
        return list(self.db.scalars(q))

    def get_playlist_skipped_track_history(self, playlist_id: str) -> List[SkippedTrackHistory]:
        q = (
            select(SkippedTrackHistory)
            .where(SkippedTrackHistory.playlist_id == playlist_id)
            .order_by(SkippedTrackHistory.skipped_date, SkippedTrackHistory.track_id)
        )
        return list(self.db.scalars(q))

    def archive_skipped_tracks(self, playlist_id: str, track_ids: Iterable[str]) -> List[SkippedTrackHistory]:
        track_ids = list(track_ids)
        if not track_ids:
            return []

        skips = list(
            self.db.scalars(
                select(SkippedTrack)
                .where(SkippedTrack.playlist_id == playlist_id)
                .where(SkippedTrack.track_id.in_(track_ids))
                .order_by(SkippedTrack.skipped_date)
            )
        )

        archived = []
        try:
            for skip in skips:
                entry = SkippedTrackHistory(
                    track_id=skip.track_id,
                    playlist_id=skip.playlist_id,
                    skipped_date=skip.skipped_date,
                )
                self.db.add(entry)
                self.db.delete(skip)
                archived.append(entry)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Archived {len(archived)} skips of {len(track_ids)} tracks for playlist '{playlist_id}'")
        return archived
