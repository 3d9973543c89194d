from __future__ import annotations

from datetime import datetime
from typing import Optional, List

from sqlalchemy import (
    String,
    Integer,
    Boolean,
    DateTime,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# ---------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------

class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    return datetime.utcnow()


# ---------------------------------------------------------------------
# Playlists
# ---------------------------------------------------------------------

class Playlist(Base):
    """A monitored Spotify playlist and its cleanup configuration."""
    __tablename__ = "playlists"

    # Spotify playlist id, never changes after creation
    id: Mapped[str] = mapped_column(String(128), primary_key=True)

    skip_threshold: Mapped[Optional[int]] = mapped_column(Integer)  # seconds
    ignore_initial_skips: Mapped[bool] = mapped_column(Boolean, default=False)
    auto_cleanup_limit: Mapped[Optional[int]] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    skipped_tracks: Mapped[List["SkippedTrack"]] = relationship(
        back_populates="playlist",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    skipped_track_history: Mapped[List["SkippedTrackHistory"]] = relationship(
        back_populates="playlist",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


# ---------------------------------------------------------------------
# Skip events
# ---------------------------------------------------------------------

class SkippedTrack(Base):
    """One skip event, written by the playback tracker."""
    __tablename__ = "skipped_tracks"
    __table_args__ = (
        UniqueConstraint(
            "track_id",
            "playlist_id",
            "skipped_date",
            name="uq_skipped_track_event",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    track_id: Mapped[str] = mapped_column(String(64), index=True)
    playlist_id: Mapped[str] = mapped_column(
        ForeignKey("playlists.id", ondelete="CASCADE"),
        index=True,
    )
    skipped_date: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    playlist: Mapped["Playlist"] = relationship(back_populates="skipped_tracks")


class SkippedTrackHistory(Base):
    """Archived skip event. Rows are inserted by cleanup and never updated."""
    __tablename__ = "skipped_track_history"

    id: Mapped[int] = mapped_column(primary_key=True)
    track_id: Mapped[str] = mapped_column(String(64), index=True)
    playlist_id: Mapped[str] = mapped_column(
        ForeignKey("playlists.id", ondelete="CASCADE"),
        index=True,
    )
    skipped_date: Mapped[datetime] = mapped_column(DateTime)
    archived_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    playlist: Mapped["Playlist"] = relationship(back_populates="skipped_track_history")
