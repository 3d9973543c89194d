"""
Playlist detail view state.

Loads the three tabs of a playlist (skipped tracks, skipped track history and
the tracks currently on Spotify) concurrently. Every tab keeps its own
loading flag and error so a failing fetch only blanks its own tab. Also holds
the delete confirmation modal.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from playlist_janitor.views.table import Column

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
Fetcher = Callable[[str], Awaitable[Sequence[Row]]]
Deleter = Callable[[str, List[Row]], Awaitable[Any]]

NO_SKIPPED_TRACKS = "No skipped tracks found."
NO_SPOTIFY_TRACKS = "No Spotify tracks found."

SKIPPED_TRACK_COLUMNS = [
    Column("Track", "track_id", sortable=True),
    Column("Skipped", "skipped_date", sortable=True),
]

SKIPPED_TRACK_HISTORY_COLUMNS = [
    Column("Track", "track_id", sortable=True),
    Column("Skipped", "skipped_date", sortable=True),
    Column("Archived", "archived_at", sortable=True),
]

SPOTIFY_TRACK_COLUMNS = [
    Column("Title", "name", sortable=True),
    Column("Artists", "artists"),
    Column("Album", "album", sortable=True),
    Column("Duration", "duration_ms", sortable=True),
]


@dataclass
class SectionState:
    loading: bool = False
    items: List[Row] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class Tab:
    label: str
    test_id: str
    columns: List[Column]
    section: SectionState
    empty_message: str

    @property
    def show_table(self) -> bool:
        return self.section.loading or len(self.section.items) > 0

    @property
    def is_empty(self) -> bool:
        return not self.section.loading and self.section.error is None and not self.section.items


class DeleteModal:
    """Delete confirmation: open, submit, close. One delete in flight at a time."""

    def __init__(self, action: Callable[[List[Row]], Awaitable[Any]]):
        self._action = action
        self.is_open = False
        self.saving = False
        self.error: Optional[str] = None
        self.tracks: List[Row] = []

    def open(self, tracks: Sequence[Row] = ()) -> None:
        self.tracks = list(tracks)
        self.error = None
        self.is_open = True

    def close(self) -> None:
        if self.saving:
            return
        self.is_open = False
        self.error = None
        self.tracks = []

    async def submit(self) -> bool:
        """
        Run the delete. The modal closes on success; on failure it stays open
        with the error set so the user can retry.

        Returns:
            True if the delete went through
        """
        if self.saving or not self.is_open:
            return False

        self.saving = True
        self.error = None
        try:
            await self._action(self.tracks)
        except Exception as e:
            logger.warning(f"Delete failed: {e}")
            self.error = str(e)
            return False
        finally:
            self.saving = False

        self.is_open = False
        self.tracks = []
        return True


class PlaylistTabsLogic:
    def __init__(
        self,
        playlist_id: str,
        fetch_skipped_tracks: Fetcher,
        fetch_skipped_track_history: Fetcher,
        fetch_spotify_tracks: Fetcher,
        delete: Deleter,
    ):
        self.playlist_id = playlist_id
        self._fetch_skipped_tracks = fetch_skipped_tracks
        self._fetch_skipped_track_history = fetch_skipped_track_history
        self._fetch_spotify_tracks = fetch_spotify_tracks

        self.skipped_tracks = SectionState()
        self.skipped_track_history = SectionState()
        self.spotify_tracks = SectionState()

        self.delete_modal = DeleteModal(lambda tracks: delete(playlist_id, tracks))

    async def _load_section(self, name: str, section: SectionState, fetch: Fetcher) -> None:
        section.loading = True
        section.error = None
        try:
            section.items = list(await fetch(self.playlist_id))
        except Exception as e:
            logger.warning(f"Loading {name} for '{self.playlist_id}' failed: {e}")
            section.items = []
            section.error = str(e)
        finally:
            section.loading = False

    async def load(self) -> None:
        """Fetch all three tabs at once."""
        await asyncio.gather(
            self._load_section("skipped tracks", self.skipped_tracks, self._fetch_skipped_tracks),
            self._load_section("skipped track history", self.skipped_track_history, self._fetch_skipped_track_history),
            self._load_section("spotify tracks", self.spotify_tracks, self._fetch_spotify_tracks),
        )

    def tabs(self) -> List[Tab]:
        return [
            Tab("Skipped Tracks", "skipped-tracks-tab", SKIPPED_TRACK_COLUMNS,
                self.skipped_tracks, NO_SKIPPED_TRACKS),
            Tab("Skipped Track History", "skipped-track-history-tab", SKIPPED_TRACK_HISTORY_COLUMNS,
                self.skipped_track_history, NO_SKIPPED_TRACKS),
            Tab("Tracks", "tracks-tab", SPOTIFY_TRACK_COLUMNS,
                self.spotify_tracks, NO_SPOTIFY_TRACKS),
        ]

    # ------------------------------------------------------------
    # Delete modal
    # ------------------------------------------------------------

    @property
    def delete_open(self) -> bool:
        return self.delete_modal.is_open

    @property
    def deleting(self) -> bool:
        return self.delete_modal.saving

    @property
    def delete_error(self) -> Optional[str]:
        return self.delete_modal.error

    def open_delete(self, tracks: Sequence[Row] = ()) -> None:
        self.delete_modal.open(tracks)

    def close_delete(self) -> None:
        self.delete_modal.close()

    async def submit_delete(self) -> bool:
        return await self.delete_modal.submit()
