"""
Skipped track cleanup.

A playlist with an auto-cleanup limit gets its most skipped tracks archived:
once a track has been skipped `auto_cleanup_limit` times, all of its skip
events move to the history table and, when a Spotify client is given, the
track is removed from the Spotify playlist.
"""

import logging
from collections import Counter
from typing import List, Optional

from playlist_janitor.errors import PlaylistNotFoundError
from playlist_janitor.schemas.tracks import CleanupResult
from playlist_janitor.services.database_service import DatabaseService
from playlist_janitor.spotify_client import SpotifyClient

logger = logging.getLogger(__name__)


def tracks_over_limit(track_ids: List[str], limit: int) -> List[str]:
    """
    Track ids that appear at least `limit` times, in first-seen order.

    Args:
        track_ids: One entry per skip event
        limit: Skip count at which a track is cleaned up

    Returns:
        List of distinct track ids
    """
    if limit is None or limit <= 0:
        return []

    counts = Counter(track_ids)
    seen = set()
    result = []
    for track_id in track_ids:
        if track_id in seen:
            continue
        seen.add(track_id)
        if counts[track_id] >= limit:
            result.append(track_id)
    return result


def cleanup_playlist(
    db_service: DatabaseService,
    playlist_id: str,
    spotify_client: Optional[SpotifyClient] = None,
) -> CleanupResult:
    pl = db_service.get_playlist(playlist_id)
    if pl is None:
        raise PlaylistNotFoundError(playlist_id)

    if pl.auto_cleanup_limit is None:
        logger.debug(f"Cleanup disabled for '{playlist_id}'")
        return CleanupResult(playlist_id=playlist_id)

    skips = db_service.get_playlist_skipped_tracks(playlist_id)
    doomed = tracks_over_limit([s.track_id for s in skips], pl.auto_cleanup_limit)
    if not doomed:
        return CleanupResult(playlist_id=playlist_id)

    removed = False
    if spotify_client is not None:
        # Remove from Spotify first; the skips stay live if this fails
        spotify_client.remove_tracks(playlist_id, doomed)
        removed = True

    archived = db_service.archive_skipped_tracks(playlist_id, doomed)
    logger.info(
        f"Cleaned up '{playlist_id}': {len(doomed)} tracks reached {pl.auto_cleanup_limit} skips, "
        f"{len(archived)} skips archived"
    )

    return CleanupResult(
        playlist_id=playlist_id,
        archived_track_ids=doomed,
        archived_count=len(archived),
        removed_from_spotify=removed,
    )


def cleanup_all(
    db_service: DatabaseService,
    spotify_client: Optional[SpotifyClient] = None,
) -> List[CleanupResult]:
    """Run cleanup for every playlist. A failing playlist is logged and skipped."""
    results = []
    for pl in db_service.get_playlists():
        if pl.auto_cleanup_limit is None:
            continue
        try:
            results.append(cleanup_playlist(db_service, pl.id, spotify_client))
        except Exception as e:
            logger.error(f"Cleanup failed for '{pl.id}': {e}", exc_info=True)
    return results
