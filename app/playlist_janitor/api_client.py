import os
from typing import Any, Dict, List, Optional

import requests

from playlist_janitor.errors import ApiError
from playlist_janitor.schemas.playlists import PlaylistCreate, PlaylistOut, PlaylistUpdate
from playlist_janitor.schemas.tracks import (
    CleanupResult,
    SkippedTrackHistoryOut,
    SkippedTrackOut,
    SpotifyTrackOut,
)

DEFAULT_API_URL = "http://127.0.0.1:8000"


def default_api_url() -> str:
    return os.getenv("PLAYLIST_JANITOR_API_URL", DEFAULT_API_URL)


class PlaylistJanitorClient:
    """Talks to the Playlist Janitor API."""

    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None, timeout: float = 15):
        self.base_url = (base_url or default_api_url()).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> Any:
        resp = self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        if resp.status_code >= 400:
            raise ApiError(resp.status_code, _error_message(resp))
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    def get_playlists(self) -> List[PlaylistOut]:
        return [PlaylistOut.model_validate(p) for p in self._request("GET", "/playlists")]

    def get_playlist(self, playlist_id: str) -> PlaylistOut:
        return PlaylistOut.model_validate(self._request("GET", f"/playlists/{playlist_id}"))

    def create_playlist(self, request: PlaylistCreate) -> PlaylistOut:
        body = request.model_dump(by_alias=True)
        return PlaylistOut.model_validate(self._request("POST", "/playlists", json=body))

    def update_playlist(self, playlist_id: str, request: PlaylistUpdate) -> PlaylistOut:
        body = request.model_dump(by_alias=True, exclude_unset=True)
        return PlaylistOut.model_validate(self._request("PATCH", f"/playlists/{playlist_id}", json=body))

    def delete_playlist(self, playlist_id: str) -> None:
        self._request("DELETE", f"/playlists/{playlist_id}")

    def get_skipped_tracks(self, playlist_id: str) -> List[SkippedTrackOut]:
        data = self._request("GET", f"/playlists/{playlist_id}/skipped-tracks")
        return [SkippedTrackOut.model_validate(t) for t in data]

    def get_skipped_track_history(self, playlist_id: str) -> List[SkippedTrackHistoryOut]:
        data = self._request("GET", f"/playlists/{playlist_id}/skipped-track-history")
        return [SkippedTrackHistoryOut.model_validate(t) for t in data]

    def get_spotify_tracks(self, playlist_id: str) -> List[SpotifyTrackOut]:
        data = self._request("GET", f"/playlists/{playlist_id}/tracks")
        return [SpotifyTrackOut.model_validate(t) for t in data]

    def cleanup(self, playlist_id: str, sync_spotify: bool = False) -> CleanupResult:
        params = {"sync_spotify": "true" if sync_spotify else "false"}
        return CleanupResult.model_validate(self._request("POST", f"/playlists/{playlist_id}/cleanup", params=params))


def _error_message(resp: requests.Response) -> str:
    try:
        body: Dict[str, Any] = resp.json()
    except ValueError:
        return resp.text or resp.reason or "Request failed"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("detail") or body)
    return str(body)
