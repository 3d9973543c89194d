import os
from typing import List, Dict, Iterable

import spotipy
from spotipy.oauth2 import SpotifyOAuth


# Spotify accepts at most 100 items per playlist modification call
REMOVE_BATCH_SIZE = 100


def _auth_manager() -> SpotifyOAuth:
    client_id = os.getenv("SPOTIFY_CLIENT_ID")
    client_secret = os.getenv("SPOTIFY_CLIENT_SECRET")
    redirect_uri = os.getenv("SPOTIFY_REDIRECT_URI", "http://127.0.0.1:8888/callback")
    cache_path = os.getenv("SPOTIFY_CACHE_PATH", ".secrets/spotify_cache")

    if not client_id or not client_secret:
        raise RuntimeError(
            "Spotify credentials not set (SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET)"
        )

    scope = "playlist-read-private playlist-modify-public playlist-modify-private"

    return SpotifyOAuth(
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=redirect_uri,
        scope=scope,
        open_browser=False,
        cache_path=cache_path,
    )


def get_auth_url() -> str:
    return _auth_manager().get_authorize_url()


def handle_callback(code: str) -> None:
    _auth_manager().get_access_token(code, as_dict=False)


class SpotifyClient:
    def __init__(self, sp: spotipy.Spotify = None) -> None:
        self.sp = sp or spotipy.Spotify(auth_manager=_auth_manager())

    def get_playlist_tracks(self, playlist_id: str) -> List[Dict]:
        results: List[Dict] = []
        offset = 0
        limit = 100

        while True:
            page = self.sp.playlist_items(
                playlist_id,
                offset=offset,
                limit=limit,
                additional_types=["track"],
            )

            for item in page.get("items", []):
                track = item.get("track")
                if not track or not track.get("id"):
                    continue

                results.append(
                    {
                        "id": track["id"],
                        "name": track["name"],
                        "artists": [a["name"] for a in track.get("artists") or []],
                        "album": (track.get("album") or {}).get("name"),
                        "duration_ms": track.get("duration_ms"),
                        "uri": track.get("uri"),
                    }
                )

            if page.get("next"):
                offset += limit
            else:
                break

        return results

    def remove_tracks(self, playlist_id: str, track_ids: Iterable[str]) -> int:
        """Remove every occurrence of the given tracks. Returns how many ids were sent."""
        track_ids = list(track_ids)
        for start in range(0, len(track_ids), REMOVE_BATCH_SIZE):
            batch = track_ids[start:start + REMOVE_BATCH_SIZE]
            self.sp.playlist_remove_all_occurrences_of_items(playlist_id, batch)
        return len(track_ids)
