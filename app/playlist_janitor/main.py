from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import List

from dotenv import load_dotenv
from fastapi import FastAPI, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from playlist_janitor.db.models import Playlist
from playlist_janitor.db.session import SessionLocal, init_db
from playlist_janitor.errors import (
    PlaylistAlreadyExistsError,
    PlaylistJanitorError,
    PlaylistNotFoundError,
)
from playlist_janitor.logging_config import setup_logging_from_env
from playlist_janitor.schemas.playlists import (
    MessageOut,
    PlaylistCreate,
    PlaylistOut,
    PlaylistUpdate,
)
from playlist_janitor.schemas.tracks import (
    CleanupResult,
    SkippedTrackHistoryOut,
    SkippedTrackOut,
    SpotifyTrackOut,
)
from playlist_janitor.services.cleanup_service import cleanup_playlist
from playlist_janitor.services.database_service import DatabaseService, SqlDatabaseService
from playlist_janitor.spotify_client import SpotifyClient

logger = logging.getLogger(__name__)

NOT_FOUND = {404: {"model": MessageOut}}


@asynccontextmanager
async def lifespan(app: FastAPI):
    load_dotenv()
    setup_logging_from_env()
    init_db()

    cron = os.getenv("CLEANUP_SCHEDULE")
    if cron:
        from playlist_janitor.services.scheduler_service import start_scheduler, shutdown_scheduler
        start_scheduler(cron)
        yield
        shutdown_scheduler()
    else:
        yield


app = FastAPI(title="Playlist Janitor API", lifespan=lifespan)


@app.exception_handler(PlaylistJanitorError)
async def playlist_janitor_error_handler(request: Request, exc: PlaylistJanitorError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_database_service(db: Session = Depends(get_db)) -> DatabaseService:
    return SqlDatabaseService(db)


def get_spotify_client() -> SpotifyClient:
    try:
        return SpotifyClient()
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))


def get_playlist_or_404(db_service: DatabaseService, playlist_id: str) -> Playlist:
    pl = db_service.get_playlist(playlist_id)
    if pl is None:
        raise PlaylistNotFoundError(playlist_id)
    return pl


@app.get("/health")
def health():
    return {"ok": True}


@app.get("/spotify/login")
def spotify_login():
    from playlist_janitor.spotify_client import get_auth_url
    return RedirectResponse(get_auth_url())


@app.get("/spotify/callback")
def spotify_callback(code: str):
    from playlist_janitor.spotify_client import handle_callback
    handle_callback(code)
    return {"ok": True}


# ============================================================
# Playlists
# ============================================================

@app.get("/playlists", response_model=List[PlaylistOut])
def get_monitored_playlists(db_service: DatabaseService = Depends(get_database_service)):
    return db_service.get_playlists()


@app.get("/playlists/{playlist_id}", response_model=PlaylistOut, responses=NOT_FOUND)
def get_monitored_playlist(playlist_id: str, db_service: DatabaseService = Depends(get_database_service)):
    return get_playlist_or_404(db_service, playlist_id)


@app.post(
    "/playlists",
    response_model=PlaylistOut,
    status_code=201,
    responses={400: {"model": MessageOut}},
)
def create_monitored_playlist(payload: PlaylistCreate, db_service: DatabaseService = Depends(get_database_service)):
    if db_service.get_playlist(payload.id) is not None:
        raise PlaylistAlreadyExistsError(payload.id)

    try:
        return db_service.add_playlist(payload)
    except IntegrityError:
        # Another request created the same id between the check and the insert
        logger.warning(f"Concurrent create for playlist '{payload.id}'")
        raise PlaylistAlreadyExistsError(payload.id)


@app.patch("/playlists/{playlist_id}", response_model=PlaylistOut, responses=NOT_FOUND)
def update_monitored_playlist(
    playlist_id: str,
    patch: PlaylistUpdate,
    db_service: DatabaseService = Depends(get_database_service),
):
    get_playlist_or_404(db_service, playlist_id)

    pl = db_service.update_playlist(playlist_id, patch)
    if pl is None:
        raise PlaylistNotFoundError(playlist_id)
    return pl


@app.delete("/playlists/{playlist_id}", status_code=204, responses=NOT_FOUND)
def delete_monitored_playlist(playlist_id: str, db_service: DatabaseService = Depends(get_database_service)):
    get_playlist_or_404(db_service, playlist_id)
    db_service.delete_playlist(playlist_id)
    return Response(status_code=204)


# ============================================================
# Tracks
# ============================================================

@app.get(
    "/playlists/{playlist_id}/skipped-tracks",
    response_model=List[SkippedTrackOut],
    responses=NOT_FOUND,
)
def get_monitored_playlist_skipped_tracks(
    playlist_id: str,
    db_service: DatabaseService = Depends(get_database_service),
):
    get_playlist_or_404(db_service, playlist_id)
    return db_service.get_playlist_skipped_tracks(playlist_id)


@app.get(
    "/playlists/{playlist_id}/skipped-track-history",
    response_model=List[SkippedTrackHistoryOut],
    responses=NOT_FOUND,
)
def get_monitored_playlist_skipped_track_history(
    playlist_id: str,
    db_service: DatabaseService = Depends(get_database_service),
):
    get_playlist_or_404(db_service, playlist_id)
    return db_service.get_playlist_skipped_track_history(playlist_id)


@app.get(
    "/playlists/{playlist_id}/tracks",
    response_model=List[SpotifyTrackOut],
    responses=NOT_FOUND,
)
def get_monitored_playlist_spotify_tracks(
    playlist_id: str,
    db_service: DatabaseService = Depends(get_database_service),
    sp: SpotifyClient = Depends(get_spotify_client),
):
    """Tracks currently in the Spotify playlist."""
    get_playlist_or_404(db_service, playlist_id)
    return sp.get_playlist_tracks(playlist_id)


@app.post("/playlists/{playlist_id}/cleanup", response_model=CleanupResult, responses=NOT_FOUND)
def cleanup_monitored_playlist(
    playlist_id: str,
    sync_spotify: bool = False,
    db_service: DatabaseService = Depends(get_database_service),
):
    """
    Archive tracks that reached the playlist's auto-cleanup limit.

    With sync_spotify the tracks are also removed from the Spotify playlist.
    """
    get_playlist_or_404(db_service, playlist_id)
    sp = get_spotify_client() if sync_spotify else None
    return cleanup_playlist(db_service, playlist_id, sp)
