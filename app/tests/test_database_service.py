from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from playlist_janitor.db.models import Playlist, SkippedTrack, SkippedTrackHistory
from playlist_janitor.schemas.playlists import PlaylistCreate, PlaylistUpdate


def _add_skips(db, playlist_id, track_ids, start):
    for i, track_id in enumerate(track_ids):
        db.add(SkippedTrack(track_id=track_id, playlist_id=playlist_id, skipped_date=start + timedelta(minutes=i)))
    db.commit()


def test_get_playlists_empty(db_service):
    assert db_service.get_playlists() == []


def test_add_and_get_playlist(db_service):
    created = db_service.add_playlist(
        PlaylistCreate(id="abc", skip_threshold=20, ignore_initial_skips=True, auto_cleanup_limit=4)
    )

    assert created.id == "abc"
    assert created.created_at is not None

    found = db_service.get_playlist("abc")
    assert found is not None
    assert found.skip_threshold == 20
    assert found.ignore_initial_skips is True
    assert found.auto_cleanup_limit == 4


def test_add_playlist_defaults(db_service):
    created = db_service.add_playlist(PlaylistCreate(id="abc"))

    assert created.skip_threshold is None
    assert created.ignore_initial_skips is False
    assert created.auto_cleanup_limit is None


def test_get_playlist_absent_is_none(db_service):
    assert db_service.get_playlist("missing") is None


def test_get_playlists_ordered_by_id(db_service):
    for pid in ["b", "c", "a"]:
        db_service.add_playlist(PlaylistCreate(id=pid))

    assert [p.id for p in db_service.get_playlists()] == ["a", "b", "c"]


def test_add_playlist_does_not_check_duplicates(db_service):
    db_service.add_playlist(PlaylistCreate(id="abc"))

    with pytest.raises(IntegrityError):
        db_service.add_playlist(PlaylistCreate(id="abc"))

    # session is usable again after the failed insert
    assert [p.id for p in db_service.get_playlists()] == ["abc"]


def test_update_playlist_is_partial(db_service):
    db_service.add_playlist(PlaylistCreate(id="abc", skip_threshold=20, auto_cleanup_limit=4))

    updated = db_service.update_playlist("abc", PlaylistUpdate(auto_cleanup_limit=None, ignore_initial_skips=True))

    assert updated.skip_threshold == 20
    assert updated.auto_cleanup_limit is None
    assert updated.ignore_initial_skips is True


def test_update_playlist_rejects_null_toggle():
    with pytest.raises(ValidationError):
        PlaylistUpdate(ignore_initial_skips=None)

    assert PlaylistUpdate().model_fields_set == set()


def test_update_playlist_rolls_back_failed_commit(db_service):
    db_service.add_playlist(PlaylistCreate(id="abc", skip_threshold=20))
    bad = PlaylistUpdate.model_construct(ignore_initial_skips=None, skip_threshold=99)

    with pytest.raises(IntegrityError):
        db_service.update_playlist("abc", bad)

    pl = db_service.get_playlist("abc")
    assert pl.ignore_initial_skips is False
    assert pl.skip_threshold == 20
    assert db_service.update_playlist("abc", PlaylistUpdate(skip_threshold=5)).skip_threshold == 5


def test_update_playlist_absent(db_service):
    assert db_service.update_playlist("missing", PlaylistUpdate(skip_threshold=1)) is None


def test_delete_playlist_cascades(db, db_service, when):
    db_service.add_playlist(PlaylistCreate(id="abc"))
    db_service.add_playlist(PlaylistCreate(id="keep"))
    _add_skips(db, "abc", ["t1", "t2"], when)
    _add_skips(db, "keep", ["t1"], when)
    db_service.archive_skipped_tracks("abc", ["t1"])

    db_service.delete_playlist("abc")

    assert db_service.get_playlist("abc") is None
    assert db.scalar(select(func.count()).select_from(SkippedTrack).where(SkippedTrack.playlist_id == "abc")) == 0
    assert db.scalar(
        select(func.count()).select_from(SkippedTrackHistory).where(SkippedTrackHistory.playlist_id == "abc")
    ) == 0
    assert len(db_service.get_playlist_skipped_tracks("keep")) == 1


def test_skipped_tracks_ordered_by_date(db, db_service, when):
    db_service.add_playlist(PlaylistCreate(id="abc"))
    db.add(SkippedTrack(track_id="late", playlist_id="abc", skipped_date=when + timedelta(days=1)))
    db.add(SkippedTrack(track_id="early", playlist_id="abc", skipped_date=when))
    db.commit()

    skips = db_service.get_playlist_skipped_tracks("abc")

    assert [s.track_id for s in skips] == ["early", "late"]


def test_skipped_tracks_only_for_playlist(db, db_service, when):
    db_service.add_playlist(PlaylistCreate(id="abc"))
    db_service.add_playlist(PlaylistCreate(id="other"))
    _add_skips(db, "other", ["t9"], when)

    assert db_service.get_playlist_skipped_tracks("abc") == []


def test_skip_event_is_unique(db, db_service, when):
    db_service.add_playlist(PlaylistCreate(id="abc"))
    _add_skips(db, "abc", ["t1"], when)

    db.add(SkippedTrack(track_id="t1", playlist_id="abc", skipped_date=when))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_skip_needs_existing_playlist(db, when):
    db.add(SkippedTrack(track_id="t1", playlist_id="ghost", skipped_date=when))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_archive_skipped_tracks_moves_rows(db, db_service, when):
    db_service.add_playlist(PlaylistCreate(id="abc"))
    _add_skips(db, "abc", ["t1", "t2", "t1", "t3"], when)

    archived = db_service.archive_skipped_tracks("abc", ["t1", "t3"])

    assert sorted(a.track_id for a in archived) == ["t1", "t1", "t3"]
    assert [s.track_id for s in db_service.get_playlist_skipped_tracks("abc")] == ["t2"]

    history = db_service.get_playlist_skipped_track_history("abc")
    assert [h.track_id for h in history] == ["t1", "t1", "t3"]
    assert history[0].skipped_date == when
    assert all(h.archived_at is not None for h in history)


def test_archive_nothing(db_service):
    db_service.add_playlist(PlaylistCreate(id="abc"))

    assert db_service.archive_skipped_tracks("abc", []) == []
    assert db_service.get_playlist_skipped_track_history("abc") == []


def test_playlist_primary_key_is_spotify_id(db):
    db.add(Playlist(id="abc"))
    db.commit()

    assert db.get(Playlist, "abc").ignore_initial_skips is False
