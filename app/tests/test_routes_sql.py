"""End to end: HTTP routes on top of SqlDatabaseService and SQLite."""

from datetime import timedelta

from playlist_janitor.db.models import SkippedTrack


def test_create_get_list_delete(sql_client):
    r = sql_client.post("/playlists", json={"id": "abc", "skipThreshold": 15})
    assert r.status_code == 201
    assert r.json()["id"] == "abc"
    assert r.json()["skipThreshold"] == 15
    assert r.json()["ignoreInitialSkips"] is False

    r = sql_client.get("/playlists/abc")
    assert r.status_code == 200
    assert r.json()["skipThreshold"] == 15

    assert [p["id"] for p in sql_client.get("/playlists").json()] == ["abc"]

    assert sql_client.delete("/playlists/abc").status_code == 204
    assert sql_client.get("/playlists/abc").status_code == 404
    assert sql_client.get("/playlists").json() == []


def test_create_twice_is_bad_request(sql_client):
    assert sql_client.post("/playlists", json={"id": "abc"}).status_code == 201

    r = sql_client.post("/playlists", json={"id": "abc", "skipThreshold": 99})

    assert r.status_code == 400
    assert r.json() == {"message": "Playlist with id: abc already exists"}
    # the stored playlist is untouched
    assert sql_client.get("/playlists/abc").json()["skipThreshold"] is None


def test_snake_case_body_accepted(sql_client):
    r = sql_client.post("/playlists", json={"id": "abc", "auto_cleanup_limit": 2})

    assert r.status_code == 201
    assert r.json()["autoCleanupLimit"] == 2


def test_patch_changes_only_sent_fields(sql_client):
    sql_client.post("/playlists", json={"id": "abc", "skipThreshold": 15, "autoCleanupLimit": 3})

    r = sql_client.patch("/playlists/abc", json={"ignoreInitialSkips": True})

    assert r.status_code == 200
    body = r.json()
    assert body["ignoreInitialSkips"] is True
    assert body["skipThreshold"] == 15
    assert body["autoCleanupLimit"] == 3


def test_patch_null_ignore_initial_skips_is_rejected(sql_client):
    assert sql_client.post("/playlists", json={"id": "abc", "ignoreInitialSkips": True}).status_code == 201

    r = sql_client.patch("/playlists/abc", json={"ignoreInitialSkips": None})

    assert r.status_code == 422
    assert sql_client.get("/playlists/abc").json()["ignoreInitialSkips"] is True

    # the session is still usable after the rejected patch
    r = sql_client.patch("/playlists/abc", json={"ignoreInitialSkips": False})
    assert r.status_code == 200
    assert r.json()["ignoreInitialSkips"] is False


def test_patch_null_clears_nullable_settings(sql_client):
    sql_client.post("/playlists", json={"id": "abc", "skipThreshold": 15, "autoCleanupLimit": 3})

    r = sql_client.patch("/playlists/abc", json={"autoCleanupLimit": None})

    assert r.status_code == 200
    assert r.json()["autoCleanupLimit"] is None
    assert r.json()["skipThreshold"] == 15


def test_negative_settings_are_rejected(sql_client):
    for body in (
        {"id": "abc", "autoCleanupLimit": -3},
        {"id": "abc", "autoCleanupLimit": 0},
        {"id": "abc", "skipThreshold": -1},
    ):
        assert sql_client.post("/playlists", json=body).status_code == 422

    assert sql_client.get("/playlists").json() == []

    sql_client.post("/playlists", json={"id": "abc", "skipThreshold": 0, "autoCleanupLimit": 1})
    assert sql_client.patch("/playlists/abc", json={"autoCleanupLimit": -1}).status_code == 422
    assert sql_client.get("/playlists/abc").json()["autoCleanupLimit"] == 1


def test_skipped_tracks_and_cleanup(sql_client, session_factory, when):
    sql_client.post("/playlists", json={"id": "abc", "autoCleanupLimit": 2})

    db = session_factory()
    for i, track_id in enumerate(["t1", "t2", "t1"]):
        db.add(SkippedTrack(track_id=track_id, playlist_id="abc", skipped_date=when + timedelta(hours=i)))
    db.commit()
    db.close()

    skipped = sql_client.get("/playlists/abc/skipped-tracks").json()
    assert [t["trackId"] for t in skipped] == ["t1", "t2", "t1"]

    r = sql_client.post("/playlists/abc/cleanup")
    assert r.status_code == 200
    assert r.json()["archivedTrackIds"] == ["t1"]
    assert r.json()["archivedCount"] == 2
    assert r.json()["removedFromSpotify"] is False

    assert [t["trackId"] for t in sql_client.get("/playlists/abc/skipped-tracks").json()] == ["t2"]
    history = sql_client.get("/playlists/abc/skipped-track-history").json()
    assert [h["trackId"] for h in history] == ["t1", "t1"]


def test_cleanup_unknown_playlist(sql_client):
    r = sql_client.post("/playlists/nope/cleanup")

    assert r.status_code == 404
    assert r.json() == {"message": "Could not find playlist with id: nope"}
