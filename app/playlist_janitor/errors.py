"""
Errors raised by Playlist Janitor.

The HTTP layer turns PlaylistNotFoundError into a 404 and
PlaylistAlreadyExistsError into a 400, both with a {"message": ...} body.
"""


class PlaylistJanitorError(Exception):
    """Base class for errors with a user-facing message."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PlaylistNotFoundError(PlaylistJanitorError):
    status_code = 404

    def __init__(self, playlist_id: str):
        super().__init__(f"Could not find playlist with id: {playlist_id}")
        self.playlist_id = playlist_id


class PlaylistAlreadyExistsError(PlaylistJanitorError):
    status_code = 400

    def __init__(self, playlist_id: str):
        super().__init__(f"Playlist with id: {playlist_id} already exists")
        self.playlist_id = playlist_id


class ApiError(Exception):
    """Non-success response received by the API client."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
