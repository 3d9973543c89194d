#!/usr/bin/env python3
"""
Spotify authentication script.
Run this once to authenticate with Spotify and cache the token
(SPOTIFY_CACHE_PATH, default .secrets/spotify_cache).
"""

import sys

from dotenv import load_dotenv

from playlist_janitor.spotify_client import get_auth_url, handle_callback


def extract_code(callback_url: str) -> str:
    if "code=" not in callback_url:
        raise ValueError("The URL must contain 'code='")
    return callback_url.split("code=", 1)[1].split("&")[0]


def authenticate():
    """Authenticate with Spotify."""
    load_dotenv()

    print("\nSpotify authentication")
    print("=" * 60)

    print("\nStep 1: Open this URL in your browser:\n")
    print(f"   {get_auth_url()}\n")
    print("Step 2: Log in with Spotify and grant access\n")
    print("Step 3: Paste the full URL you are redirected to, e.g.")
    print("   http://127.0.0.1:8888/callback?code=AQA...\n")

    callback_url = input("Callback URL: ").strip()

    try:
        code = extract_code(callback_url)
    except ValueError as e:
        print(f"\nInvalid URL: {e}")
        sys.exit(1)

    handle_callback(code)
    print("\nAuthenticated with Spotify, token cached.")


if __name__ == "__main__":
    try:
        authenticate()
    except KeyboardInterrupt:
        print("\nCancelled")
        sys.exit(1)
