"""Command-line interface for Playlist Janitor."""

import asyncio
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.rule import Rule
from rich.table import Table as RichTable

from playlist_janitor.api_client import PlaylistJanitorClient
from playlist_janitor.errors import ApiError
from playlist_janitor.logging_config import setup_logging
from playlist_janitor.schemas.playlists import PlaylistCreate, PlaylistUpdate
from playlist_janitor.views.playlist_tabs import DeleteModal, PlaylistTabsLogic, Tab
from playlist_janitor.views.table import Column, Table

app = typer.Typer(help="Spotify Playlist Janitor")
console = Console()

PLAYLIST_COLUMNS = [
    Column("Playlist", "id", sortable=True),
    Column("Skip threshold", "skip_threshold", sortable=True),
    Column("Ignore initial skips", "ignore_initial_skips"),
    Column("Auto cleanup limit", "auto_cleanup_limit", sortable=True),
]

ApiUrlOption = typer.Option(
    None,
    "--api-url",
    envvar="PLAYLIST_JANITOR_API_URL",
    help="Base URL of the Playlist Janitor API",
)


def get_client(api_url: Optional[str] = None) -> PlaylistJanitorClient:
    """Build the API client."""
    return PlaylistJanitorClient(api_url)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    load_dotenv()
    setup_logging("DEBUG" if verbose else "WARNING")


def toggle(label: str, checked: bool) -> str:
    """Render an on/off switch."""
    state = "[green]On[/green]" if checked else "[dim]Off[/dim]"
    return f"{label}: {state}" if label else state


def format_value(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return toggle("", value)
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def render_table(table: Table, title: Optional[str] = None) -> RichTable:
    out = RichTable(title=title)
    for label in table.header_labels():
        out.add_column(label)
    for row in table.rows():
        out.add_row(*[format_value(v) for v in row])
    return out


def apply_sort(table: Table, sort: Optional[str], desc: bool) -> None:
    if not sort:
        return
    try:
        table.sort_by(sort, descending=desc)
    except ValueError as e:
        console.print(f"[yellow]{e}[/yellow]")


def _fail(e: ApiError):
    console.print(f"[red]Error: {e.message}[/red]")
    raise typer.Exit(1)


def _fetcher(fetch: Callable[[str], Sequence[Any]]):
    async def run(playlist_id: str):
        items = await asyncio.to_thread(fetch, playlist_id)
        return [item.model_dump() for item in items]
    return run


@app.command(name="playlists")
def list_playlists(
    sort: Optional[str] = typer.Option(None, "--sort", "-s", help="Column to sort on"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
    api_url: Optional[str] = ApiUrlOption,
):
    """List monitored playlists."""
    client = get_client(api_url)
    try:
        playlists = client.get_playlists()
    except ApiError as e:
        _fail(e)

    if not playlists:
        console.print("[yellow]No playlists are being monitored[/yellow]")
        return

    table = Table(PLAYLIST_COLUMNS, [p.model_dump() for p in playlists])
    apply_sort(table, sort, desc)
    console.print(render_table(table, title="Monitored Playlists"))


def render_tab(tab: Tab, sort: Optional[str], desc: bool) -> None:
    console.print(Rule(tab.label))
    if tab.section.error:
        console.print(f"[red]{tab.section.error}[/red]")
        return
    if tab.is_empty:
        console.print(tab.empty_message)
        return

    table = Table(tab.columns, tab.section.items)
    if sort and any(c.accessor == sort for c in tab.columns):
        apply_sort(table, sort, desc)
    console.print(render_table(table))


@app.command()
def show(
    playlist_id: str = typer.Argument(..., help="Spotify playlist ID"),
    sort: Optional[str] = typer.Option(None, "--sort", "-s", help="Column to sort on"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
    api_url: Optional[str] = ApiUrlOption,
):
    """Show a playlist with its skipped tracks, history and Spotify tracks."""
    client = get_client(api_url)
    try:
        playlist = client.get_playlist(playlist_id)
    except ApiError as e:
        _fail(e)

    console.print(f"[bold]{playlist.id}[/bold]")
    console.print(f"Skip threshold: {format_value(playlist.skip_threshold)}")
    console.print(toggle("Ignore initial skips", playlist.ignore_initial_skips))
    console.print(f"Auto cleanup limit: {format_value(playlist.auto_cleanup_limit)}")

    async def delete(pid: str, tracks: List[Any]):
        await asyncio.to_thread(client.delete_playlist, pid)

    logic = PlaylistTabsLogic(
        playlist_id,
        fetch_skipped_tracks=_fetcher(client.get_skipped_tracks),
        fetch_skipped_track_history=_fetcher(client.get_skipped_track_history),
        fetch_spotify_tracks=_fetcher(client.get_spotify_tracks),
        delete=delete,
    )
    asyncio.run(logic.load())

    for tab in logic.tabs():
        render_tab(tab, sort, desc)


@app.command()
def add(
    playlist_id: str = typer.Argument(..., help="Spotify playlist ID"),
    skip_threshold: Optional[int] = typer.Option(None, "--skip-threshold", min=0, help="Seconds below which a play is a skip"),
    ignore_initial_skips: bool = typer.Option(
        False,
        "--ignore-initial-skips/--no-ignore-initial-skips",
        help="Ignore skips right after playback starts",
    ),
    auto_cleanup_limit: Optional[int] = typer.Option(None, "--auto-cleanup-limit", min=1, help="Skips before a track is cleaned up"),
    api_url: Optional[str] = ApiUrlOption,
):
    """Start monitoring a playlist."""
    client = get_client(api_url)
    request = PlaylistCreate(
        id=playlist_id,
        skip_threshold=skip_threshold,
        ignore_initial_skips=ignore_initial_skips,
        auto_cleanup_limit=auto_cleanup_limit,
    )
    try:
        playlist = client.create_playlist(request)
    except ApiError as e:
        _fail(e)

    console.print(f"[green]Now monitoring playlist: {playlist.id}[/green]")
    console.print(toggle("Ignore initial skips", playlist.ignore_initial_skips))


@app.command()
def update(
    playlist_id: str = typer.Argument(..., help="Spotify playlist ID"),
    skip_threshold: Optional[int] = typer.Option(None, "--skip-threshold", min=0),
    ignore_initial_skips: Optional[bool] = typer.Option(
        None,
        "--ignore-initial-skips/--no-ignore-initial-skips",
    ),
    auto_cleanup_limit: Optional[int] = typer.Option(None, "--auto-cleanup-limit", min=1),
    api_url: Optional[str] = ApiUrlOption,
):
    """Change a playlist's settings. Options left out keep their value."""
    fields = {
        "skip_threshold": skip_threshold,
        "ignore_initial_skips": ignore_initial_skips,
        "auto_cleanup_limit": auto_cleanup_limit,
    }
    request = PlaylistUpdate(**{k: v for k, v in fields.items() if v is not None})
    if not request.model_fields_set:
        console.print("[yellow]Nothing to update[/yellow]")
        raise typer.Exit(1)

    client = get_client(api_url)
    try:
        playlist = client.update_playlist(playlist_id, request)
    except ApiError as e:
        _fail(e)

    console.print(f"[green]Updated playlist: {playlist.id}[/green]")


@app.command(name="remove")
def remove_playlist(
    playlist_id: str = typer.Argument(..., help="Spotify playlist ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    api_url: Optional[str] = ApiUrlOption,
):
    """Stop monitoring a playlist and drop its skip data."""
    client = get_client(api_url)

    async def delete(tracks):
        await asyncio.to_thread(client.delete_playlist, playlist_id)

    modal = DeleteModal(delete)
    modal.open()

    if not yes and not typer.confirm(f"Remove playlist {playlist_id} from monitoring?", default=False):
        modal.close()
        console.print("[yellow]Cancelled[/yellow]")
        return

    if not asyncio.run(modal.submit()):
        console.print(f"[red]Error: {modal.error}[/red]")
        raise typer.Exit(1)

    console.print("[green]Playlist removed[/green]")


@app.command()
def cleanup(
    playlist_id: str = typer.Argument(..., help="Spotify playlist ID"),
    sync_spotify: bool = typer.Option(False, "--sync-spotify", help="Also remove the tracks from Spotify"),
    api_url: Optional[str] = ApiUrlOption,
):
    """Archive tracks that reached the auto-cleanup limit."""
    client = get_client(api_url)
    try:
        result = client.cleanup(playlist_id, sync_spotify=sync_spotify)
    except ApiError as e:
        _fail(e)

    if not result.archived_track_ids:
        console.print("Nothing to clean up.")
        return

    console.print(f"[green]Archived {result.archived_count} skips of {len(result.archived_track_ids)} tracks[/green]")
    for track_id in result.archived_track_ids:
        console.print(f"  {track_id}")


if __name__ == "__main__":
    app()
