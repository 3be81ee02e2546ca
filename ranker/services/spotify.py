"""
Spotify catalog lookup — album search and album-with-tracks fetch.

Uses spotipy with the client-credentials flow. spotipy is blocking, so the
calls run in a worker thread to keep the event loop free.
"""

import asyncio
import logging
from typing import Any, Dict, List

import spotipy
from spotipy.oauth2 import SpotifyClientCredentials

from ranker.config import settings
from ranker.errors import UpstreamError

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10


class SpotifyCatalog:
    """Thin async wrapper over the parts of the Spotify Web API we use."""

    def __init__(self, client_id: str = "", client_secret: str = ""):
        self.client_id = client_id or settings.SPOTIFY_CLIENT_ID
        self.client_secret = client_secret or settings.SPOTIFY_CLIENT_SECRET
        self._client = None

    def _sp(self) -> spotipy.Spotify:
        if self._client is None:
            auth_manager = SpotifyClientCredentials(
                client_id=self.client_id, client_secret=self.client_secret
            )
            self._client = spotipy.Spotify(auth_manager=auth_manager)
        return self._client

    def _search_sync(self, query: str) -> List[Dict[str, Any]]:
        resp = self._sp().search(q=query, type="album", limit=SEARCH_LIMIT)
        return (resp.get("albums") or {}).get("items") or []

    def _album_sync(self, spotify_id: str) -> Dict[str, Any]:
        album = self._sp().album(spotify_id)
        tracks = album.get("tracks") or {}
        items = list(tracks.get("items") or [])

        # Albums with more than 50 tracks are paginated.
        while tracks.get("next"):
            tracks = self._sp().next(tracks)
            items.extend(tracks.get("items") or [])

        album["tracks"] = {"items": items}
        return album

    async def search(self, query: str) -> List[Dict[str, Any]]:
        try:
            return await asyncio.to_thread(self._search_sync, query)
        except Exception as e:
            logger.exception(f"Spotify search failed for {query!r}")
            raise UpstreamError("Failed to search albums") from e

    async def fetch_album(self, spotify_id: str) -> Dict[str, Any]:
        try:
            return await asyncio.to_thread(self._album_sync, spotify_id)
        except Exception as e:
            logger.exception(f"Spotify album fetch failed for {spotify_id}")
            raise UpstreamError("Failed to fetch album") from e


def album_fields(album: Dict[str, Any]) -> Dict[str, Any]:
    """Map a Spotify album payload onto ``Album`` columns plus track rows."""
    artists = album.get("artists") or [{}]
    images = album.get("images") or [{}]
    return {
        "spotify_id": album["id"],
        "name": album["name"],
        "artist": artists[0].get("name", "Unknown artist"),
        "image_url": images[0].get("url") or "",
        "release_date": album.get("release_date"),
        "tracks": [
            {
                "name": t["name"],
                "duration": t.get("duration_ms", 0),
                "number": t.get("track_number", i + 1),
            }
            for i, t in enumerate((album.get("tracks") or {}).get("items") or [])
        ],
    }


_catalog = SpotifyCatalog()


def get_catalog() -> SpotifyCatalog:
    """FastAPI dependency, overridden in tests."""
    return _catalog
