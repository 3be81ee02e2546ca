"""Spotify router — album search proxied for signed-in users."""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query

from ranker.models.user import User
from ranker.routers.auth import require_user
from ranker.services.spotify import SpotifyCatalog, get_catalog

router = APIRouter(prefix="/spotify", tags=["spotify"])


@router.get("/search")
async def search_albums(
    q: str = Query(..., min_length=1),
    current_user: User = Depends(require_user),
    catalog: SpotifyCatalog = Depends(get_catalog),
) -> List[Dict[str, Any]]:
    """Raw Spotify album search results (at most 10)."""
    return await catalog.search(q)
