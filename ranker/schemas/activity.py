"""Activity feed schemas."""

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel

from ranker.services.activity import ActivityKind


class ActivityOut(BaseModel):
    id: str
    type: ActivityKind
    created_at: datetime
    content: Dict[str, Any]


class ActivityPage(BaseModel):
    activities: List[ActivityOut]
    page: int
    limit: int
    has_more: bool
