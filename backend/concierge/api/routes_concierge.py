"""
Vin AI Concierge -- chat endpoint.

The client owns the conversation: every call sends the recent messages
plus the memory snapshot from the previous response, and gets back the
reply, a page of recommendations and the next snapshot.
"""

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
import logging

from pydantic import BaseModel, Field

from concierge.db.database import get_db
from concierge.db.repositories import ListingCatalog, UserProfileRepository
from concierge.services.concierge import ConciergeEngine
from concierge.services.taxonomy import CATEGORY_TAXONOMY
from concierge.core.rate_limiting import limiter, CONCIERGE_LIMIT, CATALOG_META_LIMIT
from concierge.core.monitoring import track_performance

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/concierge", tags=["Concierge"])

RECOMMENDATIONS_MODE = "recommendations"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class ChatTurn(BaseModel):
    role: str
    content: str = Field("", max_length=4000)


class ConciergeRequest(BaseModel):
    messages: List[ChatTurn] = Field(default_factory=list)
    # Untrusted snapshot from the client; sanitized by the engine, never rejected
    memory: Optional[Any] = None
    offset: Optional[float] = 0
    limit: Optional[float] = None
    mode: Optional[str] = None


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_engine(db: Session = Depends(get_db)) -> ConciergeEngine:
    return ConciergeEngine(ListingCatalog(db), profiles=UserProfileRepository(db))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/chat")
@limiter.limit(CONCIERGE_LIMIT)
@track_performance("concierge_chat")
def concierge_chat(
    request: Request,
    body: ConciergeRequest,
    engine: ConciergeEngine = Depends(get_engine),
    x_user_id: Optional[str] = Header(None),
) -> Dict[str, Any]:
    """
    Process one concierge turn.

    `reply` is left out when mode == "recommendations" (the widget is only
    paging through results).
    """
    result = engine.respond(
        [turn.model_dump() for turn in body.messages],
        memory=body.memory,
        offset=body.offset,
        limit=body.limit,
        user_id=x_user_id,
    )
    return result.to_payload(include_reply=body.mode != RECOMMENDATIONS_MODE)


@router.get("/categories")
@limiter.limit(CATALOG_META_LIMIT)
async def list_categories(request: Request) -> Dict[str, Any]:
    """Experience taxonomy, in the order the category extractor checks it."""
    return {
        "categories": [
            {"label": entry.label, "description": entry.description}
            for entry in CATEGORY_TAXONOMY
        ]
    }
