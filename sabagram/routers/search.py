"""Combined profile and caption search."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_session
from ..schemas import SearchResponse
from ..services import search

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=SearchResponse)
async def search_endpoint(q: str = Query("", max_length=100), db: Session = Depends(get_session)) -> SearchResponse:
    return SearchResponse.model_validate(search(db, query=q, limit=get_settings().search_result_limit))


__all__ = ["router"]
