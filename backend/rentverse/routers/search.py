import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from rentverse.database import get_db
from rentverse.schemas.search import SearchResponse
from rentverse.services import search_service
from rentverse.services.llm_client import get_llm_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=SearchResponse)
async def search(
    q: str | None = Query(None),
    db: Session = Depends(get_db),
    llm=Depends(get_llm_client),
):
    try:
        return await search_service.search(db, q, client=llm)
    except Exception:
        # Model failures are absorbed below; this is the database going away
        logger.exception("Search failed for %r", q)
        raise HTTPException(status_code=500, detail="Search failed")
