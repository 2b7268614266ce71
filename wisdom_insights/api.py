"""
Insights API Router

REST endpoints for the pattern report and event pattern recognition.
Identity is taken from the `X-User-Id` header set by the upstream auth layer.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Query

from wisdom_insights.config import settings
from wisdom_insights.core.patterns import build_pattern_report
from wisdom_insights.core.recognizer import recognize_patterns
from wisdom_insights.data_access.dal import DataAccessLayer
from wisdom_insights.data_access.factory import build_dal

router = APIRouter(prefix="/api/insights", tags=["Insights"])

# One DAL (and so one connection pool) per process, shared by all requests
_dal: Optional[DataAccessLayer] = None


def get_current_user(x_user_id: Optional[str] = Header(default=None)) -> str:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return x_user_id


def get_dal() -> DataAccessLayer:
    global _dal
    if _dal is None:
        _dal = build_dal()
    return _dal


def close_dal() -> None:
    global _dal
    if _dal is not None:
        _dal.close()
        _dal = None


@router.get("/patterns")
def api_patterns(
    days: int = Query(default=settings.PATTERN_DAYS, ge=1, le=settings.MAX_PATTERN_DAYS, description="Number of days to analyze"),
    user_id: str = Depends(get_current_user),
    dal: DataAccessLayer = Depends(get_dal),
):
    """
    Get daily energy/focus/fulfillment patterns with streak trends.

    Always answers 200; data errors produce the fallback report.
    """
    report = build_pattern_report(dal, user_id, days=days)
    return report.model_dump(mode="json", by_alias=True, exclude_none=True)


@router.get("/recognized")
def api_recognized(
    window_days: int = Query(default=settings.RECOGNITION_WINDOW_DAYS, ge=1, le=365, description="Number of days of events to scan"),
    user_id: str = Depends(get_current_user),
    dal: DataAccessLayer = Depends(get_dal),
):
    """Recurring themes, emotional cycles, correlations and area trends."""
    result = recognize_patterns(dal, user_id, window_days=window_days)
    return result.model_dump(mode="json", by_alias=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_dal()


app = FastAPI(title="Wisdom Insights", lifespan=lifespan)
app.include_router(router)
