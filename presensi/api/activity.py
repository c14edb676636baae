import logging
from fastapi import APIRouter, Depends, HTTPException, status, Query

from presensi.api.deps import get_store, to_http_exception
from presensi.config import settings
from presensi.exceptions import PresensiError
from presensi.schemas.activity import ActivityFeedResponse
from presensi.services.activity_aggregator import aggregate_activity
from presensi.services.record_store import RecordStore
from presensi.utils.auth import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/activity", tags=["activity"])


@router.get("/", response_model=ActivityFeedResponse, summary="Combined activity feed")
async def get_activity_feed(
    limit: int = Query(
        settings.DASHBOARD_ACTIVITY_LIMIT,
        ge=1,
        le=settings.MAX_ACTIVITY_LIMIT,
        description=(
            f"Number of entries ({settings.DASHBOARD_ACTIVITY_LIMIT} on the dashboard, "
            f"{settings.HISTORY_ACTIVITY_LIMIT} on the history page)"
        )
    ),
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store)
):
    """
    Attendance and SLIK activity merged into one feed, newest first.
    """
    try:
        activities = await aggregate_activity(store, user_id, limit)
        return ActivityFeedResponse(activities=activities, limit=limit)
    except PresensiError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception(f"Failed to load activity feed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load activity"
        )
