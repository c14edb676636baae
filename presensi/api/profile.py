import logging
from fastapi import APIRouter, Depends, HTTPException, status

from presensi.api.deps import get_store, to_http_exception
from presensi.exceptions import PresensiError
from presensi.schemas.profile import ProfileResponse, ProfileUpdate
from presensi.services.record_store import RecordStore
from presensi.utils.auth import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/me", response_model=ProfileResponse, summary="My profile")
async def get_my_profile(
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store)
):
    """Created empty on first access."""
    try:
        return await store.get_or_create_profile(user_id)
    except PresensiError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception(f"Failed to load profile: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load profile"
        )


@router.put("/me", response_model=ProfileResponse, summary="Update my profile")
async def update_my_profile(
    profile_data: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store)
):
    try:
        return await store.update_profile(user_id, profile_data)
    except PresensiError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception(f"Failed to update profile: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile"
        )
