"""
SLIK intake routes: storing KTP data extracted on the device and listing
the user's submissions.
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status, Query

from presensi.api.deps import get_store, to_http_exception
from presensi.exceptions import PresensiError
from presensi.schemas.sliks import KtpData, SliksCreate, SliksResponse
from presensi.services.record_store import RecordStore
from presensi.utils.auth import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sliks", tags=["sliks"])


@router.get("/", response_model=List[SliksResponse], summary="SLIK submissions")
async def get_sliks_history(
    limit: int = Query(10, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store)
):
    try:
        return await store.list_document_records(user_id, limit)
    except PresensiError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception(f"Failed to load SLIK history: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load SLIK history"
        )


@router.post(
    "/",
    response_model=SliksResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save verified KTP data"
)
async def create_sliks_record(
    ktp_data: KtpData,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store)
):
    """
    Save KTP data confirmed by the user.

    `tempat_tgl_lahir` is split into place and date of birth.
    """
    try:
        record = await store.insert_document_record(SliksCreate.from_ktp(user_id, ktp_data))
        logger.info(f"User {user_id} saved SLIK record {record.id}")
        return record
    except PresensiError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception(f"Failed to save SLIK record: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save data, please try again"
        )
