"""
Combined activity feed over attendance and SLIK intake records.
"""

import asyncio
import logging
from typing import List

from presensi.exceptions import NotAuthenticatedError, StoreError, StoreReadError
from presensi.schemas.activity import AttendanceActivity, CombinedActivity, SlikActivity
from presensi.schemas.attendance import AttendanceResponse
from presensi.schemas.sliks import SliksResponse
from presensi.utils.validators import validate_activity_limit

logger = logging.getLogger(__name__)

SLIK_FEED_EXCLUDED_FIELDS = {
    "user_id", "berlaku_hingga", "kel_desa", "kecamatan", "pekerjaan", "status_perkawinan",
}


def tag_attendance(record: AttendanceResponse) -> AttendanceActivity:
    return AttendanceActivity(
        title=f"Absensi: {record.status.value}",
        **record.model_dump(exclude={"user_id"}),
    )


def tag_document(record: SliksResponse) -> SlikActivity:
    return SlikActivity(
        title=f"SLIK: {record.nama_lengkap or '-'}",
        **record.model_dump(exclude=SLIK_FEED_EXCLUDED_FIELDS),
    )


def merge_activities(
    attendance: List[AttendanceResponse],
    documents: List[SliksResponse],
    limit: int
) -> List[CombinedActivity]:
    """Tag both sources, sort newest first and keep the top `limit`."""
    combined = [tag_attendance(r) for r in attendance] + [tag_document(r) for r in documents]
    # Stable: on equal created_at attendance stays ahead of documents
    combined.sort(key=lambda activity: activity.created_at, reverse=True)
    return combined[:limit]


async def aggregate_activity(store, user_id: str, limit: int) -> List[CombinedActivity]:
    """
    Return the `limit` most recent activities across both sources.

    Each source is asked for its own `limit` newest records, concurrently, so
    the merged top `limit` is exact. If either query fails the whole call
    fails; there is no partial feed.

    Args:
        store: RecordStore to read from
        user_id: authenticated user
        limit: number of entries to return

    Raises:
        NotAuthenticatedError: without a user
        ValueError: if limit is out of range
        StoreReadError: if either source query fails
    """
    if not user_id:
        raise NotAuthenticatedError()

    if not validate_activity_limit(limit):
        raise ValueError(f"Invalid activity limit: {limit}")

    try:
        attendance, documents = await asyncio.gather(
            store.list_recent_attendance(user_id, limit),
            store.list_document_records(user_id, limit),
        )
    except StoreError:
        logger.error(f"Activity feed failed for user {user_id}")
        raise
    except Exception as e:
        logger.error(f"Activity feed failed for user {user_id}: {e}")
        raise StoreReadError() from e

    return merge_activities(attendance, documents, limit)
