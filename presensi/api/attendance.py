"""
Attendance API routes: history, today's session, clock-in/out, leave
requests and amendments.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query

from presensi.api.deps import get_attendance_service, to_http_exception
from presensi.config import settings
from presensi.exceptions import PresensiError
from presensi.schemas.attendance import (
    AttendanceAmendRequest, AttendanceResponse, ClockInRequest, LeaveRequest,
    TodayAttendanceResponse
)
from presensi.services.attendance_service import AttendanceService
from presensi.utils.auth import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.get("/", response_model=List[AttendanceResponse], summary="Attendance history")
async def get_attendance_history(
    limit: int = Query(settings.ATTENDANCE_HISTORY_LIMIT, ge=1, le=1000, description="Number of records"),
    user_id: str = Depends(get_current_user_id),
    service: AttendanceService = Depends(get_attendance_service)
):
    """
    The current user's attendance records, newest business day first.
    """
    try:
        return await service.get_history(user_id, limit)
    except PresensiError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception(f"Failed to load attendance history: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load attendance history"
        )


@router.get("/today", response_model=TodayAttendanceResponse, summary="Today's attendance session")
async def get_today_attendance(
    user_id: str = Depends(get_current_user_id),
    service: AttendanceService = Depends(get_attendance_service)
):
    """
    Today's latest record, its status and which actions are allowed.
    """
    try:
        return await service.get_today(user_id)
    except PresensiError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception(f"Failed to load today's attendance: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load today's attendance"
        )


@router.post(
    "/clock-in",
    response_model=AttendanceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Clock in"
)
async def clock_in(
    clock_in_data: Optional[ClockInRequest] = None,
    user_id: str = Depends(get_current_user_id),
    service: AttendanceService = Depends(get_attendance_service)
):
    """
    Open today's attendance session.

    - Rejected with 409 while a session is open
    - Status is Hadir or Terlambat depending on the local time
    - Location is optional and only recorded, never required
    """
    try:
        location = clock_in_data.location if clock_in_data else None
        return await service.clock_in(user_id, location)
    except PresensiError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception(f"Clock-in failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Clock-in failed, please try again"
        )


@router.post("/clock-out", response_model=AttendanceResponse, summary="Clock out")
async def clock_out(
    user_id: str = Depends(get_current_user_id),
    service: AttendanceService = Depends(get_attendance_service)
):
    """
    Close today's open attendance session.
    """
    try:
        return await service.clock_out(user_id)
    except PresensiError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception(f"Clock-out failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Clock-out failed, please try again"
        )


@router.post(
    "/leave",
    response_model=AttendanceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a permission, sick or leave request"
)
async def submit_leave(
    leave_data: LeaveRequest,
    user_id: str = Depends(get_current_user_id),
    service: AttendanceService = Depends(get_attendance_service)
):
    """
    Record a leave request as a closed attendance record.

    - `permission` needs `permission_kind` (half_day / full_day)
    - `sick` and `leave` need a start or end date
    """
    try:
        return await service.submit_leave(user_id, leave_data)
    except PresensiError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception(f"Leave submission failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Leave submission failed, please try again"
        )


@router.patch("/{record_id}", response_model=AttendanceResponse, summary="Amend notes or status")
async def amend_attendance_record(
    record_id: str,
    amendment: AttendanceAmendRequest,
    user_id: str = Depends(get_current_user_id),
    service: AttendanceService = Depends(get_attendance_service)
):
    """
    Update notes and/or status of one of the current user's records.
    """
    try:
        return await service.amend_record(user_id, record_id, amendment)
    except PresensiError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception(f"Failed to amend record {record_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update attendance record"
        )
