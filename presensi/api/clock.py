import logging
from typing import Optional
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from presensi.config import settings
from presensi.services.ticker import Ticker
from presensi.utils.datetime_utils import format_long_date, format_time, to_user_timezone
from presensi.utils.validators import validate_timezone

logger = logging.getLogger(__name__)

router = APIRouter(tags=["clock"])


def clock_payload(now, timezone_str: str) -> dict:
    local = to_user_timezone(now, timezone_str)
    return {
        "time": format_time(now, timezone_str, with_seconds=True),
        "date": format_long_date(local),
        "timestamp": now.isoformat(),
    }


@router.websocket("/ws/clock")
async def clock_feed(websocket: WebSocket, tz: Optional[str] = None):
    """
    Live clock for the attendance screen, one message per tick.

    The ticker lives exactly as long as the connection.
    """
    await websocket.accept()
    timezone_str = tz if tz and validate_timezone(tz) else settings.TIMEZONE

    async def push(now):
        await websocket.send_json(clock_payload(now, timezone_str))

    async with Ticker() as ticker:
        ticker.start(push)
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            logger.debug("Clock client disconnected")
