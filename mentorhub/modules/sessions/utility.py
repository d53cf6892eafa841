"""Slot descriptors and the time-range rules used by reservations.

Dates are ``YYYY-MM-DD`` and times ``HH:MM`` strings. Both are fixed width and
zero padded, so comparing them as strings orders them chronologically; the
MongoDB filters below depend on that.
"""

import re
from datetime import datetime, timezone, timedelta
from typing import Optional
from pydantic import BaseModel
from mentorhub.modules.sessions.models import SessionStatus

SLOT_SEPARATOR = "_"

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_TIME_RE = re.compile(r"\d{2}:\d{2}")


class SlotDescriptor(BaseModel):
    mentor_id: str
    date: str
    start_time: str
    end_time: str

    def to_slot_info(self) -> str:
        return SLOT_SEPARATOR.join([self.mentor_id, self.date, self.start_time, self.end_time])

    def start_at(self) -> datetime:
        return to_datetime(self.date, self.start_time)

    def end_at(self) -> datetime:
        return to_datetime(self.date, self.end_time)


def to_datetime(date: str, time: str) -> datetime:
    """Combine a session date and time into an aware UTC datetime."""
    return datetime.strptime(f"{date} {time}", "%Y-%m-%d %H:%M").replace(tzinfo=timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _valid_date(value: str) -> bool:
    if not _DATE_RE.fullmatch(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def _valid_time(value: str) -> bool:
    if not _TIME_RE.fullmatch(value):
        return False
    try:
        datetime.strptime(value, "%H:%M")
    except ValueError:
        return False
    return True


def parse_slot_info(slot_info: Optional[str]) -> Optional[SlotDescriptor]:
    """Parse ``mentorId_date_startTime_endTime``; None when malformed.

    Only the first four segments are read.
    """
    if not slot_info:
        return None
    parts = slot_info.split(SLOT_SEPARATOR)
    if len(parts) < 4:
        return None
    mentor_id, date, start_time, end_time = (p.strip() for p in parts[:4])
    if not mentor_id or not date or not start_time or not end_time:
        return None
    if not _valid_date(date) or not _valid_time(start_time) or not _valid_time(end_time):
        return None
    if start_time >= end_time:
        return None
    return SlotDescriptor(mentor_id=mentor_id, date=date, start_time=start_time, end_time=end_time)


def ranges_overlap(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    """Half-open ranges; touching ends do not overlap."""
    return a_start < b_end and b_start < a_end


def duration_minutes(start_time: str, end_time: str) -> int:
    delta = datetime.strptime(end_time, "%H:%M") - datetime.strptime(start_time, "%H:%M")
    return int(delta.total_seconds() // 60)


def is_live_reservation(session: dict, now: datetime) -> bool:
    if session.get("status") != SessionStatus.reserved.value:
        return False
    expires = ensure_utc(session.get("reservation_expires"))
    return expires is not None and expires > now


def session_blocks_slot(session: dict, slot: SlotDescriptor, now: datetime) -> bool:
    """True when ``session`` holds or owns time that ``slot`` needs."""
    if session.get("mentor_id") != slot.mentor_id or session.get("date") != slot.date:
        return False
    if not ranges_overlap(session["start_time"], session["end_time"], slot.start_time, slot.end_time):
        return False
    return session.get("status") == SessionStatus.confirmed.value or is_live_reservation(session, now)


def blocking_sessions_filter(slot: SlotDescriptor, now: datetime, exclude_id: Optional[str] = None) -> dict:
    """MongoDB filter equivalent of :func:`session_blocks_slot`."""
    query = {
        "mentor_id": slot.mentor_id,
        "date": slot.date,
        "start_time": {"$lt": slot.end_time},
        "end_time": {"$gt": slot.start_time},
        "$or": [
            {"status": SessionStatus.confirmed.value},
            {
                "status": SessionStatus.reserved.value,
                "reservation_expires": {"$gt": now},
            },
        ],
    }
    if exclude_id is not None:
        query["id"] = {"$ne": exclude_id}
    return query


def expired_reservations_filter(now: datetime) -> dict:
    return {
        "status": SessionStatus.reserved.value,
        "reservation_expires": {"$lt": now},
    }


def confirmable_reservation_filter(session_id: str, mentee_id: str, now: datetime) -> dict:
    return {
        "id": session_id,
        "mentee_id": mentee_id,
        "status": SessionStatus.reserved.value,
        "reservation_expires": {"$gt": now},
    }


def is_joinable(session: dict, now: datetime, window_minutes: int) -> bool:
    if session.get("status") != SessionStatus.confirmed.value:
        return False
    start = to_datetime(session["date"], session["start_time"])
    end = to_datetime(session["date"], session["end_time"])
    return start - timedelta(minutes=window_minutes) <= now < end


def is_exact_hold(session: dict, mentee_id: str, slot: SlotDescriptor) -> bool:
    """True when ``session`` is ``mentee_id``'s hold on exactly ``slot``."""
    return (
        session.get("status") == SessionStatus.reserved.value
        and str(session.get("mentee_id")) == mentee_id
        and session.get("start_time") == slot.start_time
        and session.get("end_time") == slot.end_time
    )


def claim_order_key(session: dict) -> tuple:
    """Oldest first; the id settles holds created in the same instant."""
    return ensure_utc(session.get("created_at")), str(session.get("id"))
