from datetime import datetime, timezone
from typing import List, Optional
from mentorhub.core.database import mongodb
from mentorhub.modules.sessions.models import Session, SessionStatus
from mentorhub.modules.sessions.utility import (
    SlotDescriptor,
    blocking_sessions_filter,
    confirmable_reservation_filter,
    expired_reservations_filter,
)

class SessionRepository:
    async def insert_session(self, session: Session):
        return await mongodb.db.sessions.insert_one(session.to_document())

    async def find_session_by_id(self, session_id: str) -> Optional[dict]:
        return await mongodb.db.sessions.find_one({"id": session_id}, {"_id": 0})

    async def find_blocking_sessions(
        self, slot: SlotDescriptor, now: datetime, exclude_id: Optional[str] = None
    ) -> List[dict]:
        return await mongodb.db.sessions.find(
            blocking_sessions_filter(slot, now, exclude_id), {"_id": 0}
        ).to_list(None)

    async def confirm_reservation(self, session_id: str, mentee_id: str, now: datetime) -> bool:
        result = await mongodb.db.sessions.update_one(
            confirmable_reservation_filter(session_id, mentee_id, now),
            {
                "$set": {"status": SessionStatus.confirmed.value, "confirmed_at": now},
                "$unset": {"reservation_expires": ""},
            }
        )
        return result.modified_count == 1

    async def delete_session_by_id(self, session_id: str) -> int:
        result = await mongodb.db.sessions.delete_one({"id": session_id})
        return result.deleted_count

    async def delete_reservation(self, session_id: str, mentee_id: str) -> int:
        result = await mongodb.db.sessions.delete_one({
            "id": session_id,
            "mentee_id": mentee_id,
            "status": SessionStatus.reserved.value,
        })
        return result.deleted_count

    async def find_expired_reservations(self, now: Optional[datetime] = None) -> List[dict]:
        now = now or datetime.now(timezone.utc)
        return await mongodb.db.sessions.find(
            expired_reservations_filter(now), {"_id": 0, "id": 1}
        ).to_list(None)

    async def delete_sessions(self, session_ids: List[str]) -> int:
        result = await mongodb.db.sessions.delete_many({"id": {"$in": session_ids}})
        return result.deleted_count or 0

    async def find_confirmed_sessions(self, field: str, user_id: str) -> List[dict]:
        return await mongodb.db.sessions.find(
            {field: user_id, "status": SessionStatus.confirmed.value},
            {"_id": 0}
        ).sort([("date", 1), ("start_time", 1)]).to_list(None)
