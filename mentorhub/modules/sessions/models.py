from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime, timezone
from enum import Enum
import uuid


class SessionStatus(str, Enum):
    reserved = "reserved"
    confirmed = "confirmed"

class Session(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    mentee_id: str
    mentor_id: str
    date: str  # YYYY-MM-DD
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    status: SessionStatus = SessionStatus.reserved
    reservation_expires: Optional[datetime] = None  # Only while reserved
    session_type: str = "video"
    rating: Optional[int] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    confirmed_at: Optional[datetime] = None

    def to_document(self) -> dict:
        data = self.model_dump(exclude_none=True)
        data["status"] = self.status.value
        return data
