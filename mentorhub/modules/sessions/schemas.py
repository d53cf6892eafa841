from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class ReserveRequest(BaseModel):
    slot_info: str

class AvailabilityResult(BaseModel):
    available: bool
    reason: Optional[str] = None
    reserved_for_current_user: bool = False
    reservation_expires: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    session_id: Optional[str] = None

class ReservationResult(BaseModel):
    success: bool
    reason: Optional[str] = None
    session_id: Optional[str] = None
    reservation_expires: Optional[datetime] = None
    expires_at: Optional[datetime] = None

class CleanupResult(BaseModel):
    success: bool
    deleted_count: int = 0
    total_processed: int = 0
    error: Optional[str] = None

class SessionView(BaseModel):
    id: str
    mentee_id: str
    mentor_id: str
    other_user_id: str
    other_user_name: Optional[str] = None
    other_user_title: Optional[str] = None
    other_user_image: Optional[str] = None
    date: str
    start_time: str
    end_time: str
    duration: int
    status: str
    session_type: str = "video"
    is_joinable: bool = False
    rating: Optional[int] = None
    rated: bool = False

class SessionListResponse(BaseModel):
    upcoming: List[SessionView] = []
    previous: List[SessionView] = []
    error: Optional[str] = None
