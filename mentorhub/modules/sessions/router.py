from fastapi import APIRouter, Depends
from typing import Optional, Dict
from mentorhub.modules.auth.utility import get_current_user, get_optional_user, require_role
from mentorhub.modules.sessions.schemas import (
    ReserveRequest,
    AvailabilityResult,
    ReservationResult,
    CleanupResult,
    SessionListResponse,
)
from mentorhub.modules.sessions.service import SessionService
from mentorhub.modules.sessions.dependencies import get_session_service

session_router = APIRouter(prefix="/sessions", tags=["Sessions"])

@session_router.get("/availability/{slot_info}", response_model=AvailabilityResult)
async def check_availability(
    slot_info: str,
    current_user: Optional[Dict] = Depends(get_optional_user),
    session_service: SessionService = Depends(get_session_service)
    ):
    user_id = current_user["id"] if current_user else None
    return await session_service.is_session_available(slot_info, user_id)

@session_router.post("/reserve", response_model=ReservationResult)
async def reserve_slot(
    data: ReserveRequest,
    current_user: Dict = Depends(require_role("mentee")),
    session_service: SessionService = Depends(get_session_service)
    ):
    return await session_service.reserve_slot(data.slot_info, current_user["id"])

@session_router.post("/{session_id}/confirm", response_model=ReservationResult)
async def confirm_session(
    session_id: str,
    current_user: Dict = Depends(require_role("mentee")),
    session_service: SessionService = Depends(get_session_service)
    ):
    return await session_service.confirm_session(session_id, current_user["id"], current_user.get("email"))

@session_router.delete("/{session_id}/reservation", response_model=ReservationResult)
async def release_reservation(
    session_id: str,
    current_user: Dict = Depends(require_role("mentee")),
    session_service: SessionService = Depends(get_session_service)
    ):
    return await session_service.release_reservation(session_id, current_user["id"])

@session_router.get("/my", response_model=SessionListResponse)
async def get_my_sessions(
    current_user: Dict = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service)
    ):
    return await session_service.list_user_sessions(current_user)

@session_router.post("/cleanup-expired", response_model=CleanupResult)
async def cleanup_expired_reservations(
    current_user: Dict = Depends(require_role("admin")),
    session_service: SessionService = Depends(get_session_service)
    ):
    return await session_service.cleanup_expired_reservations()
