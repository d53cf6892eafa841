import logging
from datetime import datetime, timezone, timedelta
from typing import Callable, Dict, List, Optional
from mentorhub.core.config import RESERVATION_HOLD_MINUTES, JOIN_WINDOW_MINUTES
from mentorhub.core.email_service.email_service import EmailService
from mentorhub.modules.sessions.models import Session, SessionStatus
from mentorhub.modules.sessions.repository import SessionRepository
from mentorhub.modules.sessions.schemas import (
    AvailabilityResult,
    ReservationResult,
    CleanupResult,
    SessionView,
    SessionListResponse,
)
from mentorhub.modules.sessions.utility import (
    SlotDescriptor,
    claim_order_key,
    is_exact_hold,
    parse_slot_info,
    ensure_utc,
    duration_minutes,
    is_joinable,
    to_datetime,
)
from mentorhub.modules.users.models import UserRole
from mentorhub.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

INVALID_SLOT = "Invalid slot information"
SLOT_BOOKED = "This time slot is already booked"
SLOT_RESERVED = "This time slot is temporarily reserved"
AVAILABILITY_ERROR = "Error checking availability"
RESERVATION_ERROR = "Error reserving time slot"
RESERVATION_NOT_FOUND = "Reservation not found"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionService:
    """Slot availability, reservation holds and session listing.

    Every public operation reports its outcome as a result object. Storage
    errors are logged and turned into an unsuccessful result instead of
    propagating to the caller.
    """

    def __init__(self,
                 session_repo: SessionRepository,
                 user_repo: UserRepository,
                 email_service: EmailService,
                 hold_minutes: int = RESERVATION_HOLD_MINUTES,
                 join_window_minutes: int = JOIN_WINDOW_MINUTES,
                 clock: Callable[[], datetime] = utc_now,
                 ):
        self.session_repo = session_repo
        self.user_repo = user_repo
        self.email_service = email_service
        self.hold_minutes = hold_minutes
        self.join_window_minutes = join_window_minutes
        self.clock = clock

    def _evaluate(self, existing: List[Dict], user_id: Optional[str]) -> AvailabilityResult:
        if not existing:
            return AvailabilityResult(available=True)

        confirmed = [s for s in existing if s.get("status") == SessionStatus.confirmed.value]
        if confirmed:
            return AvailabilityResult(available=False, reason=SLOT_BOOKED)

        # The query already dropped expired holds
        reserved = [s for s in existing if s.get("status") == SessionStatus.reserved.value]
        if reserved:
            foreign = [s for s in reserved if not user_id or str(s.get("mentee_id")) != user_id]
            if foreign:
                return AvailabilityResult(
                    available=False,
                    reason=SLOT_RESERVED,
                    expires_at=max(ensure_utc(s["reservation_expires"]) for s in foreign),
                )

            own = reserved[0]
            return AvailabilityResult(
                available=True,
                reserved_for_current_user=True,
                reservation_expires=ensure_utc(own.get("reservation_expires")),
                session_id=own.get("id"),
            )

        return AvailabilityResult(available=True)

    async def is_session_available(self, slot_info: str, user_id: Optional[str] = None) -> AvailabilityResult:
        try:
            slot = parse_slot_info(slot_info)
            if slot is None:
                return AvailabilityResult(available=False, reason=INVALID_SLOT)

            existing = await self.session_repo.find_blocking_sessions(slot, self.clock())
            return self._evaluate(existing, user_id)
        except Exception as e:
            logger.error("Error checking session availability for %r: %s", slot_info, e)
            return AvailabilityResult(available=False, reason=AVAILABILITY_ERROR)

    async def reserve_slot(self, slot_info: str, mentee_id: str) -> ReservationResult:
        try:
            slot = parse_slot_info(slot_info)
            if slot is None:
                return ReservationResult(success=False, reason=INVALID_SLOT)

            if slot.mentor_id == mentee_id:
                return ReservationResult(success=False, reason="You cannot book a session with yourself")

            now = self.clock()
            if slot.start_at() <= now:
                return ReservationResult(success=False, reason="This time slot has already passed")

            existing = await self.session_repo.find_blocking_sessions(slot, now)
            availability = self._evaluate(existing, mentee_id)
            if not availability.available:
                return ReservationResult(
                    success=False,
                    reason=availability.reason,
                    expires_at=availability.expires_at,
                )

            if availability.reserved_for_current_user:
                held = self._own_hold(existing, mentee_id, slot)
                if held is None:
                    return ReservationResult(
                        success=False,
                        reason="You already hold an overlapping reservation with this mentor",
                        session_id=availability.session_id,
                        expires_at=availability.reservation_expires,
                    )
                return ReservationResult(
                    success=True,
                    session_id=held["id"],
                    reservation_expires=ensure_utc(held.get("reservation_expires")),
                )

            return await self._claim(slot, mentee_id, now)
        except Exception as e:
            logger.error("Error reserving slot %r for mentee %s: %s", slot_info, mentee_id, e)
            return ReservationResult(success=False, reason=RESERVATION_ERROR)

    def _own_hold(self, existing: List[Dict], mentee_id: str, slot: SlotDescriptor) -> Optional[Dict]:
        return next((s for s in existing if is_exact_hold(s, mentee_id, slot)), None)

    async def _claim(self, slot: SlotDescriptor, mentee_id: str, now: datetime) -> ReservationResult:
        session = Session(
            mentee_id=mentee_id,
            mentor_id=slot.mentor_id,
            date=slot.date,
            start_time=slot.start_time,
            end_time=slot.end_time,
            status=SessionStatus.reserved,
            reservation_expires=now + timedelta(minutes=self.hold_minutes),
            created_at=now,
        )
        await self.session_repo.insert_session(session)

        # Concurrent claims can all pass the check above. Whoever sees a rival after
        # inserting backs out, so two overlapping holds never both survive. Repeats
        # of one mentee's request are not rivals; they collapse into one hold.
        competitors = await self.session_repo.find_blocking_sessions(slot, now, exclude_id=session.id)
        if competitors and all(is_exact_hold(s, mentee_id, slot) for s in competitors):
            return await self._settle_duplicate(session, competitors)

        if competitors:
            await self.session_repo.delete_session_by_id(session.id)
            logger.info(
                "Reservation %s for %s withdrawn after a competing claim",
                session.id, slot.to_slot_info(),
            )
            rival = self._evaluate(competitors, None)
            return ReservationResult(success=False, reason=rival.reason, expires_at=rival.expires_at)

        logger.info(
            "Reserved %s for mentee %s until %s",
            slot.to_slot_info(), mentee_id, session.reservation_expires.isoformat(),
        )
        return ReservationResult(
            success=True,
            session_id=session.id,
            reservation_expires=session.reservation_expires,
        )

    async def _settle_duplicate(self, session: Session, twins: List[Dict]) -> ReservationResult:
        """Collapse one mentee's simultaneous requests for the same slot into a single hold.

        Every request sees the same set of twins and keeps the oldest one, so
        exactly one hold survives and all requests report it.
        """
        keeper = min([session.to_document()] + twins, key=claim_order_key)
        if keeper["id"] != session.id:
            await self.session_repo.delete_session_by_id(session.id)
            if await self.session_repo.find_session_by_id(keeper["id"]) is None:
                return ReservationResult(success=False, reason=SLOT_RESERVED)
            logger.info("Duplicate reservation %s folded into %s", session.id, keeper["id"])

        return ReservationResult(
            success=True,
            session_id=keeper["id"],
            reservation_expires=ensure_utc(keeper.get("reservation_expires")),
        )

    async def confirm_session(self, session_id: str, mentee_id: str, mentee_email: Optional[str] = None) -> ReservationResult:
        try:
            now = self.clock()
            confirmed = await self.session_repo.confirm_reservation(session_id, mentee_id, now)
            session = await self.session_repo.find_session_by_id(session_id)

            if not confirmed:
                if not session or str(session.get("mentee_id")) != mentee_id:
                    return ReservationResult(success=False, reason=RESERVATION_NOT_FOUND)
                if session.get("status") == SessionStatus.confirmed.value:
                    return ReservationResult(success=False, reason="Session is already confirmed", session_id=session_id)
                return ReservationResult(success=False, reason="Reservation has expired", session_id=session_id)

            logger.info("Session %s confirmed for mentee %s", session_id, mentee_id)
            if mentee_email and session:
                await self._send_confirmation(mentee_email, session)

            return ReservationResult(success=True, session_id=session_id)
        except Exception as e:
            logger.error("Error confirming session %s: %s", session_id, e)
            return ReservationResult(success=False, reason="Error confirming session")

    async def _send_confirmation(self, mentee_email: str, session: Dict):
        try:
            mentors = await self.user_repo.find_users_by_ids([session["mentor_id"]])
            mentor_name = mentors[0].get("name", "your mentor") if mentors else "your mentor"
            self.email_service.send_booking_confirmation(mentee_email, {
                "session_id": session["id"],
                "mentor_name": mentor_name,
                "session_date": session["date"],
                "session_time": session["start_time"],
                "duration": duration_minutes(session["start_time"], session["end_time"]),
            })
        except Exception as e:
            logger.error("Confirmation email for session %s failed: %s", session.get("id"), e)

    async def release_reservation(self, session_id: str, mentee_id: str) -> ReservationResult:
        try:
            deleted = await self.session_repo.delete_reservation(session_id, mentee_id)
            if not deleted:
                return ReservationResult(success=False, reason=RESERVATION_NOT_FOUND)
            logger.info("Reservation %s released by mentee %s", session_id, mentee_id)
            return ReservationResult(success=True, session_id=session_id)
        except Exception as e:
            logger.error("Error releasing reservation %s: %s", session_id, e)
            return ReservationResult(success=False, reason="Error releasing reservation")

    async def cleanup_expired_reservations(self) -> CleanupResult:
        try:
            expired = await self.session_repo.find_expired_reservations(self.clock())
            logger.info("Found %d expired reservations to clean up", len(expired))

            if not expired:
                return CleanupResult(success=True)

            deleted = await self.session_repo.delete_sessions([s["id"] for s in expired])
            return CleanupResult(success=True, deleted_count=deleted, total_processed=len(expired))
        except Exception as e:
            logger.error("Error cleaning up expired reservations: %s", e)
            return CleanupResult(success=False, error=str(e))

    async def list_user_sessions(self, current_user: Dict, now: Optional[datetime] = None) -> SessionListResponse:
        try:
            return await self._build_session_list(current_user, now or self.clock())
        except Exception as e:
            logger.error("Error listing sessions for user %s: %s", current_user.get("id"), e)
            return SessionListResponse(error="Error loading sessions")

    async def _build_session_list(self, current_user: Dict, now: datetime) -> SessionListResponse:
        is_mentor = current_user.get("role") == UserRole.mentor.value
        own_field, other_field = ("mentor_id", "mentee_id") if is_mentor else ("mentee_id", "mentor_id")

        sessions = await self.session_repo.find_confirmed_sessions(own_field, current_user["id"])
        other_ids = sorted({s[other_field] for s in sessions})
        others = {}
        if other_ids:
            others = {u["id"]: u for u in await self.user_repo.find_users_by_ids(other_ids)}

        upcoming, previous = [], []
        for session in sessions:
            other = others.get(session[other_field], {})
            view = SessionView(
                id=session["id"],
                mentee_id=session["mentee_id"],
                mentor_id=session["mentor_id"],
                other_user_id=session[other_field],
                other_user_name=other.get("name"),
                other_user_title=other.get("title"),
                other_user_image=other.get("image"),
                date=session["date"],
                start_time=session["start_time"],
                end_time=session["end_time"],
                duration=duration_minutes(session["start_time"], session["end_time"]),
                status=session["status"],
                session_type=session.get("session_type", "video"),
                is_joinable=is_joinable(session, now, self.join_window_minutes),
                rating=session.get("rating"),
                rated=session.get("rating") is not None,
            )
            if to_datetime(session["date"], session["end_time"]) > now:
                upcoming.append(view)
            else:
                previous.append(view)

        upcoming.sort(key=lambda v: (v.date, v.start_time))
        previous.sort(key=lambda v: (v.date, v.start_time), reverse=True)
        return SessionListResponse(upcoming=upcoming, previous=previous)
