from fastapi import Depends
from mentorhub.core.email_service.email_service import EmailService
from mentorhub.modules.auth.dependencies import get_email_service
from mentorhub.modules.sessions.repository import SessionRepository
from mentorhub.modules.sessions.service import SessionService
from mentorhub.modules.users.repository import UserRepository

def get_session_service(
    session_repo: SessionRepository = Depends(),
    user_repo: UserRepository = Depends(),
    email_service: EmailService = Depends(get_email_service),
) -> SessionService:
    return SessionService(session_repo, user_repo, email_service)
