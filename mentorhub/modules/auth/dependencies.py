from fastapi import Depends
from mentorhub.core.email_service.email_instance import email_service
from mentorhub.core.email_service.email_service import EmailService
from mentorhub.modules.auth.repository import AuthRepository
from mentorhub.modules.auth.service import AuthService

def get_email_service() -> EmailService:
    return email_service

def get_auth_service(
    auth_repo: AuthRepository = Depends(),
    email_service: EmailService = Depends(get_email_service),
) -> AuthService:
    return AuthService(
        auth_repo=auth_repo,
        email_service=email_service,
    )
