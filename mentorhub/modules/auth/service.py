from fastapi import HTTPException
import logging
import uuid
from datetime import datetime, timezone, timedelta
from typing import Dict
from mentorhub.core.config import VERIFICATION_TOKEN_HOURS
from mentorhub.core.email_service.email_service import EmailService
from mentorhub.modules.auth.repository import AuthRepository
from mentorhub.modules.auth.schemas import TokenResponse, RegisterResponse, MessageResponse
from mentorhub.modules.auth.utility import hash_password, create_token, verify_password
from mentorhub.modules.users.schemas import UserResponse, UserLogin, UserRegister
from mentorhub.modules.users.models import User, UserRole

logger = logging.getLogger(__name__)


def _user_response(user: Dict) -> UserResponse:
    return UserResponse(
        id=user["id"],
        role=UserRole(user["role"]),
        name=user["name"],
        email=user["email"],
        title=user.get("title"),
        image=user.get("image"),
        email_verified=user.get("email_verified", False),
    )


class AuthService:
    def __init__(self,
                 auth_repo: AuthRepository,
                 email_service: EmailService
                 ):
        self.auth_repo = auth_repo
        self.email_service = email_service

    def _new_verification_token(self):
        token = uuid.uuid4().hex
        expires_at = datetime.now(timezone.utc) + timedelta(hours=VERIFICATION_TOKEN_HOURS)
        return token, expires_at

    async def register(self, data: UserRegister) -> RegisterResponse:
        if data.role == UserRole.admin:
            raise HTTPException(status_code=400, detail="Admin accounts cannot be self-registered")

        existing = await self.auth_repo.user_exists(data.email)
        if existing:
            raise HTTPException(status_code=400, detail="Email already registered")

        token, expires_at = self._new_verification_token()
        user = User(
            name=data.name,
            email=data.email,
            role=data.role,
            hashed_password=hash_password(data.password),
            verification_token=token,
            verification_expires=expires_at,
        )

        inserted_user = await self.auth_repo.create_user(user)
        logger.info("Registered %s user %s", user.role.value, user.id)

        self.email_service.send_verification_email(user.email, user.name, token)

        return RegisterResponse(
            message="Registration successful. Please verify your email before signing in.",
            user=_user_response(inserted_user),
        )

    async def login(self, data: UserLogin) -> TokenResponse:
        user = await self.auth_repo.find_user(data.email)
        if not user or not verify_password(data.password, user["hashed_password"]):
            raise HTTPException(status_code=401, detail="Invalid credentials")

        if not user.get("email_verified", False):
            raise HTTPException(status_code=403, detail="Please verify your email before signing in")

        token = create_token(user["id"], user["role"])
        return TokenResponse(access_token=token, user=_user_response(user))

    async def verify_email(self, token: str) -> MessageResponse:
        user = await self.auth_repo.find_user_by_verification_token(token)
        if not user:
            raise HTTPException(status_code=400, detail="Invalid verification link")

        expires_at = user.get("verification_expires")
        if isinstance(expires_at, str):
            expires_at = datetime.fromisoformat(expires_at)
        # Ensure timezone awareness
        if expires_at is not None and expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        if expires_at is not None and datetime.now(timezone.utc) > expires_at:
            raise HTTPException(status_code=400, detail="Verification link has expired")

        await self.auth_repo.mark_email_verified(user["id"])
        logger.info("Email verified for user %s", user["id"])
        return MessageResponse(message="Email verified successfully. You can now sign in.")

    async def resend_verification(self, email: str) -> MessageResponse:
        user = await self.auth_repo.find_user(email)
        if not user:
            raise HTTPException(status_code=404, detail="No account found with this email")

        if user.get("email_verified", False):
            raise HTTPException(status_code=400, detail="Email is already verified")

        token, expires_at = self._new_verification_token()
        await self.auth_repo.set_verification_token(user["id"], token, expires_at)
        self.email_service.send_verification_email(user["email"], user["name"], token)

        return MessageResponse(message="Verification email sent. Please check your inbox.")

    async def get_me(self, current_user: Dict) -> UserResponse:
        return _user_response(current_user)
