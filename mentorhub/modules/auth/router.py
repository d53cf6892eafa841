from fastapi import APIRouter, Depends
from typing import Dict
from mentorhub.modules.auth.schemas import (
    TokenResponse,
    RegisterResponse,
    MessageResponse,
    VerifyEmailRequest,
    ResendVerificationRequest,
)
from mentorhub.modules.users.schemas import UserLogin, UserRegister, UserResponse
from mentorhub.modules.auth.service import AuthService
from mentorhub.modules.auth.dependencies import get_auth_service
from mentorhub.modules.auth.utility import get_current_user

auth_router = APIRouter(prefix="/auth", tags=["Auth"])

@auth_router.post("/register", response_model=RegisterResponse)
async def register(
    data: UserRegister,
    service: AuthService = Depends(get_auth_service)
    ):
    return await service.register(data)

@auth_router.post("/login", response_model=TokenResponse)
async def login(
    data: UserLogin,
    service: AuthService = Depends(get_auth_service)
    ):
    return await service.login(data)

@auth_router.post("/verify-email", response_model=MessageResponse)
async def verify_email(
    data: VerifyEmailRequest,
    service: AuthService = Depends(get_auth_service)
    ):
    return await service.verify_email(data.token)

@auth_router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(
    data: ResendVerificationRequest,
    service: AuthService = Depends(get_auth_service)
    ):
    return await service.resend_verification(data.email)

@auth_router.get("/me", response_model=UserResponse)
async def get_me(
     current_user: Dict = Depends(get_current_user),
     service: AuthService = Depends(get_auth_service)
    ):
     return await service.get_me(current_user)
