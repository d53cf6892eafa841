from fastapi import APIRouter, Depends
from typing import Optional, Dict
from mentorhub.modules.auth.utility import get_optional_user
from mentorhub.modules.users.dependencies import get_user_service
from mentorhub.modules.users.schemas import NavigationResponse
from mentorhub.modules.users.service import UserService

user_router = APIRouter(tags=["User"])

@user_router.get("/navigation", response_model=NavigationResponse)
async def get_navigation(
    path: str = "/",
    current_user: Optional[Dict] = Depends(get_optional_user),
    user_service: UserService = Depends(get_user_service),
    ):
    return user_service.get_navigation(current_user=current_user, path=path)
