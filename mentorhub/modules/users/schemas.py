from pydantic import BaseModel, EmailStr
from typing import Optional, List
from mentorhub.modules.users.models import UserRole


class UserResponse(BaseModel):
    id: str
    role: UserRole
    name: str
    email: EmailStr
    title: Optional[str] = None
    image: Optional[str] = None
    email_verified: bool = False

class UserRegister(BaseModel):
    name: str
    email: EmailStr
    password: str
    role: UserRole  # No default - must be explicitly provided

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class NavItem(BaseModel):
    name: str
    path: str
    active: bool = False

class NavigationResponse(BaseModel):
    authenticated: bool = False
    items: List[NavItem]
    account_items: List[NavItem]
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    user_image: Optional[str] = None
