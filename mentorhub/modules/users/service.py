from typing import Dict, Optional
from mentorhub.modules.users.models import UserRole
from mentorhub.modules.users.schemas import NavItem, NavigationResponse


PUBLIC_NAV_ITEMS = [
    ("Home", "/"),
    ("About", "/about"),
    ("Team", "/team"),
    ("Mentors", "/mentors"),
    ("Blog", "/blog"),
    ("FAQ", "/faq"),
    ("Contact", "/contact"),
]

ANONYMOUS_ACCOUNT_ITEMS = [
    ("Sign In", "/auth/signin"),
    ("Sign Up", "/auth/signup"),
]


def dashboard_path(role: str) -> str:
    return "/dashboard/mentor" if role == UserRole.mentor.value else "/dashboard/mentee"


class UserService:
    def get_navigation(self, current_user: Optional[Dict] = None, path: str = "/") -> NavigationResponse:
        items = [NavItem(name=name, path=p, active=p == path) for name, p in PUBLIC_NAV_ITEMS]

        if not current_user:
            return NavigationResponse(
                items=items,
                account_items=[
                    NavItem(name=name, path=p, active=p == path)
                    for name, p in ANONYMOUS_ACCOUNT_ITEMS
                ],
            )

        role = current_user.get("role")
        account = [("Dashboard", dashboard_path(role))]
        if role == UserRole.mentor.value:
            account.append(("Profile", "/profile/mentor"))

        return NavigationResponse(
            authenticated=True,
            items=items,
            account_items=[NavItem(name=name, path=p, active=p == path) for name, p in account],
            user_name=current_user.get("name"),
            user_email=current_user.get("email"),
            user_image=current_user.get("image"),
        )
