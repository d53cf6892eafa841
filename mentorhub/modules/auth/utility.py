from fastapi import Depends, HTTPException
from typing import Dict, Optional
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import logging
import bcrypt
import jwt
from datetime import datetime, timezone, timedelta
from mentorhub.modules.auth.repository import AuthRepository
from mentorhub.core.config import JWT_ALGORITHM, JWT_EXPIRY_HOURS, JWT_SECRET

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))

def create_token(user_id: str, role: str) -> str:
    payload = {
        "sub": user_id,
        "role": role,
        "exp": datetime.now(timezone.utc) + timedelta(hours=JWT_EXPIRY_HOURS)
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)

async def _user_from_token(token: str, auth_repo: AuthRepository) -> Dict:
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token")

    user = await auth_repo.find_user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")

    logger.debug("Authenticated user %s with role %s", user.get("id"), user.get("role"))
    return user

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    auth_repo: AuthRepository = Depends(),
) -> Dict:
    return await _user_from_token(credentials.credentials, auth_repo)

async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    auth_repo: AuthRepository = Depends(),
) -> Optional[Dict]:
    if credentials is None:
        return None
    return await _user_from_token(credentials.credentials, auth_repo)

def require_role(*roles: str):
    async def checker(current_user: Dict = Depends(get_current_user)) -> Dict:
        if current_user.get("role") not in roles:
            raise HTTPException(status_code=403, detail="Access denied")
        return current_user
    return checker
