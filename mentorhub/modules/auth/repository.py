from datetime import datetime, timezone
from mentorhub.core.database import mongodb
from mentorhub.modules.users.models import User


class AuthRepository:
    async def user_exists(self, email: str) -> bool:
        return await mongodb.db.users.find_one({"email": email}) is not None

    async def create_user(self, user: User) -> dict:
        data = user.model_dump(mode="python")
        data["role"] = user.role.value
        await mongodb.db.users.insert_one(data)
        data.pop("_id", None)
        return data

    async def find_user(self, email: str) -> dict:
        return await mongodb.db.users.find_one({"email": email}, {"_id": 0})

    async def find_user_by_id(self, id: str) -> dict:
        return await mongodb.db.users.find_one({"id": id}, {"_id": 0, "hashed_password": 0})

    async def find_user_by_verification_token(self, token: str) -> dict:
        return await mongodb.db.users.find_one({"verification_token": token}, {"_id": 0})

    async def set_verification_token(self, id: str, token: str, expires_at: datetime):
        return await mongodb.db.users.update_one(
            {"id": id},
            {"$set": {
                "verification_token": token,
                "verification_expires": expires_at,
                "updated_at": datetime.now(timezone.utc),
            }}
        )

    async def mark_email_verified(self, id: str):
        return await mongodb.db.users.update_one(
            {"id": id},
            {
                "$set": {"email_verified": True, "updated_at": datetime.now(timezone.utc)},
                "$unset": {"verification_token": "", "verification_expires": ""},
            }
        )
