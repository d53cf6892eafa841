from typing import List
from mentorhub.core.database import mongodb

class UserRepository:
    async def find_users_by_ids(self, ids: List[str]) -> List[dict]:
        return await mongodb.db.users.find(
            {"id": {"$in": ids}},
            {"_id": 0, "id": 1, "name": 1, "title": 1, "image": 1, "email": 1}
        ).to_list(len(ids) or 1)
