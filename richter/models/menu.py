# richter/models/menu.py
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from richter.database import id_query

UPDATABLE_FIELDS = ("name", "category", "price", "recipe", "image")


class MenuRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db["menu"]

    async def list_all(self) -> List[dict]:
        return await self.collection.find({}).to_list(length=None)

    async def get(self, item_id: str) -> Optional[dict]:
        return await self.collection.find_one(id_query(item_id))

    async def create(self, item: dict) -> str:
        result = await self.collection.insert_one(dict(item))
        return str(result.inserted_id)

    async def update(self, item_id: str, changes: dict):
        fields = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS and v is not None}
        if not fields:
            return None
        return await self.collection.update_one(id_query(item_id), {"$set": fields})

    async def delete(self, item_id: str):
        return await self.collection.delete_one(id_query(item_id))

    async def count(self) -> int:
        return await self.collection.count_documents({})
