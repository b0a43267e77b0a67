# richter/models/cart.py
from typing import List

from motor.motor_asyncio import AsyncIOMotorDatabase

from richter.database import object_id


class CartRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db["carts"]

    async def list_for(self, email: str) -> List[dict]:
        return await self.collection.find({"email": email}).to_list(length=None)

    async def add(self, item: dict) -> str:
        result = await self.collection.insert_one(dict(item))
        return str(result.inserted_id)

    async def delete(self, cart_id: str):
        return await self.collection.delete_one({"_id": object_id(cart_id)})

    async def delete_many(self, cart_ids: List[str]) -> int:
        ids = [object_id(i) for i in cart_ids]
        result = await self.collection.delete_many({"_id": {"$in": ids}})
        return result.deleted_count

    async def count_for(self, email: str) -> int:
        return await self.collection.count_documents({"email": email})
