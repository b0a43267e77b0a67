# richter/models/review.py
from typing import List

from motor.motor_asyncio import AsyncIOMotorDatabase


class ReviewRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db["reviews"]

    async def list_all(self) -> List[dict]:
        return await self.collection.find({}).to_list(length=None)

    async def create(self, review: dict) -> str:
        result = await self.collection.insert_one(dict(review))
        return str(result.inserted_id)

    async def count_for(self, email: str) -> int:
        return await self.collection.count_documents({"email": email})
