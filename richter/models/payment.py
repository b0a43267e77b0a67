# richter/models/payment.py
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

CLEANUP_DONE = "done"
CLEANUP_PENDING = "pending"
RESERVATION = "reservation"


class PaymentRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db["payments"]

    async def insert(self, payment: dict):
        doc = dict(payment)
        result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    async def list_for(self, email: str, kind: Optional[str] = None) -> List[dict]:
        query = {"email": email}
        if kind:
            query["type"] = kind
        return await self.collection.find(query).to_list(length=None)

    async def set_cleanup(self, payment_id, state: str):
        return await self.collection.update_one({"_id": payment_id}, {"$set": {"cartCleanup": state}})

    async def pending_cleanup(self) -> List[dict]:
        return await self.collection.find({"cartCleanup": CLEANUP_PENDING}).to_list(length=None)

    async def count(self, query: Optional[dict] = None) -> int:
        return await self.collection.count_documents(query or {})

    async def revenue(self, email: Optional[str] = None) -> float:
        pipeline = []
        if email:
            pipeline.append({"$match": {"email": email}})
        pipeline.append({"$group": {"_id": None, "totalRevenue": {"$sum": "$price"}}})
        result = await self.collection.aggregate(pipeline).to_list(length=None)
        return result[0]["totalRevenue"] if result else 0
