# richter/models/user.py
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from richter.core.exceptions import DuplicateIdentity
from richter.database import object_id

ROLE_STANDARD = "standard"
ROLE_ADMIN = "admin"


class AccountRepository:
    """Account store over the ``users`` collection; ``email`` is the identity."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db["users"]

    async def find_by_identity(self, email: str) -> Optional[dict]:
        return await self.collection.find_one({"email": email})

    async def find_by_code(self, code: int) -> Optional[dict]:
        return await self.collection.find_one({"verificationCode": code})

    async def list_all(self) -> List[dict]:
        return await self.collection.find({}).to_list(length=None)

    async def create(self, account: dict) -> dict:
        """
        Insert a new account.

        The unique index on ``email`` is the authority on duplicates: a key
        conflict on email raises DuplicateIdentity. Any other key conflict
        (a verification code collision) propagates as DuplicateKeyError.
        """
        doc = dict(account)
        try:
            result = await self.collection.insert_one(doc)
        except DuplicateKeyError:
            if await self.find_by_identity(account["email"]) is not None:
                raise DuplicateIdentity(account["email"])
            raise
        doc["_id"] = result.inserted_id
        return doc

    async def set_role(self, email: str, role: str) -> int:
        result = await self.collection.update_one({"email": email}, {"$set": {"role": role}})
        return result.modified_count

    async def set_role_by_id(self, user_id: str, role: str):
        result = await self.collection.update_one(
            {"_id": object_id(user_id)}, {"$set": {"role": role}}
        )
        return result

    async def set_verified(self, email: str):
        return await self.collection.update_one({"email": email}, {"$set": {"verified": True}})

    async def mark_verified_by_code(self, code: int) -> Optional[dict]:
        """
        Flip ``verified`` for the account holding ``code`` if it is still pending.

        Returns the pre-update document on the first transition, None when the
        account was already verified or no account holds the code.
        """
        return await self.collection.find_one_and_update(
            {"verificationCode": code, "verified": {"$ne": True}},
            {"$set": {"verified": True}},
            return_document=ReturnDocument.BEFORE,
        )

    async def delete(self, user_id: str):
        return await self.collection.delete_one({"_id": object_id(user_id)})

    async def count(self) -> int:
        return await self.collection.count_documents({})
