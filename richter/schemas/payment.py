# richter/schemas/payment.py
from typing import List

from pydantic import BaseModel, ConfigDict, EmailStr


class PaymentIntentRequest(BaseModel):
    price: float


class PaymentCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: EmailStr
    price: float
    transactionId: str
    cartIds: List[str] = []
    menuItemIds: List[str] = []
    status: str = "pending"
    type: str = "order"
