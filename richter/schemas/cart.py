# richter/schemas/cart.py
from typing import Optional

from pydantic import BaseModel, EmailStr


class CartItemCreate(BaseModel):
    menuId: str
    email: EmailStr
    name: str
    price: float
    image: Optional[str] = None
