# richter/schemas/menu.py
from typing import Optional

from pydantic import BaseModel


class MenuItemCreate(BaseModel):
    name: str
    category: str
    price: float
    recipe: str = ""
    image: Optional[str] = None


class MenuItemUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    recipe: Optional[str] = None
    image: Optional[str] = None


class ReviewCreate(BaseModel):
    name: str
    details: str
    rating: float
