# richter/schemas/stats.py
from pydantic import BaseModel


class AdminStats(BaseModel):
    users: int
    menuItems: int
    orders: int
    revenue: float


class UserStats(BaseModel):
    carts: int
    payments: int
    reservations: int
    reviews: int
    spent: float
