# richter/schemas/user.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError


class TokenRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: EmailStr


class TokenResponse(BaseModel):
    token: str


class RegisterSchema(BaseModel):
    email: EmailStr
    name: str = ""
    photo: Optional[str] = None
    uid: Optional[str] = None


class UserOut(BaseModel):
    id: str = Field(alias="_id")
    email: str
    name: str = ""
    photo: Optional[str] = None
    uid: Optional[str] = None
    role: str = "standard"
    verified: bool = False
    createdAt: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)


_email_adapter = TypeAdapter(EmailStr)


def normalize_email(raw: str) -> str:
    """Canonical form of an email, the way request bodies are stored; unparsable input is kept."""
    try:
        return _email_adapter.validate_python(raw)
    except PydanticValidationError:
        return raw
