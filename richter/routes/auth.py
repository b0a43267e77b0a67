# richter/routes/auth.py
from fastapi import APIRouter, Depends

from richter.core.config import Settings
from richter.dependencies import get_settings_dep
from richter.schemas.user import TokenRequest, TokenResponse
from richter.utils.auth_utils import create_access_token

auth_router = APIRouter(tags=["Auth"])


@auth_router.post("/jwt", response_model=TokenResponse)
async def issue_token(data: TokenRequest, settings: Settings = Depends(get_settings_dep)):
    return {"token": create_access_token(data.model_dump(), settings=settings)}
