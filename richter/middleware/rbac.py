# richter/middleware/rbac.py
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from richter.core.config import Settings
from richter.core.exceptions import AuthInvalid, AuthMissing, Forbidden
from richter.dependencies import get_account_repository, get_settings_dep
from richter.models.user import ROLE_ADMIN, AccountRepository
from richter.schemas.user import normalize_email
from richter.utils.auth_utils import decode_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings_dep),
) -> dict:
    """Verified session claim; the only identity check a route gets."""
    if credentials is None or not credentials.credentials:
        raise AuthMissing()
    payload = decode_token(credentials.credentials, settings)
    if not payload.get("email"):
        raise AuthInvalid()
    return payload


async def is_admin(
    user: dict = Depends(get_current_user),
    accounts: AccountRepository = Depends(get_account_repository),
) -> dict:
    account = await accounts.find_by_identity(user["email"])
    if account is None or account.get("role") != ROLE_ADMIN:
        raise Forbidden()
    return user


def require_self(email: str, user: dict) -> None:
    if normalize_email(email) != normalize_email(user["email"]):
        raise Forbidden()
