# richter/routes/users.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from richter.database import serialize
from richter.dependencies import get_account_repository, get_workflow, path_email
from richter.middleware.rbac import get_current_user, is_admin, require_self
from richter.models.user import ROLE_ADMIN, AccountRepository
from richter.schemas.user import RegisterSchema, UserOut, normalize_email
from richter.services.verification import VerificationWorkflow

user_router = APIRouter(tags=["Users"])


def public_account(doc: dict) -> dict:
    out = serialize(doc)
    out.pop("verificationCode", None)
    return out


@user_router.get("/users", response_model=List[UserOut])
async def list_users(
    admin: dict = Depends(is_admin),
    accounts: AccountRepository = Depends(get_account_repository),
):
    return [public_account(u) for u in await accounts.list_all()]


@user_router.post("/users")
async def register(data: RegisterSchema, workflow: VerificationWorkflow = Depends(get_workflow)):
    registration = await workflow.register(data.model_dump(exclude_none=True))
    if not registration.created:
        return {"message": "user already exists", "insertedId": None}
    response = {
        "acknowledged": True,
        "insertedId": str(registration.account["_id"]),
        "emailSent": registration.notified,
    }
    if not registration.notified:
        response["warning"] = "account created but verification email could not be sent"
    return response


@user_router.get("/verify/{code}")
async def verify(
    code: str,
    uid: Optional[str] = Query(None),
    workflow: VerificationWorkflow = Depends(get_workflow),
):
    redemption = await workflow.redeem(code, uid)
    if redemption is None:
        return {"verified": False, "message": "invalid verification code"}
    return {
        "verified": True,
        "email": redemption.account["email"],
        "alreadyVerified": not redemption.first_transition,
    }


@user_router.get("/sendMail/{email}")
async def resend_mail(email: str = Depends(path_email), workflow: VerificationWorkflow = Depends(get_workflow)):
    ack = await workflow.resend(email)
    if ack is None:
        return {"sent": False, "message": "user not found"}
    return ack


@user_router.get("/checkValid/{email}")
async def check_valid(email: str = Depends(path_email), workflow: VerificationWorkflow = Depends(get_workflow)):
    account = await workflow.check_valid(email)
    if account is None:
        return {"verified": False, "message": "user not found"}
    return public_account(account)


@user_router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    email: Optional[str] = Query(None),
    admin: dict = Depends(is_admin),
    workflow: VerificationWorkflow = Depends(get_workflow),
):
    result = await workflow.delete_account(user_id, normalize_email(email) if email else None)
    return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}


@user_router.put("/user/{email}")
async def force_verify(email: str = Depends(path_email), workflow: VerificationWorkflow = Depends(get_workflow)):
    result = await workflow.force_verify(email)
    return {"matchedCount": result.matched_count, "modifiedCount": result.modified_count}


@user_router.patch("/users/admin/{user_id}")
async def make_admin(user_id: str, workflow: VerificationWorkflow = Depends(get_workflow)):
    result = await workflow.promote(user_id)
    return {"matchedCount": result.matched_count, "modifiedCount": result.modified_count}


@user_router.get("/users/admin/{email}")
async def check_admin(
    email: str = Depends(path_email),
    user: dict = Depends(get_current_user),
    accounts: AccountRepository = Depends(get_account_repository),
):
    require_self(email, user)
    account = await accounts.find_by_identity(email)
    return {"admin": bool(account) and account.get("role") == ROLE_ADMIN}
