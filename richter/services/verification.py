# richter/services/verification.py
"""
Account registration and email verification.

An account is created pending (``verified: False``) with a one-time numeric
code. The code is mailed as a link; redeeming it flips ``verified`` once and
mirrors the change to the identity provider. Codes stay valid after use, so a
second redemption is a no-op success.

Mail and identity-provider failures never undo local writes: the account
exists so the mail can be resent, and local verification state is
authoritative over the remote record.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlencode

from pymongo.errors import DuplicateKeyError

from richter.core.config import Settings
from richter.core.exceptions import DuplicateIdentity, UpstreamFailure
from richter.models.user import ROLE_ADMIN, ROLE_STANDARD, AccountRepository
from richter.utils.codes import format_code, generate_verification_code, parse_code
from richter.utils.email_utils import verification_email

logger = logging.getLogger(__name__)

CODE_ATTEMPTS = 5


@dataclass
class Registration:
    account: dict
    created: bool
    notified: bool = False


@dataclass
class Redemption:
    account: dict
    first_transition: bool


class VerificationWorkflow:
    def __init__(self, accounts: AccountRepository, mailer, identity_provider, settings: Settings):
        self.accounts = accounts
        self.mailer = mailer
        self.identity_provider = identity_provider
        self.settings = settings

    def verification_link(self, account: dict) -> str:
        code = format_code(account["verificationCode"], self.settings.VERIFICATION_CODE_LENGTH)
        link = f"{self.settings.VERIFY_URL_BASE.rstrip('/')}/verify/{code}"
        if account.get("uid"):
            link += "?" + urlencode({"uid": account["uid"]})
        return link

    async def _notify(self, account: dict) -> None:
        subject, body = verification_email(account.get("name"), self.verification_link(account))
        await self.mailer.send(account["email"], subject, body)

    async def register(self, data: dict) -> Registration:
        email = data["email"]
        existing = await self.accounts.find_by_identity(email)
        if existing is not None:
            return Registration(account=existing, created=False)

        account = None
        for _ in range(CODE_ATTEMPTS):
            pending = {
                **data,
                "role": ROLE_STANDARD,
                "verified": False,
                "verificationCode": generate_verification_code(self.settings.VERIFICATION_CODE_LENGTH),
                "createdAt": datetime.now(timezone.utc),
            }
            try:
                account = await self.accounts.create(pending)
                break
            except DuplicateIdentity:
                # Lost a concurrent registration race; the store has the winner.
                existing = await self.accounts.find_by_identity(email)
                return Registration(account=existing or pending, created=False)
            except DuplicateKeyError:
                logger.warning("Verification code collision for %s, regenerating", email)
        if account is None:
            raise UpstreamFailure("database", "could not allocate a verification code")

        logger.info("Registered pending account %s", email)
        try:
            await self._notify(account)
        except UpstreamFailure as e:
            logger.warning("Verification mail to %s not sent: %s", email, e.message)
            return Registration(account=account, created=True, notified=False)
        return Registration(account=account, created=True, notified=True)

    async def resend(self, email: str) -> Optional[dict]:
        """Re-send the stored code. Returns None when no account exists."""
        account = await self.accounts.find_by_identity(email)
        if account is None:
            return None
        if account.get("verified"):
            return {"sent": False, "message": "email already verified"}
        if account.get("verificationCode") is None:
            logger.warning("Account %s has no verification code on file; nothing to resend", email)
            return {"sent": False, "message": "no verification code on file"}
        await self._notify(account)
        return {"sent": True, "message": "verification email sent"}

    async def redeem(self, raw_code: str, uid: Optional[str] = None) -> Optional[Redemption]:
        code = parse_code(raw_code, self.settings.VERIFICATION_CODE_LENGTH)
        if code is None:
            return None
        account = await self.accounts.find_by_code(code)
        if account is None:
            return None

        before = await self.accounts.mark_verified_by_code(code)
        first = before is not None
        account["verified"] = True
        if first:
            logger.info("Account %s verified", account["email"])
            remote_uid = uid or account.get("uid")
            if remote_uid:
                try:
                    await self.identity_provider.mark_email_verified(remote_uid)
                except UpstreamFailure as e:
                    logger.warning(
                        "Identity provider not updated for %s (%s): %s",
                        account["email"], remote_uid, e.message,
                    )
        return Redemption(account=account, first_transition=first)

    async def check_valid(self, email: str) -> Optional[dict]:
        return await self.accounts.find_by_identity(email)

    async def force_verify(self, email: str):
        return await self.accounts.set_verified(email)

    async def promote(self, user_id: str):
        result = await self.accounts.set_role_by_id(user_id, ROLE_ADMIN)
        logger.info("Promoted user %s to admin (modified=%d)", user_id, result.modified_count)
        return result

    async def delete_account(self, user_id: str, email: Optional[str] = None):
        """Remove the remote identity record first, then the local document."""
        if email:
            try:
                await self.identity_provider.delete_by_email(email)
            except UpstreamFailure as e:
                logger.warning("Identity provider record for %s left behind: %s", email, e.message)
        result = await self.accounts.delete(user_id)
        logger.info("Deleted user %s (deleted=%d)", user_id, result.deleted_count)
        return result
