# richter/services/identity_provider.py
import logging

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError

from richter.core.config import Settings
from richter.core.exceptions import UpstreamFailure
from richter.utils.upstream import run_blocking

logger = logging.getLogger(__name__)


class FirebaseIdentityProvider:
    """Mirrors verification and deletion onto the Firebase Auth user record."""

    component = "identity provider"

    def __init__(self, settings: Settings):
        self.timeout = settings.UPSTREAM_TIMEOUT_SECONDS
        self.app = None
        if settings.FIREBASE_CREDENTIALS:
            cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS)
            self.app = firebase_admin.initialize_app(cred, name="richter")
        else:
            logger.warning("FIREBASE_CREDENTIALS not set; identity provider calls will fail")

    async def _call(self, func, *args, **kwargs):
        if self.app is None:
            raise UpstreamFailure(self.component, "identity provider not configured")
        try:
            return await run_blocking(self.component, self.timeout, func, *args, app=self.app, **kwargs)
        except (FirebaseError, ValueError) as e:
            raise UpstreamFailure(self.component, str(e)) from e

    async def mark_email_verified(self, uid: str) -> None:
        await self._call(auth.update_user, uid, email_verified=True)
        logger.info("Firebase user %s marked email-verified", uid)

    async def delete_by_email(self, email: str) -> None:
        record = await self._call(auth.get_user_by_email, email)
        await self._call(auth.delete_user, record.uid)
        logger.info("Firebase user %s (%s) deleted", record.uid, email)

    def close(self) -> None:
        if self.app is not None:
            firebase_admin.delete_app(self.app)
            self.app = None
