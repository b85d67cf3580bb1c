"""
Identity verification for protected routes.

Each protected route declares an ordered chain of guards. A guard inspects the
request and returns a Decision; the first denial stops the chain and becomes
the HTTP error. The token guard must come first because the others read the
identity it attaches to ``request.state``.
"""

import base64
import json
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

import firebase_admin
from fastapi import Depends, HTTPException, Request
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from firebase_admin import exceptions as firebase_exceptions
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from .database import get_db
from .domain.users.repository import UserRepository
from .shared.validators import same_email

logger = logging.getLogger(__name__)


class IdentityVerificationError(Exception):
    """The identity provider rejected the token"""


class IdentityProviderError(Exception):
    """The identity provider is not usable (missing configuration)"""


@dataclass
class Identity:
    uid: str
    email: Optional[str]
    claims: dict = field(default_factory=dict)


class FirebaseIdentityVerifier:
    """Verifies Firebase ID tokens with the Admin SDK"""

    def __init__(
        self,
        credentials_b64: Optional[str] = None,
        project_id: Optional[str] = None,
        app_name: str = "gameplane",
    ):
        self.credentials_b64 = credentials_b64
        self.project_id = project_id
        self.app_name = app_name
        self._app = None

    def _get_app(self):
        """Initialize Firebase Admin on first use (only once per process)"""
        if self._app is not None:
            return self._app

        try:
            self._app = firebase_admin.get_app(self.app_name)
            return self._app
        except ValueError:
            pass

        options = {"projectId": self.project_id} if self.project_id else None
        if self.credentials_b64:
            try:
                service_account = json.loads(base64.b64decode(self.credentials_b64))
                cred = credentials.Certificate(service_account)
            except (ValueError, TypeError) as e:
                logger.error(f"❌ Invalid FIREBASE_CREDENTIALS_B64: {e}")
                raise IdentityProviderError("Firebase credentials are invalid") from e
            self._app = firebase_admin.initialize_app(cred, options, name=self.app_name)
            logger.info("Firebase Admin initialized with service account credentials")
        elif self.project_id:
            # Token verification only needs the project ID and Google's public keys
            self._app = firebase_admin.initialize_app(options=options, name=self.app_name)
            logger.info("Firebase Admin initialized with project ID only")
        else:
            logger.error("❌ Neither FIREBASE_CREDENTIALS_B64 nor FIREBASE_PROJECT_ID configured")
            raise IdentityProviderError("Firebase not configured")
        return self._app

    async def verify(self, token: str) -> Identity:
        app = self._get_app()
        try:
            decoded = await run_in_threadpool(firebase_auth.verify_id_token, token, app)
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            raise IdentityVerificationError(str(e)) from e

        uid = decoded.get("uid") or decoded.get("sub") or decoded.get("user_id")
        if not uid:
            raise IdentityVerificationError("Token missing user ID claim")
        return Identity(uid=uid, email=decoded.get("email"), claims=decoded)


@dataclass
class Decision:
    allowed: bool
    status_code: int = 200
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, status_code: int, reason: str) -> "Decision":
        return cls(allowed=False, status_code=status_code, reason=reason)


Guard = Callable[[Request, Session], Awaitable[Decision]]


async def token_guard(request: Request, db: Session) -> Decision:
    """Require a bearer token accepted by the identity provider"""
    header = request.headers.get("authorization")
    if not header:
        return Decision.deny(401, "unauthorized access")

    scheme, _, token = header.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        logger.warning(f"⚠️ Malformed Authorization header on {request.url.path}")
        return Decision.deny(401, "unauthorized access")

    verifier = request.app.state.identity_verifier
    try:
        identity = await verifier.verify(token)
    except IdentityVerificationError as e:
        logger.warning(f"⚠️ Token rejected on {request.url.path}: {e}")
        return Decision.deny(401, "unauthorized access")
    except IdentityProviderError as e:
        return Decision.deny(500, str(e))

    request.state.identity = identity
    return Decision.allow()


async def email_match_guard(request: Request, db: Session) -> Decision:
    """Require the verified email to equal the ?email= query parameter"""
    identity: Optional[Identity] = getattr(request.state, "identity", None)
    requested = request.query_params.get("email")
    if identity is None or not same_email(identity.email, requested):
        logger.warning(f"🚫 Email mismatch on {request.url.path}")
        return Decision.deny(403, "forbidden access")
    return Decision.allow()


async def admin_guard(request: Request, db: Session) -> Decision:
    """Require the caller's user record to carry the admin role"""
    identity: Optional[Identity] = getattr(request.state, "identity", None)
    if identity is None or not identity.email:
        return Decision.deny(403, "forbidden access")

    user = UserRepository.get_user_by_email(db, identity.email)
    if not user or user.role != "admin":
        logger.warning(f"🚫 Non-admin {identity.email} attempted {request.method} {request.url.path}")
        return Decision.deny(403, "forbidden access")

    request.state.user = user
    return Decision.allow()


def guarded(*guards: Guard):
    """Compose guards into a FastAPI dependency that yields the verified Identity"""

    async def dependency(request: Request, db: Session = Depends(get_db)) -> Identity:
        for guard in guards:
            decision = await guard(request, db)
            if not decision.allowed:
                raise HTTPException(status_code=decision.status_code, detail=decision.reason)
        return request.state.identity

    return dependency


require_token = guarded(token_guard)
require_owner = guarded(token_guard, email_match_guard)
require_admin = guarded(token_guard, admin_guard)
