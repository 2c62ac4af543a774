import logging
from typing import Optional

from app.database.account_store import AccountStore
from app.errors import (
    DuplicateEmail,
    DuplicateSubdomain,
    DuplicateUsername,
    InvalidCredentials,
    SubdomainInvalid,
    UserNotFound,
)
from app.features.auth.models.user_model import User
from app.features.auth.schemas.auth_schema import (
    CurrentUser,
    IssuedSession,
    LoginRequest,
    RegisterRequest,
    UserCreate,
)
from app.features.auth.utils.security import PasswordHasher
from app.features.auth.utils.session import SessionManager
from app.features.subdomain.schemas.subdomain_schema import SubdomainIssue
from app.features.subdomain.utils import subdomain_util

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, store: AccountStore, hasher: PasswordHasher, sessions: SessionManager):
        self.store = store
        self.hasher = hasher
        self.sessions = sessions

    def register(self, payload: RegisterRequest) -> User:
        password_hash = self.hasher.hash(payload.password)

        with self.store.lock:
            if self.store.get_user_by_username(payload.username):
                logger.warning("Registration rejected: username %s taken", payload.username)
                raise DuplicateUsername()

            if self.store.get_user_by_email(payload.email):
                logger.warning("Registration rejected: email already registered")
                raise DuplicateEmail()

            check = subdomain_util.validate(payload.subdomain, self.store.subdomain_exists)
            if not check.valid:
                if check.reason == SubdomainIssue.TAKEN:
                    raise DuplicateSubdomain()
                raise SubdomainInvalid(reason=check.reason.value, detail=check.message)

            user = self.store.create_user(
                UserCreate(
                    username=payload.username,
                    email=payload.email,
                    business_name=payload.business_name,
                    subdomain=payload.subdomain,
                    password=password_hash,
                    preferred_language=payload.preferred_language,
                )
            )

        logger.info("Registered user %s (id=%s) on subdomain %s", user.username, user.id, user.subdomain)
        return user

    def login(self, payload: LoginRequest) -> IssuedSession:
        user = self.store.get_user_by_username(payload.username)
        # same error for unknown user, oauth-only account and bad password
        if not user or not self.hasher.verify(payload.password, user.password):
            logger.warning("Failed login for username %s", payload.username)
            raise InvalidCredentials()

        logger.info("User %s logged in", user.username)
        return self.start_session(user)

    def start_session(self, user: User) -> IssuedSession:
        token = self.sessions.issue(user)
        return IssuedSession(token=token, user=CurrentUser(user_id=user.id, username=user.username))

    def logout(self, token: Optional[str]) -> None:
        try:
            if self.sessions.destroy(token):
                logger.info("Session destroyed")
        except Exception:
            logger.error("Error destroying session", exc_info=True)

    def current_user(self, current: CurrentUser) -> User:
        user = self.store.get_user(current.user_id)
        if not user:
            raise UserNotFound()
        return user
