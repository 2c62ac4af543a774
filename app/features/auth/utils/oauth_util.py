import logging
import re
from typing import Optional

from app.database.account_store import AccountStore
from app.errors import EmailAlreadyLinked, SubdomainInvalid
from app.features.auth.schemas.auth_schema import IssuedSession, OAuthLoginRequest, UserCreate
from app.features.auth.utils.auth_util import AuthService
from app.features.subdomain.utils import subdomain_util

logger = logging.getLogger(__name__)

USERNAME_MAX_LENGTH = 15
MAX_USERNAME_ATTEMPTS = 100

_USERNAME_STRIP = re.compile(r"[^a-z0-9]")


def generate_username(email: str, display_name: Optional[str] = None) -> str:
    """
    Lower-cased alphanumerics of the display name, or of the email local
    part when there is no usable display name, cut to 15 characters.
    """
    if display_name:
        username = _USERNAME_STRIP.sub("", display_name.lower())[:USERNAME_MAX_LENGTH]
        if username:
            return username
    local_part = email.split("@")[0]
    return _USERNAME_STRIP.sub("", local_part.lower())[:USERNAME_MAX_LENGTH] or "user"


class OAuthService:
    def __init__(self, store: AccountStore, auth: AuthService):
        self.store = store
        self.auth = auth

    def login(self, payload: OAuthLoginRequest) -> IssuedSession:
        with self.store.lock:
            user = self.store.get_user_by_provider(payload.auth_provider, payload.provider_id)
            if user:
                logger.info("OAuth login for existing user %s via %s", user.username, payload.auth_provider.value)
                return self.auth.start_session(user)

            if self.store.get_user_by_email(payload.email):
                logger.warning(
                    "OAuth login via %s refused: email belongs to another account",
                    payload.auth_provider.value,
                )
                raise EmailAlreadyLinked()

            user = self._provision(payload)

        logger.info("Provisioned user %s (id=%s) via %s", user.username, user.id, payload.auth_provider.value)
        return self.auth.start_session(user)

    def _provision(self, payload: OAuthLoginRequest):
        username = self._free_username(generate_username(payload.email, payload.display_name))
        subdomain = self._allocate_subdomain(payload.display_name, username, payload.email.split("@")[0])

        return self.store.create_user(
            UserCreate(
                username=username,
                email=payload.email,
                business_name=payload.display_name or username,
                subdomain=subdomain,
                preferred_language="th",
                auth_provider=payload.auth_provider,
                provider_id=payload.provider_id,
                display_name=payload.display_name,
                photo_url=payload.photo_url,
            )
        )

    def _free_username(self, base: str) -> str:
        if not self.store.get_user_by_username(base):
            return base
        for counter in range(1, MAX_USERNAME_ATTEMPTS + 1):
            candidate = f"{base}{counter}"
            if not self.store.get_user_by_username(candidate):
                return candidate
        # give up and let the unique index reject it
        return base

    def _allocate_subdomain(self, display_name: Optional[str], username: str, local_part: str) -> str:
        exists = self.store.subdomain_exists
        check = None
        for source in (display_name, username, local_part):
            slug = subdomain_util.normalize(source)
            if not slug:
                continue
            candidate = subdomain_util.allocate_unique(slug, exists)
            check = subdomain_util.validate(candidate, exists)
            if check.valid:
                return candidate

        if check is None:
            check = subdomain_util.validate("", exists)
        raise SubdomainInvalid(reason=check.reason.value, detail=check.message)
