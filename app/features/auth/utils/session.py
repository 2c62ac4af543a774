import logging
import secrets
import threading
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from app.features.auth.models.user_model import User
from app.features.auth.schemas.auth_schema import SessionData, TokenPayload

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Server-side sessions.

    The token handed to the client is a signed JWT that only carries the
    session id; who the session belongs to lives in `_sessions`, so
    destroying the entry revokes the token immediately.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expires_minutes: int = 60 * 24):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes
        self._sessions: Dict[str, SessionData] = {}
        self._lock = threading.Lock()

    def _expired(self, session: SessionData, now: datetime) -> bool:
        return session.created_at + timedelta(minutes=self.expires_minutes) <= now

    def _sweep(self, now: datetime) -> None:
        # caller holds _lock
        stale = [sid for sid, session in self._sessions.items() if self._expired(session, now)]
        for sid in stale:
            del self._sessions[sid]
        if stale:
            logger.info("Dropped %d expired sessions", len(stale))

    def issue(self, user: User) -> str:
        sid = secrets.token_urlsafe(32)
        now = datetime.now(timezone.utc)
        with self._lock:
            self._sweep(now)
            self._sessions[sid] = SessionData(
                sid=sid, user_id=user.id, username=user.username, created_at=now
            )

        expiry_time = now + timedelta(minutes=self.expires_minutes)
        token_payload = TokenPayload(sid=sid, exp=expiry_time)
        to_encode = token_payload.model_dump()
        to_encode["exp"] = int(expiry_time.timestamp())
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def _decode(self, token: str, verify_exp: bool = True) -> Optional[str]:
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": verify_exp},
            )
        except JWTError:
            return None
        return payload.get("sid")

    def resolve(self, token: Optional[str]) -> Optional[SessionData]:
        if not token:
            return None
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            # signed by us but past its exp, forget the server-side entry
            self.destroy(token)
            return None
        except JWTError:
            return None

        sid = payload.get("sid")
        if not sid:
            return None
        with self._lock:
            session = self._sessions.get(sid)
            if session and self._expired(session, datetime.now(timezone.utc)):
                del self._sessions[sid]
                return None
            return session

    def destroy(self, token: Optional[str]) -> bool:
        sid = self._decode(token, verify_exp=False) if token else None
        if not sid:
            return False
        with self._lock:
            return self._sessions.pop(sid, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)
