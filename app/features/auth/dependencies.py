from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.database.account_store import AccountStore
from app.errors import AuthenticationRequired
from app.features.auth.schemas.auth_schema import CurrentUser
from app.features.auth.utils.auth_util import AuthService
from app.features.auth.utils.oauth_util import OAuthService
from app.features.auth.utils.session import SessionManager

bearer_scheme = HTTPBearer(auto_error=False)


def get_store(request: Request) -> AccountStore:
    return request.app.state.store


def get_sessions(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_oauth_service(request: Request) -> OAuthService:
    return request.app.state.oauth_service


def get_session_token(
    request: Request,
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    # 1. Authorization header preferred
    if bearer and bearer.scheme.lower() == "bearer":
        return bearer.credentials

    # 2. session cookie
    cookie_name = request.app.state.settings.SESSION_COOKIE_NAME
    return request.cookies.get(cookie_name)


def require_auth(
    token: Optional[str] = Depends(get_session_token),
    sessions: SessionManager = Depends(get_sessions),
) -> CurrentUser:
    session = sessions.resolve(token)
    if not session:
        raise AuthenticationRequired()
    return CurrentUser(user_id=session.user_id, username=session.username)
