import logging
from typing import Optional
from urllib.parse import urlencode

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from app.config import Settings
from app.features.auth.dependencies import (
    get_auth_service,
    get_oauth_service,
    get_session_token,
    require_auth,
)
from app.features.auth.schemas.auth_schema import (
    AuthResponse,
    CurrentUser,
    IssuedSession,
    LoginRequest,
    OAuthLoginRequest,
    RegisterRequest,
    TokenResponse,
    UserPublic,
)
from app.features.auth.utils.auth_util import AuthService
from app.features.auth.utils.oauth_util import OAuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"

OAUTH_SCOPES = "openid email profile"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def session_response(issued: IssuedSession, message: str, response: Response, settings: Settings) -> AuthResponse:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=issued.token,
        max_age=settings.SESSION_EXPIRES_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )
    return AuthResponse(
        success=True,
        message=message,
        data=TokenResponse(access_token=issued.token, token_type="bearer"),
    )


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    return UserPublic.model_validate(auth.register(payload))


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    issued = auth.login(payload)
    return session_response(issued, "Login successful", response, settings)


@router.post("/logout", response_model=AuthResponse)
def logout(
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    auth.logout(token)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return AuthResponse(success=True, message="Logged out successfully")


@router.post("/oauth", response_model=AuthResponse)
def oauth_login(
    payload: OAuthLoginRequest,
    response: Response,
    oauth: OAuthService = Depends(get_oauth_service),
    settings: Settings = Depends(get_settings),
):
    issued = oauth.login(payload)
    return session_response(issued, "OAuth login successful", response, settings)


@router.get("/me", response_model=UserPublic)
def me(
    current_user: CurrentUser = Depends(require_auth),
    auth: AuthService = Depends(get_auth_service),
):
    return UserPublic.model_validate(auth.current_user(current_user))


@router.get("/google")
async def google_login(settings: Settings = Depends(get_settings)):
    params = {
        "client_id": settings.GOOGLE_CLIENT_ID,
        "response_type": "code",
        "redirect_uri": settings.GOOGLE_REDIRECT_URI,
        "scope": OAUTH_SCOPES,
        "access_type": "online",
        "prompt": "select_account",
    }
    url = f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    return {
        "message": "Google sign in link created successfully",
        "data": {
            "url": url
        }
    }


@router.get("/google/callback", response_model=AuthResponse)
async def google_callback(
    response: Response,
    code: str | None = None,
    error: str | None = None,
    oauth: OAuthService = Depends(get_oauth_service),
    settings: Settings = Depends(get_settings),
):
    if error:
        raise HTTPException(status_code=400, detail=f"Google auth error: {error}")
    if not code:
        raise HTTPException(status_code=400, detail="Missing code from Google")

    async with httpx.AsyncClient(timeout=30) as client:
        token_data = {
            "code": code,
            "client_id": settings.GOOGLE_CLIENT_ID,
            "client_secret": settings.GOOGLE_CLIENT_SECRET,
            "redirect_uri": settings.GOOGLE_REDIRECT_URI,
            "grant_type": "authorization_code",
        }
        token_resp = await client.post(GOOGLE_TOKEN_URL, data=token_data)
        if token_resp.status_code != 200:
            logger.warning("Google token exchange failed with status %s", token_resp.status_code)
            raise HTTPException(status_code=400, detail="Failed to fetch token from Google")
        access_token = token_resp.json().get("access_token")

        headers = {"Authorization": f"Bearer {access_token}"}
        userinfo_resp = await client.get(GOOGLE_USERINFO_URL, headers=headers)
        if userinfo_resp.status_code != 200:
            raise HTTPException(status_code=400, detail="Failed to fetch userinfo from Google")
        userinfo = userinfo_resp.json()

    try:
        payload = OAuthLoginRequest(
            email=userinfo.get("email"),
            display_name=userinfo.get("name"),
            auth_provider="google",
            provider_id=userinfo.get("sub"),
            photo_url=userinfo.get("picture"),
        )
    except ValidationError:
        raise HTTPException(status_code=400, detail="Incomplete profile from Google")

    issued = await run_in_threadpool(oauth.login, payload)
    return session_response(issued, "OAuth login successful", response, settings)
