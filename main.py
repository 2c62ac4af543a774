import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.database.account_store import AccountStore
from app.database.db import build_engine, build_session_factory, init_db
from app.features.auth.routers import auth_router
from app.features.auth.utils.auth_util import AuthService
from app.features.auth.utils.oauth_util import OAuthService
from app.features.auth.utils.security import PasswordHasher
from app.features.auth.utils.session import SessionManager
from app.features.content.routes import content_route
from app.features.content.utils.generator import ContentGenerator
from app.features.subdomain.routes import subdomain_route

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    engine = build_engine(settings.DATABASE_URL)
    init_db(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s %s", settings.PROJECT_NAME, settings.VERSION)
        yield
        logger.info("Shutting down, disposing database engine")
        engine.dispose()

    app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)

    store = AccountStore(build_session_factory(engine))
    hasher = PasswordHasher(
        rounds=settings.ARGON2_ROUNDS,
        memory_cost=settings.ARGON2_MEMORY_COST,
        parallelism=settings.ARGON2_PARALLELISM,
    )
    sessions = SessionManager(
        secret_key=settings.SESSION_SECRET_KEY,
        algorithm=settings.SESSION_ALGORITHM,
        expires_minutes=settings.SESSION_EXPIRES_MINUTES,
    )
    auth_service = AuthService(store, hasher, sessions)

    app.state.settings = settings
    app.state.store = store
    app.state.sessions = sessions
    app.state.auth_service = auth_service
    app.state.oauth_service = OAuthService(store, auth_service)
    app.state.generator = ContentGenerator(
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        base_url=settings.OPENAI_BASE_URL,
    )

    app.include_router(auth_router.router)
    app.include_router(subdomain_route.router)
    app.include_router(content_route.router)

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    @app.get("/", tags=["default"])
    def index():
        return {"data": "welcome"}

    return app


app = create_app()
