from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import Engine

from seshlock.core.config import Settings, get_settings
from seshlock.core.exceptions import SeshlockError
from seshlock.core.logging import setup_logging
from seshlock.db.session import build_session_factory, create_db_engine
from seshlock.routers import sessions
from seshlock.services.gateway import AuthenticationGateway
from seshlock.services.sessions import SessionEngine


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(title=settings.APP_NAME)
    app.state.settings = settings
    app.state.db_engine = engine or create_db_engine(settings.DATABASE_URL)
    app.state.session_factory = build_session_factory(app.state.db_engine)
    app.state.session_engine = SessionEngine(settings)
    app.state.gateway = AuthenticationGateway(app.state.session_engine)

    app.include_router(sessions.router, prefix="/api/sessions", tags=["sessions"])

    @app.exception_handler(SeshlockError)
    async def handle_seshlock_error(_: Request, exc: SeshlockError) -> JSONResponse:
        headers = exc.headers if getattr(exc, "headers", None) else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    return app
