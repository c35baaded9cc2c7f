# main.py
from __future__ import annotations
from typing import Optional
from fastapi import FastAPI
from app.api.router import router
from app.api.exception_handlers import EXCEPTION_HANDLERS
from app.core.block_store import BlockSetStore
from app.core.config import Settings, get_settings
from app.core.exceptions import RemoteSourceError
from app.middleware.request_logging import RequestLoggingMiddleware
from app.services.blacklist import BlacklistService
from app.utils.logger import get_logger, setup_logging

logger = get_logger("app")


def create_app(settings: Optional[Settings] = None, store: Optional[BlockSetStore] = None) -> FastAPI:
    """
    Build the gate application around its own BlockSetStore.
    Tests pass their own store/settings; production uses the env-driven defaults.
    """
    settings = settings or get_settings()
    store = store if store is not None else BlockSetStore()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(RequestLoggingMiddleware)
    for exc_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exc_class, handler)

    @app.on_event("startup")
    def _seed_blacklist():
        logger.info("%s %s ready, port %d", settings.app_name, settings.app_version, settings.port)
        if not settings.seed_url:
            return
        svc = BlacklistService(store, timeout=settings.remote_timeout)
        try:
            svc.load_from_url(settings.seed_url)
        except RemoteSourceError:
            # start empty; /blacklist/init can be retried by the operator
            logger.warning("starting with an empty blacklist, seed %s unavailable", settings.seed_url)

    # Mount all routes
    app.include_router(router)
    return app


setup_logging()
app = create_app()

if __name__ == "__main__":
    import uvicorn
    _settings = get_settings()
    uvicorn.run("main:app", host=_settings.host, port=_settings.port)
