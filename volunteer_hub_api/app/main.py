"""
Main entrypoint for the Volunteer Hub API.

This module assembles the FastAPI application, sets up logging, CORS,
error handlers and routes.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time as
``app``, so it can be served directly::

    uvicorn volunteer_hub_api.app.main:app --reload

The document store handle is owned by the application: unless one is
passed to ``create_app``, it is created from settings and pinged in the
startup hook and closed in the shutdown hook.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.router import router
from .core.config import Settings, settings
from .core.db import MongoStore
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging
from .core.security import ClaimedEmailVerifier, IdentityVerifier


def create_app(
    store: Optional[MongoStore] = None,
    identity_verifier: Optional[IdentityVerifier] = None,
    app_settings: Settings = settings,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[MongoStore]
        Store handle to use.  When omitted, one is built from
        ``app_settings`` at startup and closed at shutdown.
    identity_verifier : Optional[IdentityVerifier]
        Resolves caller-asserted emails.  Defaults to trusting them.
    app_settings : Settings
        Configuration; the module-level ``settings`` by default.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(app_settings.log_level, app_settings.log_file or None)
    logger = logging.getLogger(__name__)

    app = FastAPI(
        title=app_settings.project_name,
        version=app_settings.api_version,
        debug=app_settings.debug,
    )
    app.state.store = store
    app.state.identity_verifier = identity_verifier or ClaimedEmailVerifier()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(router)

    owns_store = store is None

    @app.on_event("startup")
    def startup_event() -> None:
        if owns_store:
            app.state.store = MongoStore.from_settings(app_settings)
            app.state.store.ping()
        app.state.store.ensure_indexes()
        logger.info("%s %s ready", app_settings.project_name, app_settings.api_version)

    @app.on_event("shutdown")
    def shutdown_event() -> None:
        if owns_store and app.state.store is not None:
            app.state.store.close()
            app.state.store = None

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
