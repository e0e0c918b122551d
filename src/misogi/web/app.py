"""FastAPI application for the misogi tracker."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.templating import Jinja2Templates

from .. import __version__
from ..config import Settings
from ..services import controller_from_settings
from ..services.sync import SyncController
from .routers import auth, tracker

logger = logging.getLogger(__name__)

# Template path
TEMPLATES_DIR = Path(__file__).parent / "templates"


def create_app(
    settings: Settings | None = None,
    controller: SyncController | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to build the controller from (default: environment)
        controller: Pre-built controller, mainly for tests

    Returns:
        The configured application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Start the controller on startup, flush remote writes on shutdown."""
        ctl = controller
        if ctl is None:
            ctl = controller_from_settings(settings or Settings.from_env())
        await ctl.start()
        app.state.controller = ctl
        logger.info("Tracker ready (state: %s)", ctl.state.value)
        yield
        await ctl.close()

    app = FastAPI(
        title="misogi",
        description="Daily push-ups, squats and pull-ups toward an annual target",
        version=__version__,
        lifespan=lifespan,
    )

    # Store templates in app state for use in routers
    app.state.templates = Jinja2Templates(directory=TEMPLATES_DIR)

    app.include_router(tracker.router)
    app.include_router(auth.router)

    @app.get("/health")
    async def health(request: Request):
        """Health check endpoint."""
        ctl = request.app.state.controller
        return {"status": "healthy", "version": __version__, "session": ctl.state.value}

    return app
