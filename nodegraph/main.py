# nodegraph/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from nodegraph.api import router as api_router
from nodegraph.core.config import Settings, settings as default_settings
from nodegraph.core.exceptions import GraphAPIException
from nodegraph.core.logging import configure_logging
from nodegraph.db.driver import Database

logger = logging.getLogger(__name__)

def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # --- Startup Logic ---
        configure_logging(settings.LOG_LEVEL)
        logger.info("Starting the application...")
        # A failed connectivity check propagates and aborts startup.
        app.state.database = await Database(settings.database_url).connect()
        try:
            yield
        finally:
            # --- Shutdown Logic ---
            await app.state.database.close()

    app = FastAPI(
        title="Node Graph API",
        description="Create titled content nodes and read them back with their connections.",
        version="1.0.0",
        lifespan=lifespan,
        redirect_slashes=False,
    )

    @app.exception_handler(GraphAPIException)
    async def graph_api_exception_handler(request: Request, exc: GraphAPIException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Routing is exact on method and path, so a wrong method is also "not found".
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"message": "Not found"},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    app.include_router(api_router.router)
    return app

app = create_app()
