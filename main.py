# main.py
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Settings, configure_logging, get_settings
from database import Base, build_session_factory
from media import ImgurClient
from routers import auth, blogs, comments, users
import schemas

APP_NAME = "Blog Website API"
APP_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def create_app(settings: Settings = None) -> FastAPI:
    """Build the application and its process-scoped collaborators."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    engine, session_factory = build_session_factory(settings.database_url)
    media_client = ImgurClient(
        client_id=settings.imgur_client_id,
        base_url=settings.imgur_api_url,
        timeout=settings.media_timeout,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        Base.metadata.create_all(bind=engine)
        logger.info("%s started", APP_NAME)
        yield
        media_client.close()
        engine.dispose()
        logger.info("%s stopped", APP_NAME)

    app = FastAPI(
        title=APP_NAME,
        version=APP_VERSION,
        description="An API for managing users, blogs and comments in a blog website.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.media_client = media_client

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(blogs.router)
    app.include_router(comments.router)

    @app.get("/", response_model=schemas.HealthOut, tags=["Health"], summary="Service health")
    def root():
        return {"name": APP_NAME, "version": APP_VERSION}

    return app


if __name__ == '__main__':
    uvicorn.run(create_app(), host="127.0.0.1", port=8000)
