import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flashcards_api.core.config import Settings, settings
from flashcards_api.core.database import Database
from flashcards_api.core.errors import register_exception_handlers
from flashcards_api.core.logging_config import configure_logging
from flashcards_api.routers import auth, collections, flashcards

logger = logging.getLogger(__name__)


def create_app(config: Optional[Settings] = None) -> FastAPI:
    config = config or settings
    configure_logging(config.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # the port is only served once the database answers
        db = Database.from_settings(config)
        await db.connect()
        if config.CREATE_TABLES:
            await db.create_tables()
        app.state.db = db
        logger.info("Ready to serve HTTP requests on port %s", config.PORT)
        try:
            yield
        finally:
            await db.dispose()

    app = FastAPI(title="Flashcards API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/")
    async def root():
        return {"msg": "Hello! There's nothing interesting for GET /"}

    app.include_router(auth.router, tags=["auth"])
    app.include_router(collections.router, prefix="/collections", tags=["collections"])
    app.include_router(flashcards.router, prefix="/collections", tags=["flashcards"])
    return app


app = create_app()


def run():
    uvicorn.run("flashcards_api.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
