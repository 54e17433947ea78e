import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from services.school_locator.api.school_router import router as school_router
from shared.config import Settings
from shared.db import Database
from shared.errors import register_exception_handlers
from shared.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)
    database = Database(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Never serve traffic against an unknown schema
        try:
            await database.init_models()
        except Exception:
            logger.exception("Error initializing database")
            raise
        logger.info("Schools table exists")
        yield
        await database.dispose()

    app = FastAPI(title="School Locator API", lifespan=lifespan)
    app.state.settings = settings
    app.state.db = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/")
    def health_check():
        return {"status": "School Locator API is running"}

    app.include_router(school_router)
    return app


def run() -> None:
    settings = Settings.from_env()
    app = create_app(settings)
    logger.info("listening on %s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
