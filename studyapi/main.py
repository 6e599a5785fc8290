import logging

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from mangum import Mangum
from starlette.middleware.cors import CORSMiddleware

from studyapi.containers import container
from studyapi.core.exception_handlers import (
    handle_base_api_exception,
    handle_http_exception,
    handle_unexpected_exception,
)
from studyapi.core.exceptions import BaseAPIException
from studyapi.core.logging_middleware import LoggingMiddleware
from studyapi.logging_config import setup_logging
from studyapi.routers import (
    achievement_router,
    coin_router,
    download_router,
    health_router,
    leaderboard_router,
    resource_router,
    settings_router,
    user_router,
)

load_dotenv("studyapi/.env")

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = container.config.config()
    setup_logging(settings.LOG_LEVEL, sql_echo=settings.DEBUG)

    app = FastAPI(title=settings.PROJECT_NAME, debug=settings.DEBUG)
    app.container = container  # type: ignore

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(BaseAPIException, handle_base_api_exception)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_exception)

    @app.get("/")
    def hello() -> dict:
        return {"message": "Hello World!"}

    app.include_router(health_router.router)
    for module in (
        user_router,
        resource_router,
        download_router,
        coin_router,
        leaderboard_router,
        achievement_router,
        settings_router,
    ):
        app.include_router(module.router, prefix=settings.API_V1_STR)

    logger.info(f"{settings.PROJECT_NAME} started ({settings.ENVIRONMENT})")
    return app


app = create_app()

handler = Mangum(app)
