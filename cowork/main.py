import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from cowork.api.router import api_router
from cowork.config import settings
from cowork.database import init_db
from cowork.errors import register_exception_handlers
from cowork.logging_config import configure_logging

logger = logging.getLogger("cowork.request")


def create_application() -> FastAPI:
    configure_logging(settings)

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept", "Origin"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "%s %s -> %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={"duration_ms": round((time.perf_counter() - started) * 1000, 2)},
        )
        return response

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/", include_in_schema=False, response_class=PlainTextResponse)
    def root():
        return "JDU Cowork API is running"

    @app.on_event("startup")
    def _startup() -> None:
        init_db()

    return app


app = create_application()
