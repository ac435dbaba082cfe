import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from timeledger.application import TaskService, build_task_service, configure_task_service
from timeledger.core.observability import configure_logging
from timeledger.core.settings import Settings, load_settings
from timeledger.domain import TaxonomyError, TransientStoreError
from timeledger.routes import tasks

logger = logging.getLogger(__name__)


async def taxonomy_error_handler(request: Request, exc: TaxonomyError) -> JSONResponse:
    if isinstance(exc, TransientStoreError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": {"kind": exc.kind, "message": str(exc)}},
    )


def create_app(settings: Settings | None = None, *, service: TaskService | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)
    configure_task_service(service or build_task_service(settings))

    app = FastAPI(title="Timeledger Task API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(TaxonomyError, taxonomy_error_handler)

    app.include_router(tasks.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "Timeledger Task API",
                "docs": "/docs",
                "store": settings.store,
            }
        )

    return app


app = create_app()
