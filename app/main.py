from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from app.cache import CacheGateway
from app.logging_utils import configure_logging
from app.services.report_jobs import ReportJobRegistry
from app.services.report_orchestrator import ReportOrchestrator


def _validate_env() -> None:
    """
    Validate all required environment variables before wiring services.

    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.
    """

    from app.config import validate_settings

    errors = validate_settings()
    if errors:
        raise RuntimeError(
            "Startup validation failed, missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def create_app(
    *,
    orchestrator: ReportOrchestrator | None = None,
    cache: CacheGateway | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Collaborators passed in are used as-is and never closed by the app;
    anything omitted is built from the environment on startup.
    """

    configure_logging()

    @asynccontextmanager
    async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
        log = logging.getLogger(__name__)
        owned_cache: CacheGateway | None = None
        report_orchestrator = orchestrator

        if report_orchestrator is None:
            from app.cache import build_cache_gateway
            from app.config import get_cache_settings, get_report_job_settings
            from app.services.report_orchestrator import build_report_orchestrator

            _validate_env()
            shared_cache = cache
            if shared_cache is None:
                owned_cache = build_cache_gateway(get_cache_settings())
                shared_cache = owned_cache
            report_orchestrator = build_report_orchestrator(shared_cache)
            retention_seconds = get_report_job_settings().retention_seconds
            log.info("Report pipeline wired cache_backend=%s", get_cache_settings().backend)
        else:
            retention_seconds = 3600

        registry = ReportJobRegistry(
            orchestrator=report_orchestrator,
            retention_seconds=retention_seconds,
        )
        application.state.report_orchestrator = report_orchestrator
        application.state.report_jobs = registry
        registry.start_sweeper(interval_seconds=min(60.0, float(retention_seconds)))
        try:
            yield
        finally:
            await registry.shutdown()
            if owned_cache is not None:
                await owned_cache.close()
            log.info("Report pipeline shut down")

    application = FastAPI(
        title="Rival Report API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import reports_router

    application.include_router(reports_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
