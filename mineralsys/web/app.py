"""FastAPI application factory and routing definitions."""

from __future__ import annotations

import threading
from functools import partial
from typing import Any

import anyio.to_thread
from fastapi import FastAPI, HTTPException, Request, status
from loguru import logger
from pydantic import BaseModel, Field

from mineralsys.catalog import CatalogError, MineralNotFoundError, MineralStore
from mineralsys.config.app import AppConfig
from mineralsys.report import AnalysisContext, ReportError, ReportService

_STAGE_STATUS = {
    "build-timeout": status.HTTP_504_GATEWAY_TIMEOUT,
}


class ReportRequest(BaseModel):
    """Optional request body for report generation."""

    audience: str = Field("", description="Who the report is written for")
    purpose: str = Field("", description="Decision the report supports")
    site_context: str = Field("", description="Optional site description")
    language: str | None = Field(None, description="Language code for localized text")


def create_app(store: MineralStore, service: ReportService, config: AppConfig | None = None) -> FastAPI:
    """Creates the report API around an existing store and report service."""
    web_config = config.web if config and config.web else None
    default_language = config.report.default_language if config else "en"
    disconnect_poll = service.settings.build.poll_interval_seconds

    app = FastAPI(
        title=web_config.title if web_config else "Mineral Report API",
        description="Generate analysis reports for catalogued minerals.",
        version="0.1.0",
    )

    @app.get("/health", summary="Health Check", tags=["Monitoring"])
    async def health_check() -> dict[str, str]:
        """Check if the API is running."""
        return {"status": "ok"}

    @app.get("/api/minerals", summary="List Minerals", tags=["Minerals"])
    async def list_minerals() -> list[dict[str, str]]:
        try:
            records = store.list_minerals()
        except CatalogError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return [{"slug": record.slug, "name": record.name(), "family": record.family} for record in records]

    @app.post("/api/minerals/{slug}/report", summary="Generate Report", tags=["Reports"])
    async def generate_report(
        slug: str,
        request: Request,
        payload: ReportRequest | None = None,
    ) -> dict[str, Any]:
        """Run the report pipeline for one mineral and return the artifact paths."""
        body = payload or ReportRequest()
        try:
            record = store.get(slug)
        except MineralNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except CatalogError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc

        context = AnalysisContext(
            audience=body.audience,
            purpose=body.purpose,
            site_context=body.site_context,
            language=body.language or default_language,
        )
        logger.info("Report requested for {} (audience={!r})", slug, context.audience)
        cancel = threading.Event()
        job = partial(service.generate_report, record, store.folder_for(record), context, cancel=cancel)
        failure: ReportError | None = None
        async with anyio.create_task_group() as tg:
            tg.start_soon(_cancel_on_disconnect, request, cancel, slug, disconnect_poll)
            try:
                artifacts = await anyio.to_thread.run_sync(job)
            except ReportError as exc:
                failure = exc
            finally:
                tg.cancel_scope.cancel()
        if failure is not None:
            raise HTTPException(
                status_code=_STAGE_STATUS.get(failure.stage, status.HTTP_500_INTERNAL_SERVER_ERROR),
                detail=failure.to_dict(),
            ) from failure
        return artifacts.to_dict()

    return app


async def _cancel_on_disconnect(request: Request, cancel: threading.Event, slug: str, interval: float) -> None:
    """Set ``cancel`` once the client goes away; also set when this watcher is cancelled."""
    try:
        while not await request.is_disconnected():
            await anyio.sleep(interval)
        logger.warning("Report request for {} abandoned by client; cancelling build", slug)
    finally:
        cancel.set()


__all__ = ["ReportRequest", "create_app"]
