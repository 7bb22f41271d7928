from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roster.api.v1.router import api_router
from roster.core.config import Settings, settings
from roster.services.employee_gateway import EmployeeGateway
from roster.services.form_workflow import FormWorkflow
from roster.services.roster_cache import RosterCache

logger = logging.getLogger(__name__)


def _log_load_result(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    err = task.exception()
    if err is not None:
        logger.error("Initial roster load failed: %s", err)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    state = application.state
    try:
        await state.gateway.initialize(state.settings)
    except Exception:
        logger.exception("Failed to initialize EmployeeGateway — continuing without remote roster")

    load_task: asyncio.Task | None = None
    if state.gateway.initialized:
        load_task = asyncio.create_task(state.roster.load())
        load_task.add_done_callback(_log_load_result)

    yield

    await state.roster.close()
    if load_task is not None and not load_task.done():
        load_task.cancel()
        try:
            await load_task
        except asyncio.CancelledError:
            logger.info("Initial roster load cancelled on shutdown")
    await state.gateway.close()


def create_app(
    app_settings: Settings | None = None,
    gateway: EmployeeGateway | None = None,
) -> FastAPI:
    app_settings = app_settings or settings
    gateway = gateway or EmployeeGateway()
    roster = RosterCache(gateway, retry_delay=app_settings.ROSTER_RETRY_DELAY_SECONDS)

    application = FastAPI(
        title="Roster Manager API",
        description="Employee roster synchronized with the remote employee service",
        version=app_settings.APP_VERSION,
        lifespan=lifespan,
    )
    application.state.settings = app_settings
    application.state.gateway = gateway
    application.state.roster = roster
    application.state.form = FormWorkflow(roster)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(api_router)

    @application.get("/")
    async def root():
        return {"message": "Roster Manager API"}

    return application


app = create_app()
