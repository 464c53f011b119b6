"""
FastAPI app entry point aggregating the routers under roster/routes.
Keep as `uvicorn roster.api:app`.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .logs import ensure_log_schema
from .services.student_svc import ensure_students_schema

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    ensure_log_schema()
    if ensure_students_schema():
        logger.info("students table created")
    yield


app = FastAPI(title="roster-api", version="0.1.0", lifespan=lifespan)


from .routes import base as base_routes
from .routes import students as students_routes
from .routes import logs as logs_routes

app.include_router(base_routes.router)
app.include_router(students_routes.router)
app.include_router(logs_routes.router)
