"""
FastAPI application entrypoint.

Run locally:  uvicorn healthcare_analytics.main:app --reload
"""

import logging

from fastapi import FastAPI

from healthcare_analytics.api.routes import router
from healthcare_analytics.config import settings
from healthcare_analytics.models.database import engine
from healthcare_analytics.services.bootstrap import init_db

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(levelname)s | %(name)s | %(message)s",
)

app = FastAPI(
    title="Healthcare Admissions Analytics API",
    description=(
        "Admission and doctor reference data with a catalog of read-only "
        "analytical reports and summary views."
    ),
    version="1.0.0",
)

app.include_router(router, prefix="/api/v1")


@app.on_event("startup")
def on_startup():
    init_db(engine)
