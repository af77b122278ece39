"""
FastAPI application entry point for the account service.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from authapi.config import get_settings
from authapi.schema import create_graphql_router


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(title="Account Service (GraphQL)", version="0.1.0")
    app.include_router(create_graphql_router(), prefix=f"{settings.api_prefix}/graphql")
    return app


app = create_app()
