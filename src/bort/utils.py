import logging
import sys

from fastapi import HTTPException
from fastapi import Request
from loguru import logger
from openai import OpenAI

from bort.config import Settings
from bort.modules.database import Database

def setup_loguru(level="INFO"):
    class PropagateHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            record.extra = []
            logging.getLogger(record.name).handle(record)

    logger.remove()
    logger.add(sink=sys.stdout, level=level)
    logger.add(PropagateHandler(), level=level, format="{message}")

def get_database(request: Request) -> Database:
    """
    Get the database connection from application state.

    Args:
        request: FastAPI request object

    Returns:
        Open database connection

    Raises:
        HTTPException: 503 if the database is not available
    """
    if not hasattr(request.app.state, 'database'):
        raise HTTPException(status_code=503, detail="Database not available")
    return request.app.state.database

def get_settings(request: Request) -> Settings:
    """
    Get application settings, falling back to defaults when none were loaded.
    """
    if not hasattr(request.app.state, 'settings'):
        request.app.state.settings = Settings()
    return request.app.state.settings

def get_llm_client(request: Request) -> OpenAI | None:
    """
    Get the language model client, None when no API key is configured.
    """
    return getattr(request.app.state, 'llm_client', None)
