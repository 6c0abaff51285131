import fastapi
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from bort.config import Settings
from bort.config import load_settings
from bort.modules import database
from bort.modules import llm
from bort.routers.billing import factory as billing_factory
from bort.routers.bots import factory as bots_factory
from bort.routers.chat import factory as chat_factory
from bort.routers.health import factory as health_factory
from bort.routers.programs import factory as programs_factory
from bort import utils

@asynccontextmanager
async def lifespan(app: fastapi.FastAPI):
    logger.info("Starting bort-api")
    settings: Settings = app.state.settings

    logger.info("Opening database...")
    try:
        app.state.database = database.create_database_connection(settings.database_path)
    except Exception as e:
        logger.error(f"Failed to open database: {e}")
        raise

    if settings.openai_api_key:
        app.state.llm_client = llm.create_llm_client(settings.openai_api_key)
        logger.info(f"Chat replies use language model {settings.openai_model}")
    else:
        app.state.llm_client = None
        logger.info("OPENAI_API_KEY not set, chat replies use the local responder")

    if not settings.stripe_secret_key:
        logger.warning("STRIPE_SECRET_KEY not set, checkout is disabled")

    yield

    logger.info("Shutting down bort-api")

    if hasattr(app.state, 'database'):
        try:
            app.state.database.close()
            logger.info("Database connection closed")
        except Exception as e:
            logger.error(f"Error closing database connection: {e}")

def factory(settings: Settings | None = None):
    settings = settings or load_settings()
    utils.setup_loguru(settings.log_level)

    app = fastapi.FastAPI(title="BORTtheBOT", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        allow_credentials=True,
        expose_headers=["Content-Length", "Content-Disposition"],
    )

    app.include_router(health_factory(app))
    app.include_router(bots_factory(app))
    app.include_router(programs_factory(app))
    app.include_router(billing_factory(app))
    app.include_router(chat_factory(app))

    return app
