import pytest

import fastapi
from fastapi.testclient import TestClient

from bort import utils
from bort.config import Settings
from bort.modules import database
from bort.routers.billing import factory as billing_factory
from bort.routers.bots import factory as bots_factory
from bort.routers.chat import factory as chat_factory
from bort.routers.health import factory as health_factory
from bort.routers.programs import factory as programs_factory
from bort.schemas.specs import default_specs

@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_path=":memory:",
        bot_storage_dir=str(tmp_path / "bot_storage"),
        stripe_secret_key="sk_test_123",
    )

@pytest.fixture
def db():
    db = database.create_database_connection(":memory:")
    yield db
    db.close()

@pytest.fixture
def app(settings, db):
    utils.setup_loguru()

    app = fastapi.FastAPI()

    app.state.settings = settings
    app.state.database = db
    app.state.llm_client = None

    app.include_router(health_factory(app))
    app.include_router(bots_factory(app))
    app.include_router(programs_factory(app))
    app.include_router(billing_factory(app))
    app.include_router(chat_factory(app))

    return app

@pytest.fixture
def client(app: fastapi.FastAPI):
    return TestClient(app)

@pytest.fixture
def specs_payload():
    return default_specs().model_dump()
