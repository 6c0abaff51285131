import os

import pydantic
from dotenv import load_dotenv

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3001",
    "http://localhost:3000",
    "http://127.0.0.1:3001",
    "http://127.0.0.1:3000",
    "*",
]

class Settings(pydantic.BaseModel):
    database_path: str = "bort.db"
    bot_storage_dir: str = pydantic.Field(default_factory=lambda: os.path.join(os.getcwd(), "bot_storage"))
    stripe_secret_key: str | None = None
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    cors_origins: list[str] = pydantic.Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"

def load_settings() -> Settings:
    """
    Load settings from the environment, reading a local .env file first if present.

    Returns:
        Settings populated from environment variables, defaults for unset keys
    """
    load_dotenv()

    values: dict[str, object] = {}
    if os.getenv("BORT_DATABASE_PATH"):
        values["database_path"] = os.environ["BORT_DATABASE_PATH"]
    if os.getenv("BOT_STORAGE_DIR"):
        values["bot_storage_dir"] = os.environ["BOT_STORAGE_DIR"]
    if os.getenv("STRIPE_SECRET_KEY"):
        values["stripe_secret_key"] = os.environ["STRIPE_SECRET_KEY"]
    if os.getenv("OPENAI_API_KEY"):
        values["openai_api_key"] = os.environ["OPENAI_API_KEY"]
    if os.getenv("OPENAI_MODEL"):
        values["openai_model"] = os.environ["OPENAI_MODEL"]
    if os.getenv("CORS_ORIGIN"):
        values["cors_origins"] = [o.strip() for o in os.environ["CORS_ORIGIN"].split(",") if o.strip()]
    if os.getenv("BORT_LOG_LEVEL"):
        values["log_level"] = os.environ["BORT_LOG_LEVEL"].upper()

    return Settings(**values)
