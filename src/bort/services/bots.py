from loguru import logger

from bort.modules import database
from bort.modules import storage
from bort.schemas.bots import BotCreateRequest

def create_bot(db: database.Database, request: BotCreateRequest, storage_dir: str) -> None:
    """
    Persist a new bot and scaffold its local program folder.

    The folder scaffolding is best effort: a filesystem failure is logged and
    never fails the creation of the bot record.

    Args:
        db: Database connection
        request: Validated bot creation request
        storage_dir: Root directory for per-bot program folders

    Raises:
        sqlite3.IntegrityError: If a bot with the same id already exists
    """
    database.insert_bot(db, request.id, request.name, request.description, request.specs)
    logger.info(f"[BOTS] Created bot {request.id}")

    try:
        storage.write_starter_files(storage_dir, request.id, request.name)
    except (OSError, ValueError) as e:
        logger.warning(f"[BOTS] Could not write starter files for bot {request.id}: {e}")
