import json
import sqlite3
from datetime import datetime
from datetime import timezone

import pydantic
from loguru import logger

from bort.schemas.billing import Payment
from bort.schemas.billing import Plan
from bort.schemas.bots import Bot
from bort.schemas.programs import Program
from bort.schemas.specs import BotSpecs

SCHEMA = """
CREATE TABLE IF NOT EXISTS bot (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT,
    specs_json TEXT NOT NULL,
    created_at INTEGER NOT NULL,
    updated_at INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS bot_program (
    id TEXT PRIMARY KEY,
    bot_id TEXT NOT NULL,
    language TEXT NOT NULL,
    code TEXT NOT NULL,
    created_at INTEGER NOT NULL,
    updated_at INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS plan (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    price_cents INTEGER NOT NULL,
    interval TEXT NOT NULL,
    stripe_price_id TEXT,
    created_at INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS payment (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    plan_id TEXT NOT NULL,
    method TEXT NOT NULL,
    amount_cents INTEGER NOT NULL,
    currency TEXT NOT NULL,
    reference TEXT,
    status TEXT NOT NULL,
    created_at INTEGER NOT NULL
);
"""

class Database(pydantic.BaseModel):
    path: str
    connection: sqlite3.Connection

    model_config = {"arbitrary_types_allowed": True}

    def close(self) -> None:
        self.connection.close()

def _to_timestamp(value: datetime) -> int:
    return int(value.timestamp())

def _from_timestamp(value: int | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def create_database_connection(path: str = "bort.db") -> Database:
    """
    Open the SQLite database and make sure every table exists.

    Args:
        path: Database file path, or ":memory:" for a throwaway database

    Returns:
        Database wrapping the open connection

    Raises:
        RuntimeError: If the database cannot be opened or initialized
    """
    try:
        connection = sqlite3.connect(path, check_same_thread=False)
        connection.row_factory = sqlite3.Row
        connection.executescript(SCHEMA)
        connection.commit()
        logger.info(f"Database ready at {path}")
        return Database(path=path, connection=connection)
    except sqlite3.Error as e:
        logger.error(f"Failed to open database at {path}: {e}")
        raise RuntimeError(f"Failed to open database at {path}: {e}")

def _row_to_bot(row: sqlite3.Row) -> Bot:
    return Bot(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        specs=BotSpecs.model_validate(json.loads(row["specs_json"])),
        created_at=_from_timestamp(row["created_at"]),
        updated_at=_from_timestamp(row["updated_at"]),
    )

def _row_to_program(row: sqlite3.Row) -> Program:
    return Program(
        id=row["id"],
        bot_id=row["bot_id"],
        language=row["language"],
        code=row["code"],
        created_at=_from_timestamp(row["created_at"]),
        updated_at=_from_timestamp(row["updated_at"]),
    )

def _row_to_plan(row: sqlite3.Row) -> Plan:
    return Plan(
        id=row["id"],
        name=row["name"],
        price_cents=row["price_cents"],
        interval=row["interval"],
        stripe_price_id=row["stripe_price_id"],
        created_at=_from_timestamp(row["created_at"]),
    )

def list_bots(db: Database) -> list[Bot]:
    rows = db.connection.execute("SELECT * FROM bot ORDER BY created_at, id").fetchall()
    return [_row_to_bot(row) for row in rows]

def get_bot(db: Database, bot_id: str) -> Bot | None:
    row = db.connection.execute("SELECT * FROM bot WHERE id = ?", (bot_id,)).fetchone()
    if row is None:
        return None
    return _row_to_bot(row)

def insert_bot(db: Database, bot_id: str, name: str, description: str | None, specs: BotSpecs) -> None:
    """
    Insert a new bot record.

    Raises:
        sqlite3.IntegrityError: If a bot with the same id already exists
    """
    now = _to_timestamp(utc_now())
    with db.connection:
        db.connection.execute(
            "INSERT INTO bot (id, name, description, specs_json, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?)",
            (bot_id, name, description, specs.model_dump_json(), now, now),
        )

def update_bot_specs(db: Database, bot_id: str, specs: BotSpecs) -> bool:
    """
    Replace the specs of a bot.

    Returns:
        True if the bot existed and was updated
    """
    now = _to_timestamp(utc_now())
    with db.connection:
        cursor = db.connection.execute(
            "UPDATE bot SET specs_json = ?, updated_at = ? WHERE id = ?",
            (specs.model_dump_json(), now, bot_id),
        )
    return cursor.rowcount > 0

def delete_bot(db: Database, bot_id: str) -> None:
    with db.connection:
        db.connection.execute("DELETE FROM bot WHERE id = ?", (bot_id,))

def list_programs_by_bot(db: Database, bot_id: str) -> list[Program]:
    rows = db.connection.execute(
        "SELECT * FROM bot_program WHERE bot_id = ? ORDER BY created_at, id", (bot_id,)
    ).fetchall()
    return [_row_to_program(row) for row in rows]

def get_program(db: Database, program_id: str) -> Program | None:
    row = db.connection.execute("SELECT * FROM bot_program WHERE id = ?", (program_id,)).fetchone()
    if row is None:
        return None
    return _row_to_program(row)

def upsert_program(db: Database, program_id: str, bot_id: str, language: str, code: str) -> None:
    """
    Update a program's code and language, inserting it when it does not exist yet.
    The owning bot of an existing program is never changed.
    """
    now = _to_timestamp(utc_now())
    with db.connection:
        cursor = db.connection.execute(
            "UPDATE bot_program SET code = ?, language = ?, updated_at = ? WHERE id = ?",
            (code, language, now, program_id),
        )
        if cursor.rowcount == 0:
            db.connection.execute(
                "INSERT INTO bot_program (id, bot_id, language, code, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?)",
                (program_id, bot_id, language, code, now, now),
            )

def delete_program(db: Database, program_id: str) -> None:
    with db.connection:
        db.connection.execute("DELETE FROM bot_program WHERE id = ?", (program_id,))

def list_plans(db: Database) -> list[Plan]:
    rows = db.connection.execute("SELECT * FROM plan ORDER BY price_cents, id").fetchall()
    return [_row_to_plan(row) for row in rows]

def get_plan(db: Database, plan_id: str) -> Plan | None:
    row = db.connection.execute("SELECT * FROM plan WHERE id = ?", (plan_id,)).fetchone()
    if row is None:
        return None
    return _row_to_plan(row)

def insert_plans(db: Database, plans: list[Plan]) -> None:
    with db.connection:
        db.connection.executemany(
            "INSERT INTO plan (id, name, price_cents, interval, stripe_price_id, created_at) VALUES (?, ?, ?, ?, ?, ?)",
            [
                (p.id, p.name, p.price_cents, p.interval, p.stripe_price_id, _to_timestamp(p.created_at or utc_now()))
                for p in plans
            ],
        )

def insert_payment(db: Database, payment: Payment) -> None:
    with db.connection:
        db.connection.execute(
            "INSERT INTO payment (id, user_id, plan_id, method, amount_cents, currency, reference, status, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                payment.id,
                payment.user_id,
                payment.plan_id,
                payment.method,
                payment.amount_cents,
                payment.currency,
                payment.reference,
                payment.status,
                _to_timestamp(payment.created_at),
            ),
        )

def list_payments(db: Database) -> list[Payment]:
    rows = db.connection.execute("SELECT * FROM payment ORDER BY created_at, rowid").fetchall()
    return [
        Payment(
            id=row["id"],
            user_id=row["user_id"],
            plan_id=row["plan_id"],
            method=row["method"],
            amount_cents=row["amount_cents"],
            currency=row["currency"],
            reference=row["reference"],
            status=row["status"],
            created_at=_from_timestamp(row["created_at"]),
        )
        for row in rows
    ]
