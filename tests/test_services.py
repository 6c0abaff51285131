import random
from datetime import datetime
from datetime import timedelta
from datetime import timezone

import pytest

from bort.config import load_settings
from bort.modules import database
from bort.modules import storage
from bort.schemas.specs import default_specs
from bort.services import printing

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

def test_print_jobs_expire_within_thirty_minutes():
    """
    Test that temporary print jobs expire within thirty minutes.
    """
    result = printing.start_array_print(["a", "b", "c"], now=NOW, rng=random.Random(7))

    assert result.total_printers == 3
    assert result.has_permanence_code is False
    for job in result.print_jobs:
        assert job.status == "printing"
        assert job.progress == 0
        assert NOW + timedelta(minutes=29) <= job.expires_at <= NOW + timedelta(minutes=30)

def test_permanent_print_jobs_never_expire():
    """
    Test that permanent print jobs never expire.
    """
    result = printing.start_array_print(["a"], permanence_code="KEEP", now=NOW)

    assert result.has_permanence_code is True
    assert result.print_jobs[0].permanence_code == "KEEP"
    assert result.print_jobs[0].expires_at is None

def test_empty_permanence_code_is_temporary():
    """
    Test that an empty permanence code is treated as none.
    """
    result = printing.start_array_print(["a"], permanence_code="", now=NOW)

    assert result.has_permanence_code is False
    assert result.print_jobs[0].permanence_code is None
    assert result.print_jobs[0].expires_at is not None

def test_write_starter_files(tmp_path):
    """
    Test that starter files are written to the bot's folder.
    """
    bot_dir = storage.write_starter_files(tmp_path, "arm-1", "Arm One")

    assert bot_dir == tmp_path / "arm-1"
    assert "class Robot:" in (bot_dir / "main.py").read_text(encoding="utf-8")
    assert (bot_dir / "README.md").read_text(encoding="utf-8").startswith("# Robot: Arm One")

@pytest.mark.parametrize("bot_id", ["", ".", "..", "../escape", "a/b"])
def test_bot_directory_rejects_unsafe_ids(tmp_path, bot_id):
    """
    Test that unsafe bot ids are rejected as folder names.
    """
    with pytest.raises(ValueError):
        storage.bot_directory(tmp_path, bot_id)

def test_database_bot_round_trip(db):
    """
    Test that a stored bot reads back unchanged.
    """
    specs = default_specs()
    database.insert_bot(db, "bort", "Bort", "desc", specs)

    bot = database.get_bot(db, "bort")
    assert bot.name == "Bort"
    assert bot.specs == specs
    assert bot.created_at.tzinfo is not None
    assert database.get_bot(db, "ghost") is None

def test_database_update_missing_bot(db):
    """
    Test that updating an unknown bot reports nothing changed.
    """
    assert database.update_bot_specs(db, "ghost", default_specs()) is False

def test_database_upsert_keeps_owner(db):
    """
    Test that updating a program keeps its original bot.
    """
    database.upsert_program(db, "p1", "a", "python", "one")
    database.upsert_program(db, "p1", "b", "python", "two")

    program = database.get_program(db, "p1")
    assert program.bot_id == "a"
    assert program.code == "two"

def test_load_settings_from_environment(monkeypatch, tmp_path):
    """
    Test that settings are read from the environment.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BORT_DATABASE_PATH", "/tmp/bort-test.db")
    monkeypatch.setenv("BOT_STORAGE_DIR", "/tmp/bots")
    monkeypatch.setenv("CORS_ORIGIN", "http://a.example, http://b.example")
    monkeypatch.setenv("BORT_LOG_LEVEL", "debug")
    monkeypatch.delenv("STRIPE_SECRET_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_MODEL", raising=False)

    settings = load_settings()

    assert settings.database_path == "/tmp/bort-test.db"
    assert settings.bot_storage_dir == "/tmp/bots"
    assert settings.cors_origins == ["http://a.example", "http://b.example"]
    assert settings.log_level == "DEBUG"
    assert settings.stripe_secret_key is None
    assert settings.openai_api_key is None
    assert settings.openai_model == "gpt-4o-mini"
