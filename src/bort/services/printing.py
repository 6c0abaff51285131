import random
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from typing import Iterable

from loguru import logger

from bort.schemas.printing import ArrayPrintResponse
from bort.schemas.printing import PrintJob

PRINT_LIFETIME = timedelta(minutes=29)
PRINT_LIFETIME_JITTER_S = 60.0

def print_expiry(now: datetime, rng: random.Random | None = None) -> datetime:
    """
    Temporary prints dissolve 29 to 30 minutes after they start.
    """
    jitter = (rng or random).uniform(0.0, PRINT_LIFETIME_JITTER_S)
    return now + PRINT_LIFETIME + timedelta(seconds=jitter)

def start_array_print(
    bot_ids: Iterable[str],
    permanence_code: str | None = None,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> ArrayPrintResponse:
    """
    Start a print job on every printer of the array.

    Args:
        bot_ids: Printers to start, in reporting order
        permanence_code: When given, prints never expire
        now: Clock override
        rng: Random source for the expiry jitter

    Returns:
        ArrayPrintResponse with one printing job per printer
    """
    now = now or datetime.now(timezone.utc)
    jobs = [
        PrintJob(
            bot_id=bot_id,
            permanence_code=permanence_code or None,
            expires_at=None if permanence_code else print_expiry(now, rng),
        )
        for bot_id in bot_ids
    ]
    logger.info(f"[PRINT] Started {len(jobs)} print jobs (permanent={bool(permanence_code)})")

    return ArrayPrintResponse(
        print_jobs=jobs,
        total_printers=len(jobs),
        has_permanence_code=bool(permanence_code),
    )
