import uuid

from loguru import logger

from bort.modules import database
from bort.schemas.billing import Payment
from bort.schemas.billing import Plan

DEFAULT_PLANS: list[dict[str, str | int]] = [
    {"id": "basic", "name": "Basic", "price_cents": 999, "interval": "basic"},
    {"id": "pro", "name": "Pro", "price_cents": 4099, "interval": "pro"},
    {"id": "yearly", "name": "Yearly", "price_cents": 9999, "interval": "yearly"},
    {"id": "lifetime", "name": "Lifetime", "price_cents": 40099, "interval": "lifetime"},
]

class PlanNotFoundError(LookupError):
    pass

def list_plans(db: database.Database) -> list[Plan]:
    """
    List subscription plans, seeding the default plans on first use.
    """
    plans = database.list_plans(db)
    if plans:
        return plans

    now = database.utc_now()
    defaults = [Plan(created_at=now, **p) for p in DEFAULT_PLANS]
    database.insert_plans(db, defaults)
    logger.info(f"[BILLING] Seeded {len(defaults)} default plans")
    return database.list_plans(db)

def require_plan(db: database.Database, plan_id: str) -> Plan:
    """
    Raises:
        PlanNotFoundError: If no plan has this id
    """
    plan = database.get_plan(db, plan_id)
    if plan is None:
        raise PlanNotFoundError(f"Plan not found: {plan_id}")
    return plan

def record_cashapp_payment(db: database.Database, plan_id: str, tx_ref: str) -> Payment:
    """
    Store a manually submitted Cash App payment for later review.

    Args:
        db: Database connection
        plan_id: Plan being paid for
        tx_ref: Cash App transaction reference supplied by the customer

    Returns:
        The pending Payment record

    Raises:
        PlanNotFoundError: If no plan has this id
    """
    plan = require_plan(db, plan_id)
    payment = Payment(
        id=str(uuid.uuid4()),
        user_id="anon",
        plan_id=plan.id,
        method="cashapp",
        amount_cents=plan.price_cents,
        currency="USD",
        reference=tx_ref,
        status="pending",
        created_at=database.utc_now(),
    )
    database.insert_payment(db, payment)
    logger.info(f"[BILLING] Recorded Cash App payment {payment.id} for plan {plan.id}")
    return payment
