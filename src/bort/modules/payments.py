import stripe
from loguru import logger

from bort.schemas.billing import Plan

def checkout_mode(plan: Plan) -> str:
    return "payment" if plan.interval == "lifetime" else "subscription"

def checkout_line_item(plan: Plan, price_id: str | None = None) -> dict:
    """
    Build the single Checkout line item for a plan.
    A Stripe price id takes precedence over inline USD price data.
    """
    if price_id:
        return {"price": price_id, "quantity": 1}

    price_data: dict = {
        "currency": "usd",
        "product_data": {"name": plan.name},
        "unit_amount": plan.price_cents,
    }
    if plan.interval != "lifetime":
        price_data["recurring"] = {"interval": "year" if plan.interval == "yearly" else "month"}
    return {"price_data": price_data, "quantity": 1}

def create_checkout_session(
    secret_key: str,
    plan: Plan,
    success_url: str,
    cancel_url: str,
    price_id: str | None = None,
) -> tuple[str, str | None]:
    """
    Create a hosted Stripe Checkout session for a plan.

    Args:
        secret_key: Stripe secret API key
        plan: Plan being purchased
        success_url: Redirect target after a successful payment
        cancel_url: Redirect target when the customer cancels
        price_id: Optional Stripe price id to bill instead of inline price data

    Returns:
        (session id, hosted checkout url)

    Raises:
        stripe.StripeError: If Stripe rejects the request
    """
    stripe.api_key = secret_key
    session = stripe.checkout.Session.create(
        mode=checkout_mode(plan),
        line_items=[checkout_line_item(plan, price_id)],
        success_url=success_url,
        cancel_url=cancel_url,
    )
    logger.info(f"Created Stripe checkout session {session.id} for plan {plan.id}")
    return session.id, session.url
