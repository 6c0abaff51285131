import fastapi
from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi.concurrency import run_in_threadpool

from bort.config import Settings
from bort.modules import database
from bort.modules import payments
from bort.schemas.billing import CashAppPaymentRequest
from bort.schemas.billing import CheckoutRequest
from bort.schemas.billing import CheckoutResponse
from bort.schemas.billing import Payment
from bort.schemas.billing import Plan
from bort.schemas.bots import OkResponse
from bort.services import billing
from bort import utils

async def list_plans_endpoint(
    db: database.Database = Depends(utils.get_database)
) -> list[Plan]:
    return billing.list_plans(db)

async def create_checkout_endpoint(
    request: CheckoutRequest,
    db: database.Database = Depends(utils.get_database),
    settings: Settings = Depends(utils.get_settings)
) -> CheckoutResponse:
    """
    Create a hosted Stripe Checkout session for a plan.

    Args:
        request: CheckoutRequest with plan id, optional Stripe price id and redirect urls
        db: Database connection
        settings: Application settings holding the Stripe secret key

    Returns:
        CheckoutResponse with the session id and hosted checkout url

    Raises:
        HTTPException: 503 if Stripe is not configured, 404 if the plan does not exist,
            500 if session creation fails
    """
    if not settings.stripe_secret_key:
        raise HTTPException(status_code=503, detail="Stripe not configured")

    try:
        plan = billing.require_plan(db, request.plan_id)
    except billing.PlanNotFoundError:
        raise HTTPException(status_code=404, detail="Plan not found")

    try:
        session_id, url = await run_in_threadpool(
            payments.create_checkout_session,
            settings.stripe_secret_key,
            plan,
            success_url=str(request.success_url),
            cancel_url=str(request.cancel_url),
            price_id=request.price_id
        )
        return CheckoutResponse(id=session_id, url=url)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

async def record_cashapp_endpoint(
    request: CashAppPaymentRequest,
    db: database.Database = Depends(utils.get_database)
) -> OkResponse:
    """
    Record a Cash App payment reference for manual review.

    Raises:
        HTTPException: 404 if the plan does not exist
    """
    try:
        billing.record_cashapp_payment(db, request.plan_id, request.tx_ref)
    except billing.PlanNotFoundError:
        raise HTTPException(status_code=404, detail="Plan not found")
    return OkResponse()

async def list_payments_endpoint(
    status: str | None = None,
    db: database.Database = Depends(utils.get_database)
) -> list[Payment]:
    """
    List recorded payments, oldest first, for manual review.

    Args:
        status: Only return payments with this status, e.g. "pending"
        db: Database connection
    """
    return [p for p in database.list_payments(db) if status is None or p.status == status]

def factory(app: fastapi.FastAPI) -> APIRouter:
    """
    Create and configure the billing API router.

    Args:
        app: FastAPI application instance

    Returns:
        Configured APIRouter with billing endpoints:
        - GET /billing/plans - List plans, seeding defaults on first use
        - POST /billing/checkout - Create a Stripe Checkout session
        - POST /billing/cashapp - Record a Cash App payment reference
        - GET /billing/payments - List recorded payments
    """
    router = APIRouter(prefix="/billing", tags=["billing"])

    router.add_api_route(
        "/plans",
        list_plans_endpoint,
        methods=["GET"],
        response_model=list[Plan]
    )

    router.add_api_route(
        "/checkout",
        create_checkout_endpoint,
        methods=["POST"],
        response_model=CheckoutResponse
    )

    router.add_api_route(
        "/cashapp",
        record_cashapp_endpoint,
        methods=["POST"],
        response_model=OkResponse
    )

    router.add_api_route(
        "/payments",
        list_payments_endpoint,
        methods=["GET"],
        response_model=list[Payment]
    )

    return router
