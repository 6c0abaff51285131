from datetime import datetime

import pydantic

class Plan(pydantic.BaseModel):
    id: str
    name: str
    price_cents: int
    interval: str
    stripe_price_id: str | None = None
    created_at: datetime | None = None

class Payment(pydantic.BaseModel):
    id: str
    user_id: str
    plan_id: str
    method: str
    amount_cents: int
    currency: str
    reference: str | None = None
    status: str
    created_at: datetime

class CheckoutRequest(pydantic.BaseModel):
    plan_id: str
    price_id: str | None = None
    success_url: pydantic.AnyHttpUrl
    cancel_url: pydantic.AnyHttpUrl

class CheckoutResponse(pydantic.BaseModel):
    id: str
    url: str | None = None

class CashAppPaymentRequest(pydantic.BaseModel):
    plan_id: str
    tx_ref: str = pydantic.Field(..., min_length=3, description="Cash App transaction reference")
