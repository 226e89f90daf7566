"""FastAPI endpoints for payments: start a charge, hear back from the gateway.

The webhook and the browser callback both end in ``ConfirmPayment``; either
may arrive first, and either may arrive more than once.

These routes reach the gateway over blocking HTTP, so the domain call always
runs on the threadpool rather than on the event loop.
"""

import json
import os
from urllib.parse import urlencode

import structlog
from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, RedirectResponse
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from marketplace.api.dependencies import principal_id
from marketplace.api.schemas import InitializePaymentRequest, InitializePaymentResponse, WebhookResponse
from marketplace.errors import NotFound, Unauthenticated
from marketplace.payments.confirmation import ConfirmPayment
from marketplace.payments.gateway import get_gateway
from marketplace.payments.initiation import InitializePayment

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])

CHARGE_SUCCESS = "charge.success"


@router.post("/initialize", status_code=201, response_model=InitializePaymentResponse)
def initialize_payment(
    body: InitializePaymentRequest, caller: str = Depends(principal_id)
) -> InitializePaymentResponse:
    command = InitializePayment(
        actor_id=caller,
        checkout_batch_id=body.checkout_batch_id,
        delivery_landmark=body.delivery_landmark,
        email=body.email,
        callback_url=body.callback_url,
    )
    result = current_domain.process(command, asynchronous=False)
    return InitializePaymentResponse(**result)


@router.post("/webhook", response_model=WebhookResponse)
async def payment_webhook(
    request: Request, x_paystack_signature: str | None = Header(default=None)
) -> WebhookResponse:
    payload = await request.body()
    if not x_paystack_signature or not get_gateway().verify_webhook_signature(payload, x_paystack_signature):
        logger.warning("Rejected webhook with an invalid signature", path=request.url.path)
        raise Unauthenticated("Invalid webhook signature")

    try:
        event = json.loads(payload or b"{}")
    except json.JSONDecodeError:
        raise ValidationError({"payload": ["Webhook body is not valid JSON"]}) from None

    if event.get("event") != CHARGE_SUCCESS:
        logger.info("Ignoring webhook event", event=event.get("event"))
        return WebhookResponse(outcome="ignored")

    reference = (event.get("data") or {}).get("reference")
    if not reference:
        raise ValidationError({"reference": ["Webhook carries no payment reference"]})

    try:
        result = await run_in_threadpool(
            current_domain.process, ConfirmPayment(reference=reference, source="webhook"), asynchronous=False
        )
    except NotFound:
        # Acknowledge so the gateway stops retrying a charge we never started
        logger.warning("Webhook for an unknown payment reference", reference=reference)
        return WebhookResponse(outcome="unknown_reference")

    return WebhookResponse(**result)


@router.get("/callback")
def payment_callback(reference: str = Query(..., min_length=1)):
    result = current_domain.process(ConfirmPayment(reference=reference, source="callback"), asynchronous=False)

    redirect_url = os.getenv("PAYMENT_REDIRECT_URL")
    if not redirect_url:
        return JSONResponse(
            {"success": True, "reference": reference, "outcome": result["outcome"], "ordersPaid": result["orders_paid"]}
        )

    separator = "&" if "?" in redirect_url else "?"
    query = urlencode({"reference": reference, "outcome": result["outcome"]})
    return RedirectResponse(f"{redirect_url}{separator}{query}", status_code=303)
