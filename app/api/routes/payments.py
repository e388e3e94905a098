"""
Payment confirmation endpoint hit when the user returns from checkout.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.config import Settings, get_settings
from app.schemas.billing import PaymentConfirmationResponse
from app.services.payment_confirmation import PaymentGateway, StripeGateway, reconcile_payment

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Payments"])


def get_payment_gateway(settings: Settings = Depends(get_settings)) -> Optional[PaymentGateway]:
    """Stripe gateway, or None when Stripe is not configured."""
    if not settings.stripe_enabled:
        return None
    return StripeGateway()


@router.get("/payment-success", response_model=PaymentConfirmationResponse)
def payment_success(
    payment_intent_client_secret: Optional[str] = Query(None),
    session_id: Optional[str] = Query(None),
    gateway: Optional[PaymentGateway] = Depends(get_payment_gateway),
):
    """
    Reconcile a checkout return.

    ``outcome`` is ``success`` when the payment succeeded, ``unknown`` when it
    was found in another state and ``error`` otherwise.
    """
    confirmation = reconcile_payment(payment_intent_client_secret, session_id, gateway)
    logger.info(f"Payment confirmation: outcome={confirmation.outcome.value}")
    return PaymentConfirmationResponse(
        outcome=confirmation.outcome.value,
        message=confirmation.message,
        payment=confirmation.payment,
    )
