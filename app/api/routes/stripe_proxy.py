"""
Thin Stripe lookups for the payment-success page.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from app.services.stripe_service import (
    StripeServiceError,
    retrieve_checkout_session as stripe_retrieve_checkout_session,
    retrieve_subscription as stripe_retrieve_subscription,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stripe", tags=["Stripe"])


@router.get("/retrieve-checkout-session")
def retrieve_checkout_session(session_id: Optional[str] = Query(None, alias="sessionId")):
    if not session_id:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "sessionId is required"})
    try:
        session = stripe_retrieve_checkout_session(session_id)
    except StripeServiceError as e:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(e)})
    return {"session": session}


@router.get("/retrieve-subscription")
def retrieve_subscription(subscription_id: Optional[str] = Query(None, alias="subscriptionId")):
    if not subscription_id:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "subscriptionId is required"})
    try:
        subscription = stripe_retrieve_subscription(subscription_id)
    except StripeServiceError as e:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(e)})
    return {"subscription": subscription}
