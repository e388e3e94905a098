"""
Stripe lookups used to confirm payments, plus webhook verification.
"""
import logging
from typing import Any, Dict, Optional

import stripe

from app.core.config import STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET

logger = logging.getLogger(__name__)

if STRIPE_SECRET_KEY:
    stripe.api_key = STRIPE_SECRET_KEY
else:
    logger.warning("STRIPE_SECRET_KEY not configured - Stripe features disabled")


class StripeServiceError(Exception):
    """Raised when a Stripe call fails or Stripe is not configured."""


def _require_key() -> None:
    if not stripe.api_key:
        raise StripeServiceError("Stripe not configured - STRIPE_SECRET_KEY required")


def _to_dict(obj: Any) -> Dict[str, Any]:
    if hasattr(obj, "to_dict_recursive"):
        return obj.to_dict_recursive()
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return dict(obj)


def payment_intent_id_from_secret(client_secret: str) -> str:
    """``pi_123_secret_abc`` -> ``pi_123``. Plain intent ids pass through."""
    return client_secret.split("_secret_")[0]


def retrieve_payment_intent(client_secret_or_id: str) -> Dict[str, Any]:
    _require_key()
    intent_id = payment_intent_id_from_secret(client_secret_or_id)
    try:
        intent = stripe.PaymentIntent.retrieve(intent_id)
    except stripe.StripeError as e:
        logger.error(f"Stripe error retrieving payment intent {intent_id}: {e}")
        raise StripeServiceError(getattr(e, "user_message", None) or str(e)) from e
    return _to_dict(intent)


def retrieve_checkout_session(session_id: str) -> Dict[str, Any]:
    _require_key()
    try:
        session = stripe.checkout.Session.retrieve(session_id)
    except stripe.StripeError as e:
        logger.error(f"Stripe error retrieving checkout session {session_id}: {e}")
        raise StripeServiceError(getattr(e, "user_message", None) or str(e)) from e
    return _to_dict(session)


def retrieve_subscription(subscription_id: str) -> Dict[str, Any]:
    _require_key()
    try:
        subscription = stripe.Subscription.retrieve(subscription_id)
    except stripe.StripeError as e:
        logger.error(f"Stripe error retrieving subscription {subscription_id}: {e}")
        raise StripeServiceError(getattr(e, "user_message", None) or str(e)) from e
    return _to_dict(subscription)


def verify_webhook(request_body: bytes, signature: Optional[str]) -> Dict[str, Any]:
    """
    Verify and parse Stripe webhook event.

    Raises:
        ValueError: If webhook verification fails
    """
    if not STRIPE_WEBHOOK_SECRET:
        raise ValueError("STRIPE_WEBHOOK_SECRET not configured")

    try:
        event = stripe.Webhook.construct_event(
            request_body, signature, STRIPE_WEBHOOK_SECRET
        )
    except ValueError as e:
        logger.error(f"Invalid webhook payload: {e}")
        raise ValueError(f"Invalid webhook payload: {e}")
    except stripe.SignatureVerificationError as e:
        logger.error(f"Webhook signature verification failed: {e}")
        raise ValueError(f"Invalid signature: {e}")

    logger.info(f"Verified webhook event: {event['type']}, id={event['id']}")
    return event
