"""
Payment confirmation after a checkout redirect.

The return URL carries either a payment intent client secret or a checkout
session id. Either one is resolved against the billing provider and reduced
to a single outcome the payment-success page can render.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Protocol

from app.db.models.subscription import ACTIVE_STATUSES
from app.services import stripe_service

logger = logging.getLogger(__name__)

MISSING_PARAMS_MESSAGE = "No payment client secret or checkout session id was provided."
NOT_CONFIGURED_MESSAGE = "Payment configuration is not available. Please contact support."
SESSION_NOT_FOUND_MESSAGE = "Could not find a valid checkout session."
NO_ACTIVE_SUBSCRIPTION_MESSAGE = "Could not find an active subscription for the checkout session."
NOTHING_FOUND_MESSAGE = "Could not find a payment intent or subscription for the checkout session."
INTENT_NOT_FOUND_MESSAGE = "Could not retrieve the payment intent."
GENERIC_ERROR_MESSAGE = "An error occurred while verifying your payment."
UNKNOWN_STATUS_MESSAGE = "We could not confirm the status of your payment. Please check your dashboard or contact support."


class ConfirmationOutcome(str, Enum):
    LOADING = "loading"  # the page's state until reconcile_payment returns
    SUCCESS = "success"
    ERROR = "error"
    UNKNOWN = "unknown"


class PaymentReconciliationError(Exception):
    """A reconciliation branch ended without a payment to show."""


@dataclass
class PaymentConfirmation:
    outcome: ConfirmationOutcome = ConfirmationOutcome.LOADING
    message: Optional[str] = None
    payment: Optional[Dict[str, Any]] = None

    @classmethod
    def error(cls, message: str) -> "PaymentConfirmation":
        return cls(outcome=ConfirmationOutcome.ERROR, message=message)


class PaymentGateway(Protocol):
    def retrieve_payment_intent(self, client_secret_or_id: str) -> Optional[Dict[str, Any]]:
        ...

    def retrieve_checkout_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        ...

    def retrieve_subscription(self, subscription_id: str) -> Optional[Dict[str, Any]]:
        ...


class StripeGateway:
    """PaymentGateway backed by the Stripe API."""

    def retrieve_payment_intent(self, client_secret_or_id: str) -> Optional[Dict[str, Any]]:
        return stripe_service.retrieve_payment_intent(client_secret_or_id)

    def retrieve_checkout_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        return stripe_service.retrieve_checkout_session(session_id)

    def retrieve_subscription(self, subscription_id: str) -> Optional[Dict[str, Any]]:
        return stripe_service.retrieve_subscription(subscription_id)


def subscription_payment(subscription_id: str) -> Dict[str, Any]:
    """Stand-in payment record so subscription checkouts render like one-time payments."""
    return {"status": "succeeded", "id": subscription_id, "type": "subscription"}


def _snapshot(payment: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "status": payment.get("status"),
        "id": payment.get("id"),
        "type": payment.get("type") or payment.get("object"),
    }


def _resolve_session(session_id: str, gateway: PaymentGateway) -> Optional[Dict[str, Any]]:
    session = gateway.retrieve_checkout_session(session_id)
    if not session:
        raise PaymentReconciliationError(SESSION_NOT_FOUND_MESSAGE)

    if session.get("payment_status") == "paid" and session.get("payment_intent"):
        intent = session["payment_intent"]
        # Expanded sessions carry the whole intent object
        intent_id = intent.get("id") if isinstance(intent, dict) else intent
        return gateway.retrieve_payment_intent(intent_id)

    if session.get("mode") == "subscription" and session.get("subscription"):
        subscription_ref = session["subscription"]
        subscription_id = subscription_ref.get("id") if isinstance(subscription_ref, dict) else subscription_ref
        subscription = gateway.retrieve_subscription(subscription_id)
        if subscription and subscription.get("status") in ACTIVE_STATUSES:
            return subscription_payment(subscription_id)
        raise PaymentReconciliationError(NO_ACTIVE_SUBSCRIPTION_MESSAGE)

    raise PaymentReconciliationError(NOTHING_FOUND_MESSAGE)


def reconcile_payment(
    client_secret: Optional[str],
    session_id: Optional[str],
    gateway: Optional[PaymentGateway],
) -> PaymentConfirmation:
    """
    Resolve the checkout return parameters to a confirmation.

    The client secret wins when both are present. No gateway call is made when
    neither parameter is given. ``gateway`` is None when billing is not
    configured.
    """
    if not client_secret and not session_id:
        return PaymentConfirmation.error(MISSING_PARAMS_MESSAGE)

    if gateway is None:
        return PaymentConfirmation.error(NOT_CONFIGURED_MESSAGE)

    try:
        if client_secret:
            payment = gateway.retrieve_payment_intent(client_secret)
        else:
            payment = _resolve_session(session_id, gateway)
    except PaymentReconciliationError as e:
        logger.warning(f"Payment reconciliation failed: session_id={session_id}, reason={e}")
        return PaymentConfirmation.error(str(e))
    except Exception as e:
        logger.error(f"Payment verification failed: {e}", exc_info=True)
        return PaymentConfirmation.error(str(e) or GENERIC_ERROR_MESSAGE)

    if not payment:
        return PaymentConfirmation.error(INTENT_NOT_FOUND_MESSAGE)

    snapshot = _snapshot(payment)
    if snapshot["status"] == "succeeded":
        return PaymentConfirmation(outcome=ConfirmationOutcome.SUCCESS, payment=snapshot)

    logger.warning(f"Payment status is not succeeded: id={snapshot['id']}, status={snapshot['status']}")
    return PaymentConfirmation(outcome=ConfirmationOutcome.UNKNOWN, message=UNKNOWN_STATUS_MESSAGE, payment=snapshot)
