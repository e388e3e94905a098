"""
Tests for checkout return reconciliation and the /payment-success page API.
"""
import pytest

from app.main import app
from app.api.routes.payments import get_payment_gateway
from app.core.config import Settings, get_settings
from app.services import payment_confirmation
from app.services.payment_confirmation import ConfirmationOutcome, reconcile_payment
from app.services.stripe_service import StripeServiceError, payment_intent_id_from_secret
from tests.fakes import FakeGateway


SUCCEEDED_INTENT = {"id": "pi_123", "status": "succeeded", "object": "payment_intent", "amount": 2900}


class TestReconcilePayment:

    def test_no_params_makes_no_gateway_call(self):
        gateway = FakeGateway()

        result = reconcile_payment(None, None, gateway)

        assert result.outcome == ConfirmationOutcome.ERROR
        assert result.message == payment_confirmation.MISSING_PARAMS_MESSAGE
        assert gateway.calls == []

    def test_empty_strings_count_as_missing(self):
        gateway = FakeGateway()

        result = reconcile_payment("", "", gateway)

        assert result.outcome == ConfirmationOutcome.ERROR
        assert gateway.calls == []

    def test_missing_gateway(self):
        result = reconcile_payment("pi_123_secret_abc", None, None)

        assert result.outcome == ConfirmationOutcome.ERROR
        assert result.message == payment_confirmation.NOT_CONFIGURED_MESSAGE

    def test_client_secret_succeeded(self):
        gateway = FakeGateway(payment_intents={"pi_123_secret_abc": SUCCEEDED_INTENT})

        result = reconcile_payment("pi_123_secret_abc", None, gateway)

        assert result.outcome == ConfirmationOutcome.SUCCESS
        assert result.payment == {"status": "succeeded", "id": "pi_123", "type": "payment_intent"}
        assert result.message is None

    def test_client_secret_wins_over_session(self):
        gateway = FakeGateway(payment_intents={"pi_123_secret_abc": SUCCEEDED_INTENT})

        reconcile_payment("pi_123_secret_abc", "cs_456", gateway)

        assert gateway.calls == [("payment_intent", "pi_123_secret_abc")]

    def test_client_secret_processing_is_unknown(self):
        intent = {"id": "pi_123", "status": "processing", "object": "payment_intent"}
        gateway = FakeGateway(payment_intents={"pi_123_secret_abc": intent})

        result = reconcile_payment("pi_123_secret_abc", None, gateway)

        assert result.outcome == ConfirmationOutcome.UNKNOWN
        assert result.message == payment_confirmation.UNKNOWN_STATUS_MESSAGE
        assert result.payment["status"] == "processing"

    def test_client_secret_not_found(self):
        result = reconcile_payment("pi_missing_secret_x", None, FakeGateway())

        assert result.outcome == ConfirmationOutcome.ERROR
        assert result.message == payment_confirmation.INTENT_NOT_FOUND_MESSAGE

    def test_paid_session_resolves_payment_intent(self):
        gateway = FakeGateway(
            sessions={"cs_1": {"id": "cs_1", "payment_status": "paid", "payment_intent": "pi_123", "mode": "payment"}},
            payment_intents={"pi_123": SUCCEEDED_INTENT},
        )

        result = reconcile_payment(None, "cs_1", gateway)

        assert result.outcome == ConfirmationOutcome.SUCCESS
        assert gateway.calls == [("checkout_session", "cs_1"), ("payment_intent", "pi_123")]

    def test_paid_session_with_expanded_intent(self):
        gateway = FakeGateway(
            sessions={"cs_1": {"payment_status": "paid", "payment_intent": {"id": "pi_123"}}},
            payment_intents={"pi_123": SUCCEEDED_INTENT},
        )

        result = reconcile_payment(None, "cs_1", gateway)

        assert result.outcome == ConfirmationOutcome.SUCCESS

    @pytest.mark.parametrize("status", ["active", "trialing"])
    def test_subscription_session_with_live_subscription(self, status):
        gateway = FakeGateway(
            sessions={"cs_1": {"mode": "subscription", "subscription": "sub_9", "payment_status": "unpaid"}},
            subscriptions={"sub_9": {"id": "sub_9", "status": status}},
        )

        result = reconcile_payment(None, "cs_1", gateway)

        assert result.outcome == ConfirmationOutcome.SUCCESS
        assert result.payment == {"status": "succeeded", "id": "sub_9", "type": "subscription"}

    def test_subscription_session_with_canceled_subscription(self):
        gateway = FakeGateway(
            sessions={"cs_1": {"mode": "subscription", "subscription": "sub_9"}},
            subscriptions={"sub_9": {"id": "sub_9", "status": "canceled"}},
        )

        result = reconcile_payment(None, "cs_1", gateway)

        assert result.outcome == ConfirmationOutcome.ERROR
        assert result.message == payment_confirmation.NO_ACTIVE_SUBSCRIPTION_MESSAGE

    def test_session_not_found(self):
        result = reconcile_payment(None, "cs_missing", FakeGateway())

        assert result.outcome == ConfirmationOutcome.ERROR
        assert result.message == payment_confirmation.SESSION_NOT_FOUND_MESSAGE

    def test_session_without_intent_or_subscription(self):
        gateway = FakeGateway(sessions={"cs_1": {"mode": "payment", "payment_status": "unpaid"}})

        result = reconcile_payment(None, "cs_1", gateway)

        assert result.outcome == ConfirmationOutcome.ERROR
        assert result.message == payment_confirmation.NOTHING_FOUND_MESSAGE

    def test_gateway_error_message_is_surfaced(self):
        gateway = FakeGateway(error=StripeServiceError("No such checkout session"))

        result = reconcile_payment(None, "cs_1", gateway)

        assert result.outcome == ConfirmationOutcome.ERROR
        assert result.message == "No such checkout session"

    def test_gateway_error_without_message_uses_generic(self):
        gateway = FakeGateway(error=RuntimeError())

        result = reconcile_payment("pi_1_secret_x", None, gateway)

        assert result.message == payment_confirmation.GENERIC_ERROR_MESSAGE


def test_payment_intent_id_from_secret():
    assert payment_intent_id_from_secret("pi_123_secret_abc") == "pi_123"
    assert payment_intent_id_from_secret("pi_123") == "pi_123"


class TestPaymentSuccessEndpoint:

    def test_success(self, client):
        gateway = FakeGateway(payment_intents={"pi_123_secret_abc": SUCCEEDED_INTENT})
        app.dependency_overrides[get_payment_gateway] = lambda: gateway

        response = client.get("/payment-success", params={"payment_intent_client_secret": "pi_123_secret_abc"})

        assert response.status_code == 200
        assert response.json() == {
            "outcome": "success",
            "message": None,
            "payment": {"status": "succeeded", "id": "pi_123", "type": "payment_intent"},
        }

    def test_no_params(self, client):
        gateway = FakeGateway()
        app.dependency_overrides[get_payment_gateway] = lambda: gateway

        response = client.get("/payment-success")

        assert response.status_code == 200
        assert response.json()["outcome"] == "error"
        assert gateway.calls == []

    def test_subscription_checkout(self, client):
        gateway = FakeGateway(
            sessions={"cs_1": {"mode": "subscription", "subscription": "sub_9"}},
            subscriptions={"sub_9": {"id": "sub_9", "status": "trialing"}},
        )
        app.dependency_overrides[get_payment_gateway] = lambda: gateway

        response = client.get("/payment-success", params={"session_id": "cs_1"})

        assert response.json()["outcome"] == "success"
        assert response.json()["payment"]["type"] == "subscription"

    def test_stripe_not_configured(self, client):
        app.dependency_overrides[get_settings] = lambda: Settings(stripe_secret_key=None)

        response = client.get("/payment-success", params={"session_id": "cs_1"})

        assert response.json()["outcome"] == "error"
        assert response.json()["message"] == payment_confirmation.NOT_CONFIGURED_MESSAGE


class TestStripeLookups:

    def test_checkout_session_requires_id(self, client):
        response = client.get("/api/stripe/retrieve-checkout-session")

        assert response.status_code == 400
        assert response.json() == {"error": "sessionId is required"}

    def test_subscription_requires_id(self, client):
        response = client.get("/api/stripe/retrieve-subscription")

        assert response.status_code == 400
        assert response.json() == {"error": "subscriptionId is required"}

    def test_checkout_session_found(self, client, monkeypatch):
        monkeypatch.setattr(
            "app.api.routes.stripe_proxy.stripe_retrieve_checkout_session",
            lambda session_id: {"id": session_id, "mode": "subscription"},
        )

        response = client.get("/api/stripe/retrieve-checkout-session", params={"sessionId": "cs_1"})

        assert response.status_code == 200
        assert response.json() == {"session": {"id": "cs_1", "mode": "subscription"}}

    def test_subscription_lookup_failure(self, client, monkeypatch):
        def fail(subscription_id):
            raise StripeServiceError("No such subscription: 'sub_x'")

        monkeypatch.setattr("app.api.routes.stripe_proxy.stripe_retrieve_subscription", fail)

        response = client.get("/api/stripe/retrieve-subscription", params={"subscriptionId": "sub_x"})

        assert response.status_code == 500
        assert response.json() == {"error": "No such subscription: 'sub_x'"}
