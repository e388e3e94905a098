"""
Pricing page model.

Turns the plan catalog into cards with the checkout action each one should
offer: contact sales for enterprise, the Paddle checkout once the widget is
ready, or a loading placeholder until then.
"""
from typing import List, Optional

from app.core.config import Settings
from app.core.plans import Plan, PlanCatalog
from app.schemas.billing import (
    CheckoutAction,
    ContactSalesAction,
    KeyFeatureRow,
    LoadingAction,
    PaddleCheckoutAction,
    PaddleWidgetConfig,
    PlanCard,
    PricingResponse,
)

CONTACT_SALES_LABEL = "Contact sales"
CHOOSE_LABEL = "Choose"


def checkout_action(plan: Plan, paddle_ready: bool, settings: Settings, user=None) -> CheckoutAction:
    if plan.type == "enterprise":
        return ContactSalesAction(label=plan.cta_label or CONTACT_SALES_LABEL)
    if not paddle_ready:
        return LoadingAction()
    return PaddleCheckoutAction(
        price_id=plan.paddle_price_id,
        email=getattr(user, "email", None),
        recruiter_id=getattr(user, "id", None),
        label=plan.cta_label or CHOOSE_LABEL,
        success_url=settings.checkout_success_url,
        cancel_url=settings.checkout_cancel_url,
    )


def build_pricing_cards(plans: PlanCatalog, paddle_ready: bool, settings: Settings, user=None) -> List[PlanCard]:
    return [
        PlanCard(
            id=plan.id,
            name=plan.name,
            description=plan.description,
            price_display=plan.price_display,
            job_limit=plan.job_limit,
            features=list(plan.features),
            is_recommended=plan.is_recommended,
            action=checkout_action(plan, paddle_ready, settings, user),
        )
        for plan in plans.all()
    ]


def build_pricing_page(plans: PlanCatalog, settings: Settings, user: Optional[object] = None) -> PricingResponse:
    return PricingResponse(
        plans=build_pricing_cards(plans, settings.paddle_ready, settings, user),
        key_features=[KeyFeatureRow(label=row.label, values=list(row.values)) for row in plans.key_features],
        paddle=PaddleWidgetConfig(
            ready=settings.paddle_ready,
            environment=settings.paddle_environment,
            client_token=settings.paddle_client_token,
        ),
    )
