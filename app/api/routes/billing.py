import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user_obj
from app.core.plans import PlanCatalog, get_plan_catalog
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.billing import SubscriptionSummary
from app.services.job_post_service import SqlJobPostRepository
from app.services.stripe_service import verify_webhook
from app.services.subscription_service import (
    activate_from_checkout,
    get_subscription_status,
    sync_stripe_subscription,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/billing", tags=["Billing"])


@router.get("/subscription", response_model=SubscriptionSummary)
def my_subscription(
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
    plans: PlanCatalog = Depends(get_plan_catalog),
):
    """The caller's plan, status and job quota usage."""
    subscription = get_subscription_status(db, user.id)
    return SubscriptionSummary(
        plan_id=subscription.plan_id,
        plan_name=plans.display_name(subscription.plan_id),
        status=subscription.status,
        is_active=subscription.is_active,
        job_limit=plans.job_limit(subscription.plan_id),
        current_jobs_count=SqlJobPostRepository(db, user.id).count(),
    )


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(None),
    db: Session = Depends(get_db),
):
    payload = await request.body()

    try:
        event = verify_webhook(payload, stripe_signature)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    event_type = event["type"]
    obj = event["data"]["object"]

    if event_type == "checkout.session.completed":
        activate_from_checkout(db, obj)
    elif event_type in ("customer.subscription.updated", "customer.subscription.deleted"):
        sync_stripe_subscription(db, obj)
    else:
        logger.debug(f"Ignoring Stripe event {event_type}")

    return {"status": "success"}
