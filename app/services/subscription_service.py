"""
Recruiter subscription lookups and Stripe-driven status updates.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.plans import DEFAULT_PLAN_ID
from app.db.models.subscription import Subscription
from app.db.models.user import User
from app.services.job_post_service import SubscriptionStatus

logger = logging.getLogger(__name__)


def get_subscription(db: Session, user_id: int) -> Optional[Subscription]:
    return db.query(Subscription).filter(Subscription.user_id == user_id).first()


def get_subscription_status(db: Session, user_id: int) -> SubscriptionStatus:
    """Plan id and status for a recruiter; no row means basico with no status."""
    return SubscriptionStatus.from_model(get_subscription(db, user_id))


def lock_subscription_status(db: Session, user_id: int) -> SubscriptionStatus:
    """
    Like get_subscription_status, but takes a row lock (SELECT ... FOR UPDATE)
    held until the caller commits or rolls back.

    Concurrent publishes by the same recruiter queue on this lock, so the job
    count read after it cannot go stale before the insert commits. A recruiter
    without a row is inactive and never reaches the insert.
    """
    sub = (
        db.query(Subscription)
        .filter(Subscription.user_id == user_id)
        .with_for_update()
        .first()
    )
    return SubscriptionStatus.from_model(sub)


def _get_or_create(db: Session, user_id: int) -> Subscription:
    sub = get_subscription(db, user_id)
    if not sub:
        sub = Subscription(user_id=user_id, plan_id=DEFAULT_PLAN_ID)
        db.add(sub)
    return sub


def activate_from_checkout(db: Session, session: dict) -> Optional[Subscription]:
    """
    Activate the recruiter behind a completed Stripe checkout session.

    The recruiter is found by ``metadata.user_id`` first, then by the
    customer email. Returns None when no recruiter matches.
    """
    metadata = session.get("metadata") or {}
    user = None
    if metadata.get("user_id"):
        try:
            user = db.query(User).filter(User.id == int(metadata["user_id"])).first()
        except (TypeError, ValueError):
            logger.warning(f"Ignoring malformed user_id in checkout metadata: {metadata.get('user_id')!r}")
    if user is None:
        email = session.get("customer_email") or (session.get("customer_details") or {}).get("email")
        if email:
            user = db.query(User).filter(User.email == email).first()
    if user is None:
        logger.warning(f"No recruiter found for checkout session {session.get('id')}")
        return None

    sub = _get_or_create(db, user.id)
    sub.plan_id = metadata.get("plan_id") or sub.plan_id or DEFAULT_PLAN_ID
    sub.status = "active"
    sub.stripe_customer_id = session.get("customer")
    sub.stripe_subscription_id = session.get("subscription")
    db.commit()

    logger.info(f"Subscription activated: user_id={user.id}, plan={sub.plan_id}")
    return sub


def sync_stripe_subscription(db: Session, stripe_subscription: dict) -> Optional[Subscription]:
    """Mirror a Stripe subscription's status onto the matching row."""
    sub = db.query(Subscription).filter(
        Subscription.stripe_subscription_id == stripe_subscription.get("id")
    ).first()
    if not sub:
        logger.warning(f"No local subscription for Stripe subscription {stripe_subscription.get('id')}")
        return None

    sub.status = stripe_subscription.get("status") or sub.status
    plan_id = (stripe_subscription.get("metadata") or {}).get("plan_id")
    if plan_id:
        sub.plan_id = plan_id
    db.commit()

    logger.info(f"Subscription synced: user_id={sub.user_id}, status={sub.status}")
    return sub
