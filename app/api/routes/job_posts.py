"""
Job post endpoints for the recruiter dashboard.

Publishing is gated by subscription status and plan quota; updates are not.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.db.models.user import User
from app.core.auth_dependency import get_current_user_obj
from app.core.plans import PlanCatalog, get_plan_catalog
from app.llm.openai_provider import get_llm_provider
from app.services.job_description_service import draft_job_description
from app.services.job_post_service import (
    Creating,
    Editing,
    JobLimitReachedError,
    JobPostNotFoundError,
    JobPostValidationError,
    SqlJobPostRepository,
    SubscriptionInactiveError,
    save_job_post,
)
from app.services.subscription_service import get_subscription_status, lock_subscription_status
from app.schemas.job_post import (
    AIDescriptionRequest,
    AIDescriptionResponse,
    JobPostCreate,
    JobPostListResponse,
    JobPostResponse,
    JobPostUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/job-posts", tags=["Job Posts"])


def _raise_for_save_error(e: Exception):
    if isinstance(e, JobPostValidationError):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)
    if isinstance(e, SubscriptionInactiveError):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"detail": e.message, "code": "SUBSCRIPTION_INACTIVE"},
        )
    if isinstance(e, JobLimitReachedError):
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail={
                "detail": e.message,
                "code": "PAYWALL",
                "plan": e.plan_id,
                "limit": e.limit,
            },
        )
    if isinstance(e, JobPostNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    raise e


@router.post("", status_code=status.HTTP_201_CREATED, response_model=JobPostResponse)
def create_job_post(
    payload: JobPostCreate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
    plans: PlanCatalog = Depends(get_plan_catalog),
):
    """Publish a new position. 403 if the subscription is inactive, 402 if the plan quota is used up."""
    repository = SqlJobPostRepository(db, user.id)
    # Held until the repository commits the insert or the rollback below.
    subscription = lock_subscription_status(db, user.id)
    try:
        job = save_job_post(
            Creating(),
            payload.to_draft(),
            user.id,
            subscription,
            repository.count(),
            repository,
            plans,
        )
    except (JobPostValidationError, SubscriptionInactiveError, JobLimitReachedError) as e:
        db.rollback()
        logger.warning(f"Job post rejected: user_id={user.id}, reason={e.message}")
        _raise_for_save_error(e)
    return JobPostResponse.model_validate(job)


@router.put("/{job_id}", response_model=JobPostResponse)
def update_job_post(
    job_id: int,
    payload: JobPostUpdate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
    plans: PlanCatalog = Depends(get_plan_catalog),
):
    """Update a position. Never counts against the plan quota."""
    repository = SqlJobPostRepository(db, user.id)
    try:
        job = save_job_post(
            Editing(job_id=job_id),
            payload.to_draft(),
            user.id,
            get_subscription_status(db, user.id),
            repository.count(),
            repository,
            plans,
        )
    except (JobPostValidationError, JobPostNotFoundError) as e:
        _raise_for_save_error(e)
    return JobPostResponse.model_validate(job)


@router.get("", response_model=JobPostListResponse)
def list_job_posts(
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
    plans: PlanCatalog = Depends(get_plan_catalog),
):
    repository = SqlJobPostRepository(db, user.id)
    jobs = repository.list()
    subscription = get_subscription_status(db, user.id)
    return JobPostListResponse(
        job_posts=[JobPostResponse.model_validate(job) for job in jobs],
        total=len(jobs),
        job_limit=plans.job_limit(subscription.plan_id),
    )


@router.post("/ai-description", response_model=AIDescriptionResponse)
def generate_ai_description(
    payload: AIDescriptionRequest,
    user: User = Depends(get_current_user_obj),
):
    """Draft a description the recruiter can merge into the form."""
    text = draft_job_description(
        payload.title,
        notes=payload.notes,
        current_description=payload.current_description,
        provider=get_llm_provider(),
    )
    logger.info(f"AI description generated: user_id={user.id}")
    return AIDescriptionResponse(ai_generated_description=text)


@router.get("/{job_id}", response_model=JobPostResponse)
def get_job_post(
    job_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
):
    job = SqlJobPostRepository(db, user.id).get(job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job post not found")
    return JobPostResponse.model_validate(job)


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_job_post(
    job_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
):
    try:
        SqlJobPostRepository(db, user.id).delete(job_id)
    except JobPostNotFoundError as e:
        _raise_for_save_error(e)
