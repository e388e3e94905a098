"""
Job posting rules.

Validation and plan quota checks for publishing or updating a position, plus
the SQLAlchemy-backed repository that stores the posts.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Union

from sqlalchemy.orm import Session

from app.core.plans import DEFAULT_PLAN_ID, PlanCatalog, describe_job_limit
from app.db.models.job_post import JobPost
from app.db.models.subscription import ACTIVE_STATUSES

logger = logging.getLogger(__name__)


class JobPostError(Exception):
    """Base error for job post saves. ``title`` is the short notification heading."""
    title = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class JobPostValidationError(JobPostError):
    title = "Error"


class SubscriptionInactiveError(JobPostError):
    title = "Subscription not active"


class JobLimitReachedError(JobPostError):
    title = "Job limit reached"

    def __init__(self, message: str, limit: Optional[int], plan_id: str):
        super().__init__(message)
        self.limit = limit
        self.plan_id = plan_id


class JobPostNotFoundError(JobPostError):
    title = "Not found"


@dataclass(frozen=True)
class Creating:
    """Form is publishing a new position."""


@dataclass(frozen=True)
class Editing:
    """Form is updating an existing position."""
    job_id: int


FormMode = Union[Creating, Editing]


@dataclass(frozen=True)
class JobDraft:
    title: str = ""
    description: str = ""
    ai_generated_description: str = ""

    @property
    def resolved_description(self) -> str:
        """Manual description when present, otherwise the AI draft."""
        return self.description or self.ai_generated_description

    def is_empty(self) -> bool:
        return not (self.title or self.description or self.ai_generated_description)


@dataclass(frozen=True)
class SubscriptionStatus:
    plan_id: str = DEFAULT_PLAN_ID
    status: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @classmethod
    def from_model(cls, subscription) -> "SubscriptionStatus":
        """Build from a Subscription row; a missing row means basico with no status."""
        if subscription is None:
            return cls()
        return cls(plan_id=subscription.plan_id or DEFAULT_PLAN_ID, status=subscription.status)


class JobPostRepository(Protocol):
    def create_job_post(self, data: Dict[str, Any]) -> Any:
        ...

    def update_job_post(self, job_id: int, data: Dict[str, Any]) -> Any:
        ...


def validate_draft(draft: JobDraft) -> None:
    """
    Raises:
        JobPostValidationError: If the title is empty or both descriptions are empty
    """
    if not draft.title or not draft.resolved_description:
        raise JobPostValidationError("The job title and a description (manual or AI) are required.")


def check_can_create(subscription: SubscriptionStatus, current_jobs_count: int, plans: PlanCatalog) -> None:
    """
    Enforce the subscription and quota gates for a new position.

    Raises:
        SubscriptionInactiveError: If the subscription is not active or trialing
        JobLimitReachedError: If the plan's active job quota is used up
    """
    if not subscription.is_active:
        raise SubscriptionInactiveError("Your subscription is not active. Please review your plan.")

    limit = plans.job_limit(subscription.plan_id)
    if limit is not None and current_jobs_count >= limit:
        plan_name = plans.display_name(subscription.plan_id)
        raise JobLimitReachedError(
            f'You have reached the limit of {describe_job_limit(limit)} for your plan "{plan_name}". '
            "Consider upgrading your plan to create more.",
            limit=limit,
            plan_id=subscription.plan_id,
        )


def build_job_data(recruiter_id: int, draft: JobDraft) -> Dict[str, Any]:
    return {
        "recruiter_id": recruiter_id,
        "title": draft.title,
        "description": draft.resolved_description,
        "ai_generated_description": draft.ai_generated_description,
    }


def save_job_post(
    mode: FormMode,
    draft: JobDraft,
    recruiter_id: int,
    subscription: SubscriptionStatus,
    current_jobs_count: int,
    repository: JobPostRepository,
    plans: PlanCatalog,
):
    """
    Validate and persist a job post.

    Creating checks subscription and quota; Editing skips both so updates never
    count against the creation limit. Exactly one repository call is made, and
    none when a check fails.
    """
    validate_draft(draft)

    if isinstance(mode, Creating):
        check_can_create(subscription, current_jobs_count, plans)

    data = build_job_data(recruiter_id, draft)

    if isinstance(mode, Editing):
        logger.info(f"Updating job post: job_id={mode.job_id}, recruiter_id={recruiter_id}")
        return repository.update_job_post(mode.job_id, data)

    logger.info(f"Creating job post: recruiter_id={recruiter_id}, plan={subscription.plan_id}")
    return repository.create_job_post(data)


class SqlJobPostRepository:
    """Job post persistence scoped to one recruiter."""

    def __init__(self, db: Session, recruiter_id: int):
        self.db = db
        self.recruiter_id = recruiter_id

    def _owned(self):
        return self.db.query(JobPost).filter(JobPost.recruiter_id == self.recruiter_id)

    def get(self, job_id: int) -> Optional[JobPost]:
        return self._owned().filter(JobPost.id == job_id).first()

    def list(self) -> List[JobPost]:
        return self._owned().order_by(JobPost.created_at.desc(), JobPost.id.desc()).all()

    def count(self) -> int:
        return self._owned().count()

    def create_job_post(self, data: Dict[str, Any]) -> JobPost:
        job = JobPost(**data)
        self.db.add(job)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(job)
        logger.info(f"Job post created: job_id={job.id}, recruiter_id={job.recruiter_id}")
        return job

    def update_job_post(self, job_id: int, data: Dict[str, Any]) -> JobPost:
        job = self.get(job_id)
        if job is None:
            raise JobPostNotFoundError("Job post not found")

        for field in ("title", "description", "ai_generated_description"):
            setattr(job, field, data[field])
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(job)
        logger.info(f"Job post updated: job_id={job.id}, recruiter_id={job.recruiter_id}")
        return job

    def delete(self, job_id: int) -> None:
        job = self.get(job_id)
        if job is None:
            raise JobPostNotFoundError("Job post not found")
        self.db.delete(job)
        self.db.commit()
        logger.info(f"Job post deleted: job_id={job_id}, recruiter_id={self.recruiter_id}")
