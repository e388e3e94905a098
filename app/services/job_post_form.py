"""
Stateful create/edit panel for job posts.

Holds the draft being typed, the Creating/Editing mode, and reports every
outcome through a notification callback. Frontends drive it; the HTTP routes
use ``save_job_post`` directly.
"""
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from app.core.plans import PlanCatalog
from app.services.job_post_service import (
    Creating,
    Editing,
    FormMode,
    JobDraft,
    JobLimitReachedError,
    JobPostRepository,
    JobPostValidationError,
    SubscriptionInactiveError,
    SubscriptionStatus,
    save_job_post,
)

logger = logging.getLogger(__name__)

DRAFT_FIELDS = ("title", "description", "ai_generated_description")


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = "default"  # default | destructive


class JobPostForm:
    def __init__(
        self,
        recruiter_id: Optional[int],
        subscription: SubscriptionStatus,
        current_jobs_count: int,
        repository: JobPostRepository,
        plans: PlanCatalog,
        notify: Callable[[Notification], None],
        on_saved: Optional[Callable[[Any], None]] = None,
        clear_editing: Optional[Callable[[], None]] = None,
    ):
        self.recruiter_id = recruiter_id
        self.subscription = subscription
        self.current_jobs_count = current_jobs_count
        self.repository = repository
        self.plans = plans
        self.notify = notify
        self.on_saved = on_saved
        self.clear_editing = clear_editing

        self.mode: FormMode = Creating()
        self.draft = JobDraft()
        self.is_processing = False

    @property
    def is_editing(self) -> bool:
        return isinstance(self.mode, Editing)

    def set_editing_job(self, job) -> None:
        """Pre-fill from ``job`` and switch to Editing, or reset to Creating when None."""
        if job is None:
            self.reset()
            return
        self.draft = JobDraft(
            title=job.title or "",
            description=job.description or "",
            ai_generated_description=job.ai_generated_description or "",
        )
        self.mode = Editing(job_id=job.id)

    def reset(self) -> None:
        self.draft = JobDraft()
        self.mode = Creating()

    def update_field(self, name: str, value: str) -> None:
        if name not in DRAFT_FIELDS:
            raise ValueError(f"Unknown job post field: {name}")
        self.draft = replace(self.draft, **{name: value})

    def apply_ai_description(self, text: str) -> None:
        """Store an AI draft without touching the manual description."""
        self.update_field("ai_generated_description", text)

    # Derived panel flags

    @property
    def job_limit(self) -> Optional[int]:
        return self.plans.job_limit(self.subscription.plan_id)

    @property
    def _under_limit(self) -> bool:
        limit = self.job_limit
        return limit is None or self.current_jobs_count < limit

    @property
    def can_create_new_job(self) -> bool:
        return not self.is_editing and self.subscription.is_active and self._under_limit

    @property
    def limit_reached_for_new(self) -> bool:
        return not self.is_editing and self.subscription.is_active and not self._under_limit

    @property
    def subscription_blocks_creation(self) -> bool:
        return not self.is_editing and not self.subscription.is_active

    @property
    def form_disabled(self) -> bool:
        if self.is_editing:
            return self.is_processing
        return not self.can_create_new_job or self.is_processing

    def save(self):
        """
        Save the draft and return the stored job, or None when nothing was saved.

        Failures are reported through ``notify``. On repository errors the
        draft and mode are kept so the user can retry.
        """
        if self.is_processing:
            return None

        if not self.recruiter_id:
            self.notify(Notification("Error", "User not authenticated.", "destructive"))
            return None

        self.is_processing = True
        try:
            saved = save_job_post(
                self.mode,
                self.draft,
                self.recruiter_id,
                self.subscription,
                self.current_jobs_count,
                self.repository,
                self.plans,
            )
        except (JobPostValidationError, SubscriptionInactiveError, JobLimitReachedError) as e:
            self.notify(Notification(e.title, e.message, "destructive"))
            return None
        except Exception as e:
            logger.error(f"Failed to save job post: {e}", exc_info=True)
            self.notify(Notification(
                "Error saving position",
                f"Could not save the position: {e}",
                "destructive",
            ))
            return None
        finally:
            self.is_processing = False

        if self.is_editing:
            self.notify(Notification("Position updated", "The position has been updated."))
        else:
            self.current_jobs_count += 1
            self.notify(Notification("Position published", "A new position has been created."))

        if self.on_saved:
            self.on_saved(saved)

        self.reset()
        if self.clear_editing:
            self.clear_editing()
        return saved
