"""
Subscription plan catalog.

Single source of truth for the plan tiers shown on the pricing page and for the
active job posting quota of each plan. ``job_limit = None`` means unlimited.
"""
from collections import OrderedDict
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PLAN_ID = "basico"


class Plan(BaseModel):
    """A single subscription tier. Instances are read-only."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    price_display: str
    job_limit: Optional[int] = Field(None, ge=0, description="Active job posting quota, None for unlimited")
    features: List[str] = Field(default_factory=list)
    is_recommended: bool = False
    type: str = Field("standard", pattern="^(standard|enterprise)$")
    paddle_price_id: Optional[str] = None
    cta_label: Optional[str] = None


class KeyFeature(BaseModel):
    """One row of the plan comparison table, one value per plan in display order."""
    model_config = ConfigDict(frozen=True)

    label: str
    values: List[str]


APP_PLANS: "OrderedDict[str, Plan]" = OrderedDict(
    (plan.id, plan) for plan in [
        Plan(
            id="basico",
            name="Básico",
            description="For small teams publishing their first position.",
            price_display="$29/mes",
            job_limit=1,
            features=[
                "1 active position",
                "75 CV analyses",
                "75 AI matches",
                "Standard email support",
            ],
            paddle_price_id="pri_basico_monthly",
        ),
        Plan(
            id="profesional",
            name="Profesional",
            description="For recruiters hiring on a steady pace.",
            price_display="$79/mes",
            job_limit=3,
            features=[
                "3 active positions",
                "100 CV analyses per month",
                "100 AI matches",
                "Standard email support",
            ],
            paddle_price_id="pri_profesional_monthly",
        ),
        Plan(
            id="empresarial",
            name="Empresarial",
            description="For companies with several open searches at once.",
            price_display="$249/mes",
            job_limit=25,
            features=[
                "25 active positions",
                "1,000 CV analyses per month",
                "AI pre-selection with ranking",
                "Interview chatbot",
                "Priority support",
            ],
            is_recommended=True,
            paddle_price_id="pri_empresarial_monthly",
        ),
        Plan(
            id="enterprise",
            name="Enterprise",
            description="Custom volume, criteria and onboarding.",
            price_display="A medida",
            job_limit=None,
            features=[
                "Unlimited positions",
                "Unlimited CV analyses",
                "Ranking with custom criteria",
                "Dedicated 24/7 support",
            ],
            type="enterprise",
            cta_label="Contact sales",
        ),
    ]
)

KEY_FEATURES: List[KeyFeature] = [
    KeyFeature(label="Active positions", values=["1", "3", "25", "Unlimited"]),
    KeyFeature(label="CV analyses", values=["75", "100/month", "1,000/month", "Unlimited"]),
    KeyFeature(label="AI matching", values=["75", "100", "1,000", "Unlimited"]),
    KeyFeature(label="AI pre-selection", values=["Manual", "Manual", "Advanced with ranking", "Ranking and custom criteria"]),
    KeyFeature(label="Interview chatbot", values=["no", "no", "yes", "yes"]),
    KeyFeature(label="Support", values=["Standard email", "Standard email", "Priority", "Dedicated 24/7"]),
    KeyFeature(label="Customization", values=["no", "no", "Optional", "Included"]),
    KeyFeature(label="Metrics access", values=["no", "no", "Advanced", "Consulting and analysis"]),
]


class PlanCatalog:
    """
    Read-only view over a plan table.

    Passed explicitly to the services that need plan data so tests can
    swap in their own tiers.
    """

    def __init__(self, plans: Dict[str, Plan], key_features: Optional[List[KeyFeature]] = None):
        self._plans = OrderedDict(plans)
        self._key_features = list(key_features or [])

    def get(self, plan_id: Optional[str]) -> Optional[Plan]:
        return self._plans.get(plan_id or DEFAULT_PLAN_ID)

    def job_limit(self, plan_id: Optional[str]) -> Optional[int]:
        """
        Active job quota for a plan.

        Unknown plans get a quota of 0 so nothing can be created on them.
        """
        plan = self.get(plan_id)
        if plan is None:
            return 0
        return plan.job_limit

    def display_name(self, plan_id: Optional[str]) -> str:
        plan = self.get(plan_id)
        return plan.name if plan else (plan_id or DEFAULT_PLAN_ID)

    def all(self) -> List[Plan]:
        return list(self._plans.values())

    @property
    def key_features(self) -> List[KeyFeature]:
        return list(self._key_features)


DEFAULT_CATALOG = PlanCatalog(APP_PLANS, KEY_FEATURES)


def get_plan_catalog() -> PlanCatalog:
    """Dependency returning the static plan catalog."""
    return DEFAULT_CATALOG


def get_plan(plan_id: Optional[str]) -> Optional[Plan]:
    return DEFAULT_CATALOG.get(plan_id)


def get_job_limit(plan_id: Optional[str]) -> Optional[int]:
    """Get the active job limit for a plan, None for unlimited, 0 for unknown plans."""
    return DEFAULT_CATALOG.job_limit(plan_id)


def has_unlimited_jobs(plan_id: Optional[str]) -> bool:
    """Check if the plan has no cap on active job postings."""
    plan = get_plan(plan_id)
    return plan is not None and plan.job_limit is None


def describe_job_limit(limit: Optional[int]) -> str:
    if limit is None:
        return "unlimited positions"
    return f"{limit} active positions"


def list_plans() -> List[Plan]:
    return DEFAULT_CATALOG.all()
