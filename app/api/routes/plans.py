from typing import Optional

from fastapi import APIRouter, Depends

from app.core.auth_dependency import get_optional_user
from app.core.config import Settings, get_settings
from app.core.plans import PlanCatalog, get_plan_catalog
from app.db.models.user import User
from app.schemas.billing import PricingResponse
from app.services.pricing_service import build_pricing_page

router = APIRouter(prefix="/plans", tags=["Plans"])


@router.get("", response_model=PricingResponse)
def get_pricing(
    user: Optional[User] = Depends(get_optional_user),
    plans: PlanCatalog = Depends(get_plan_catalog),
    settings: Settings = Depends(get_settings),
):
    """Plan cards with their checkout action, plus the comparison table."""
    return build_pricing_page(plans, settings, user)
