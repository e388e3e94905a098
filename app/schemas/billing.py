"""
Pydantic schemas for billing and payment endpoints.
"""
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, Field


class SubscriptionSummary(BaseModel):
    """The caller's plan and where they stand against its job quota."""
    plan_id: str
    plan_name: str
    status: Optional[str] = None
    is_active: bool
    job_limit: Optional[int] = Field(None, description="Active job quota, null for unlimited")
    current_jobs_count: int


class ContactSalesAction(BaseModel):
    kind: Literal["contact_sales"] = "contact_sales"
    href: str = "#contact"
    label: str


class PaddleCheckoutAction(BaseModel):
    kind: Literal["paddle_checkout"] = "paddle_checkout"
    price_id: Optional[str] = None
    email: Optional[str] = None
    recruiter_id: Optional[int] = None
    label: str
    success_url: str
    cancel_url: str


class LoadingAction(BaseModel):
    kind: Literal["loading"] = "loading"


CheckoutAction = Union[ContactSalesAction, PaddleCheckoutAction, LoadingAction]


class PlanCard(BaseModel):
    id: str
    name: str
    description: str
    price_display: str
    job_limit: Optional[int] = None
    features: List[str]
    is_recommended: bool
    action: CheckoutAction = Field(..., discriminator="kind")


class KeyFeatureRow(BaseModel):
    label: str
    values: List[str]


class PaddleWidgetConfig(BaseModel):
    ready: bool
    environment: str
    client_token: Optional[str] = None


class PricingResponse(BaseModel):
    plans: List[PlanCard]
    key_features: List[KeyFeatureRow]
    paddle: PaddleWidgetConfig


class PaymentSnapshot(BaseModel):
    """Read-only view of a payment intent, or the stand-in built for subscriptions."""
    status: Optional[str] = None
    id: Optional[str] = None
    type: Optional[str] = None


class PaymentConfirmationResponse(BaseModel):
    outcome: Literal["loading", "success", "error", "unknown"]
    message: Optional[str] = None
    payment: Optional[PaymentSnapshot] = None
