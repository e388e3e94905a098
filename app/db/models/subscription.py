from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.sql import func
from app.db.base import Base

ACTIVE_STATUSES = ("active", "trialing")


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True)

    plan_id = Column(String, default="basico")  # basico | profesional | empresarial | enterprise
    status = Column(String, default="inactive")  # mirrors the billing provider status

    stripe_customer_id = Column(String, nullable=True)
    stripe_subscription_id = Column(String, nullable=True, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES
