"""
Milestone Model - store-configured cart value thresholds
"""
from sqlalchemy import Column, String, Numeric, Integer, ForeignKey, Text, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum

from cartrewards.core import Base
from .base import UUIDMixin


class RewardType(str, enum.Enum):
    FREE_DELIVERY = "free_delivery"
    FREE_PRODUCTS = "free_products"
    DISCOUNT = "discount"


class DiscountType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class MilestoneStatus(str, enum.Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    DELETED = "deleted"  # soft delete


def _utcnow():
    return datetime.now(timezone.utc)


class Milestone(Base, UUIDMixin):
    """Reward unlocked once the cart subtotal reaches threshold_amount"""
    __tablename__ = "milestone"
    __table_args__ = (
        UniqueConstraint("store_id", "sequence", name="uq_milestone_store_sequence"),
    )

    store_id = Column(String(36), ForeignKey("store.id"), nullable=False, index=True)
    name = Column(String(200), default="Milestone")
    description = Column(Text)

    # Threshold & reward
    threshold_amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), default="PKR")
    reward_type = Column(String(30), nullable=False)  # free_delivery, free_products, discount
    free_product_count = Column(Integer, default=0)
    discount_value = Column(Numeric(10, 2), default=0)
    discount_type = Column(String(20), default=DiscountType.PERCENTAGE.value)

    # Lifecycle
    status = Column(String(20), default=MilestoneStatus.ACTIVE.value, nullable=False, index=True)

    # Usage limits
    usage_limit = Column(Integer)
    usage_count = Column(Integer, default=0)
    max_usage_per_customer = Column(Integer, default=1)

    # Display only, never used for evaluation
    priority = Column(Integer, default=1)
    display_order = Column(Integer, default=1)
    icon = Column(String(20), default="🎁")
    color = Column(String(20), default="#e91e63")

    # Per-store insertion counter; breaks ties between equal thresholds
    sequence = Column(Integer, nullable=False)

    # Audit
    created_by = Column(String(100))
    last_modified_by = Column(String(100))
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    store = relationship("Store", back_populates="milestones")
