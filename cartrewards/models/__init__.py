from .base import TimestampMixin, UUIDMixin
from .store import Store, Product
from .milestone import Milestone, MilestoneStatus, RewardType, DiscountType
from .cart import CartSession, RewardHistory

__all__ = [
    # Base
    "TimestampMixin", "UUIDMixin",
    # Store
    "Store", "Product",
    # Milestone
    "Milestone", "MilestoneStatus", "RewardType", "DiscountType",
    # Cart
    "CartSession", "RewardHistory",
]
