"""
Milestone Schemas
"""
from pydantic import Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

from cartrewards.models.milestone import RewardType, DiscountType
from .base import CamelModel

class MilestoneCreate(CamelModel):
    name: str = "Milestone"
    description: Optional[str] = None
    threshold_amount: Decimal
    currency: str = "PKR"
    reward_type: Optional[RewardType] = None
    free_product_count: int = 0
    discount_value: Decimal = Decimal("0")
    discount_type: DiscountType = DiscountType.PERCENTAGE
    usage_limit: Optional[int] = None
    max_usage_per_customer: int = 1
    priority: int = 1
    display_order: int = 1
    icon: str = "🎁"
    color: str = "#e91e63"
    created_by: Optional[str] = None

class MilestoneUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    threshold_amount: Optional[Decimal] = None
    currency: Optional[str] = None
    reward_type: Optional[RewardType] = None
    free_product_count: Optional[int] = None
    discount_value: Optional[Decimal] = None
    discount_type: Optional[DiscountType] = None
    usage_limit: Optional[int] = None
    max_usage_per_customer: Optional[int] = None
    priority: Optional[int] = None
    display_order: Optional[int] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    modified_by: Optional[str] = None

class MilestoneLifecycleAction(CamelModel):
    modified_by: Optional[str] = None

class MilestoneDuplicate(CamelModel):
    new_name: Optional[str] = Field(default=None, min_length=1)
    modified_by: Optional[str] = None

class MilestoneResponse(CamelModel):
    id: str
    store_id: str
    name: Optional[str]
    description: Optional[str]
    threshold_amount: Decimal
    currency: Optional[str]
    reward_type: str
    free_product_count: Optional[int]
    discount_value: Optional[Decimal]
    discount_type: Optional[str]
    status: str
    usage_limit: Optional[int]
    usage_count: Optional[int]
    max_usage_per_customer: Optional[int]
    priority: Optional[int]
    display_order: Optional[int]
    icon: Optional[str]
    color: Optional[str]
    created_by: Optional[str]
    last_modified_by: Optional[str]
    created_at: datetime
    updated_at: datetime
