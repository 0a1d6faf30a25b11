"""
Cart Session Schemas
"""
from pydantic import Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from .base import CamelModel
from .milestone import MilestoneResponse

class CartSessionCreate(CamelModel):
    store_id: str
    cart_token: str = Field(..., min_length=1)
    customer_id: Optional[str] = None

class CartValueUpdateRequest(CamelModel):
    # Accepts a JSON number or a decimal string; never parsed through float
    current_value: Decimal

class FreeProductSelectionRequest(CamelModel):
    product_ids: List[str]

class CartSessionResponse(CamelModel):
    id: str
    store_id: str
    customer_id: Optional[str]
    cart_token: str
    current_value: Decimal
    unlocked_milestones: List[str] = []
    selected_free_products: List[str] = []
    timer_expires_at: Optional[datetime]
    is_active: bool
    created_at: datetime
    updated_at: datetime

class CartValueUpdateResponse(CamelModel):
    session: CartSessionResponse
    new_milestones: bool
    unlocked_milestones: List[MilestoneResponse] = []

class FreeProductSelectionResponse(CamelModel):
    session: CartSessionResponse
