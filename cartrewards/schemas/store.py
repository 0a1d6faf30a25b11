"""
Store, Product & Analytics Schemas
"""
from typing import Optional, Dict
from datetime import datetime
from decimal import Decimal

from .base import CamelModel

class StoreCreate(CamelModel):
    shopify_store_id: str
    store_name: str
    access_token: str
    currency: str = "PKR"
    delivery_fee: Optional[Decimal] = None

class StoreResponse(CamelModel):
    id: str
    shopify_store_id: str
    store_name: str
    currency: Optional[str]
    delivery_fee: Optional[Decimal]
    is_active: Optional[bool]
    created_at: datetime

class ProductCreate(CamelModel):
    shopify_product_id: str
    title: str
    handle: str
    price: Decimal
    image_url: Optional[str] = None
    is_bundle: bool = False
    is_eligible_for_rewards: bool = True

class ProductResponse(CamelModel):
    id: str
    store_id: str
    shopify_product_id: str
    title: str
    handle: str
    price: Decimal
    image_url: Optional[str]
    is_bundle: Optional[bool]
    is_eligible_for_rewards: Optional[bool]

class StoreAnalytics(CamelModel):
    total_rewards_unlocked: int
    rewards_redeemed: int
    rewards_by_type: Dict[str, int]
    active_cart_sessions: int
