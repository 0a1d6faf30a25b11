# Pydantic Schemas Package
from .milestone import MilestoneCreate, MilestoneUpdate, MilestoneResponse, MilestoneDuplicate, MilestoneLifecycleAction
from .cart_session import (
    CartSessionCreate, CartSessionResponse, CartValueUpdateRequest, CartValueUpdateResponse,
    FreeProductSelectionRequest, FreeProductSelectionResponse,
)
from .store import StoreCreate, StoreResponse, ProductCreate, ProductResponse, StoreAnalytics

__all__ = [
    "MilestoneCreate", "MilestoneUpdate", "MilestoneResponse", "MilestoneDuplicate", "MilestoneLifecycleAction",
    "CartSessionCreate", "CartSessionResponse", "CartValueUpdateRequest", "CartValueUpdateResponse",
    "FreeProductSelectionRequest", "FreeProductSelectionResponse",
    "StoreCreate", "StoreResponse", "ProductCreate", "ProductResponse", "StoreAnalytics",
]
