"""
Cart Session API - called by the storefront widget
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cartrewards.core import get_db
from cartrewards.services import CartSessionService
from cartrewards.schemas import (
    CartSessionCreate, CartSessionResponse, CartValueUpdateRequest, CartValueUpdateResponse,
    FreeProductSelectionRequest, FreeProductSelectionResponse, MilestoneResponse
)

cart_sessions_router = APIRouter(prefix="/cart-sessions", tags=["Cart Sessions"])

@cart_sessions_router.post("", response_model=CartSessionResponse)
def create_cart_session(data: CartSessionCreate, db: Session = Depends(get_db)):
    return CartSessionService.create_session(db, data.store_id, data.cart_token, data.customer_id)

@cart_sessions_router.get("/{cart_token}", response_model=CartSessionResponse)
def get_cart_session(cart_token: str, db: Session = Depends(get_db)):
    return CartSessionService.get_session(db, cart_token)

@cart_sessions_router.put("/{cart_token}/value", response_model=CartValueUpdateResponse)
def update_cart_value(cart_token: str, data: CartValueUpdateRequest, db: Session = Depends(get_db)):
    update = CartSessionService.apply_cart_value_update(db, cart_token, data.current_value)
    return CartValueUpdateResponse(
        session=CartSessionResponse.model_validate(update.session),
        new_milestones=update.has_new_milestones,
        unlocked_milestones=[MilestoneResponse.model_validate(m) for m in update.unlocked_milestones]
    )

@cart_sessions_router.put("/{cart_token}/free-products", response_model=FreeProductSelectionResponse)
def update_free_products(cart_token: str, data: FreeProductSelectionRequest, db: Session = Depends(get_db)):
    session = CartSessionService.apply_free_product_selection(db, cart_token, data.product_ids)
    return FreeProductSelectionResponse(session=CartSessionResponse.model_validate(session))
