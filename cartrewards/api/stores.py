"""
Store API - store registration, products and analytics
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from cartrewards.core import get_db
from cartrewards.services import StoreService, AnalyticsService
from cartrewards.schemas import StoreCreate, StoreResponse, ProductCreate, ProductResponse, StoreAnalytics

stores_router = APIRouter(prefix="/stores", tags=["Stores"])

@stores_router.post("", response_model=StoreResponse)
def create_store(data: StoreCreate, db: Session = Depends(get_db)):
    return StoreService.create_store(db, **data.model_dump())

@stores_router.get("/{shopify_store_id}", response_model=StoreResponse)
def get_store(shopify_store_id: str, db: Session = Depends(get_db)):
    return StoreService.get_store_by_shopify_id(db, shopify_store_id)

@stores_router.post("/{store_id}/products", response_model=ProductResponse)
def create_product(store_id: str, data: ProductCreate, db: Session = Depends(get_db)):
    return StoreService.create_product(db, store_id, **data.model_dump())

@stores_router.get("/{store_id}/products", response_model=List[ProductResponse])
def list_products(store_id: str, db: Session = Depends(get_db)):
    return StoreService.list_products(db, store_id)

@stores_router.get("/{store_id}/products/eligible", response_model=List[ProductResponse])
def list_eligible_products(store_id: str, db: Session = Depends(get_db)):
    return StoreService.list_eligible_free_products(db, store_id)

@stores_router.get("/{store_id}/analytics", response_model=StoreAnalytics)
def store_analytics(store_id: str, db: Session = Depends(get_db)):
    return AnalyticsService.get_store_analytics(db, store_id)
