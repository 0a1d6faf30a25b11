"""
Store Service - stores and their reward-eligible products
"""
from sqlalchemy.orm import Session
from typing import List, Optional
from decimal import Decimal

from cartrewards.core import settings
from cartrewards.models import Store, Product
from .amounts import parse_amount
from .exceptions import NotFoundError, ValidationError

class StoreService:
    """Store and product lookups"""

    @staticmethod
    def create_store(
        db: Session,
        shopify_store_id: str,
        store_name: str,
        access_token: str,
        currency: str = "PKR",
        delivery_fee: Optional[Decimal] = None
    ) -> Store:
        if db.query(Store.id).filter(Store.shopify_store_id == shopify_store_id).first():
            raise ValidationError(f"Store {shopify_store_id} is already registered")

        store = Store(
            shopify_store_id=shopify_store_id,
            store_name=store_name,
            access_token=access_token,
            currency=currency,
            delivery_fee=settings.DEFAULT_DELIVERY_FEE if delivery_fee is None else parse_amount(delivery_fee, "deliveryFee"),
            is_active=True
        )
        db.add(store)
        db.commit()
        db.refresh(store)
        return store

    @staticmethod
    def get_store(db: Session, store_id: str) -> Store:
        store = db.get(Store, store_id)
        if not store:
            raise NotFoundError(f"Store {store_id} not found")
        return store

    @staticmethod
    def get_store_by_shopify_id(db: Session, shopify_store_id: str) -> Store:
        store = db.query(Store).filter(Store.shopify_store_id == shopify_store_id).first()
        if not store:
            raise NotFoundError(f"Store {shopify_store_id} not found")
        return store

    @staticmethod
    def create_product(db: Session, store_id: str, **fields) -> Product:
        StoreService.get_store(db, store_id)
        fields["price"] = parse_amount(fields.get("price"), "price")
        product = Product(store_id=store_id, **fields)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def list_products(db: Session, store_id: str) -> List[Product]:
        return db.query(Product).filter(Product.store_id == store_id).order_by(Product.title).all()

    @staticmethod
    def list_eligible_free_products(db: Session, store_id: str) -> List[Product]:
        """Products a shopper may pick as a free reward"""
        return db.query(Product).filter(
            Product.store_id == store_id,
            Product.is_eligible_for_rewards == True,
            Product.is_bundle == False
        ).order_by(Product.title).all()
