"""
Store & Product Models
"""
from sqlalchemy import Column, String, Numeric, Boolean, ForeignKey, Text
from sqlalchemy.orm import relationship
from cartrewards.core import Base
from .base import UUIDMixin, TimestampMixin

class Store(Base, UUIDMixin, TimestampMixin):
    """Shopify store using the cart rewards widget"""
    __tablename__ = "store"

    shopify_store_id = Column(String(200), unique=True, nullable=False, index=True)
    store_name = Column(String(300), nullable=False)
    access_token = Column(Text, nullable=False)
    currency = Column(String(3), default="PKR")

    # Flat shipping fee, recorded as the value of a free delivery reward
    delivery_fee = Column(Numeric(10, 2), default=300)
    is_active = Column(Boolean, default=True)

    # Relationships
    products = relationship("Product", back_populates="store")
    milestones = relationship("Milestone", back_populates="store")
    cart_sessions = relationship("CartSession", back_populates="store")

class Product(Base, UUIDMixin, TimestampMixin):
    """Storefront product that can be offered as a free reward"""
    __tablename__ = "product"

    store_id = Column(String(36), ForeignKey("store.id"), nullable=False, index=True)
    shopify_product_id = Column(String(100), nullable=False)
    title = Column(String(300), nullable=False)
    handle = Column(String(300), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String(500))
    is_bundle = Column(Boolean, default=False)
    is_eligible_for_rewards = Column(Boolean, default=True)

    # Relationships
    store = relationship("Store", back_populates="products")
