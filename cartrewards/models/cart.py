"""
Cart Session & Reward History Models
"""
from sqlalchemy import Column, String, Numeric, Boolean, Integer, DateTime, ForeignKey, JSON, UniqueConstraint
from datetime import datetime, timezone
from sqlalchemy.orm import relationship
from cartrewards.core import Base
from .base import UUIDMixin, TimestampMixin

class CartSession(Base, UUIDMixin, TimestampMixin):
    """One shopper's in-progress cart, keyed by the storefront cart token"""
    __tablename__ = "cart_session"

    store_id = Column(String(36), ForeignKey("store.id"), nullable=False, index=True)
    customer_id = Column(String(100))
    cart_token = Column(String(200), unique=True, nullable=False, index=True)

    current_value = Column(Numeric(10, 2), default=0, nullable=False)
    unlocked_milestones = Column(JSON, default=list)  # milestone ids
    selected_free_products = Column(JSON, default=list)  # product ids

    # Urgency countdown shown in the widget, not enforced here
    timer_expires_at = Column(DateTime(timezone=True))
    is_active = Column(Boolean, default=True)

    # Optimistic lock, bumped by SQLAlchemy on every UPDATE
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    store = relationship("Store", back_populates="cart_sessions")
    rewards = relationship("RewardHistory", back_populates="cart_session", order_by="RewardHistory.created_at")

class RewardHistory(Base, UUIDMixin):
    """Append-only ledger: one row per milestone unlocked in a cart session"""
    __tablename__ = "reward_history"
    __table_args__ = (
        UniqueConstraint("cart_session_id", "milestone_id", name="uq_reward_history_session_milestone"),
    )

    store_id = Column(String(36), ForeignKey("store.id"), nullable=False, index=True)
    cart_session_id = Column(String(36), ForeignKey("cart_session.id"), nullable=False, index=True)
    milestone_id = Column(String(36), ForeignKey("milestone.id"), nullable=False)

    reward_type = Column(String(30), nullable=False)
    reward_value = Column(Numeric(10, 2), default=0)
    is_redeemed = Column(Boolean, default=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    # Relationships
    cart_session = relationship("CartSession", back_populates="rewards")
    milestone = relationship("Milestone")
