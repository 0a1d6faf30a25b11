"""
Analytics Service - reward counters for the merchant dashboard
"""
from sqlalchemy.orm import Session
from sqlalchemy import func

from cartrewards.models import RewardHistory, CartSession
from .store_service import StoreService

class AnalyticsService:

    @staticmethod
    def get_store_analytics(db: Session, store_id: str) -> dict:
        StoreService.get_store(db, store_id)

        by_type = dict(
            db.query(RewardHistory.reward_type, func.count(RewardHistory.id))
            .filter(RewardHistory.store_id == store_id)
            .group_by(RewardHistory.reward_type)
            .all()
        )
        redeemed = db.query(func.count(RewardHistory.id)).filter(
            RewardHistory.store_id == store_id,
            RewardHistory.is_redeemed == True
        ).scalar() or 0
        active_sessions = db.query(func.count(CartSession.id)).filter(
            CartSession.store_id == store_id,
            CartSession.is_active == True
        ).scalar() or 0

        return {
            "total_rewards_unlocked": sum(by_type.values()),
            "rewards_redeemed": redeemed,
            "rewards_by_type": by_type,
            "active_cart_sessions": active_sessions,
        }
