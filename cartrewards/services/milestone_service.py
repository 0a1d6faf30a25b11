"""
Milestone Service - store-scoped milestone catalog
"""
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
from decimal import Decimal
import logging

from cartrewards.models import Milestone, MilestoneStatus, RewardType, DiscountType, Store
from .exceptions import ValidationError, NotFoundError, ConflictError
from .amounts import parse_amount

logger = logging.getLogger(__name__)

# Fields copied by duplicate(); id, status and usage counters are left out
COPYABLE_FIELDS = (
    "store_id", "description", "threshold_amount", "currency", "reward_type",
    "free_product_count", "discount_value", "discount_type", "usage_limit",
    "max_usage_per_customer", "priority", "display_order", "icon", "color",
)

DEFAULT_MILESTONES = [
    {"name": "Free Delivery", "threshold_amount": Decimal("2500"), "reward_type": RewardType.FREE_DELIVERY, "free_product_count": 0, "icon": "🚚"},
    {"name": "1 Free Product", "threshold_amount": Decimal("3000"), "reward_type": RewardType.FREE_PRODUCTS, "free_product_count": 1},
    {"name": "2 Free Products", "threshold_amount": Decimal("4000"), "reward_type": RewardType.FREE_PRODUCTS, "free_product_count": 2},
    {"name": "3 Free Products", "threshold_amount": Decimal("5000"), "reward_type": RewardType.FREE_PRODUCTS, "free_product_count": 3},
]


def _enum_value(enum_cls, value, field: str) -> str:
    if isinstance(value, enum_cls):
        return value.value
    try:
        return enum_cls(value).value
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ValidationError(f"Invalid {field} '{value}', expected one of: {allowed}")


class MilestoneService:
    """Milestone catalog queries and admin lifecycle operations"""

    @staticmethod
    def _require_store(db: Session, store_id: str):
        if not db.query(Store.id).filter(Store.id == store_id).first():
            raise NotFoundError(f"Store {store_id} not found")

    @staticmethod
    def _next_sequence(db: Session, store_id: str) -> int:
        current = db.query(func.max(Milestone.sequence)).filter(Milestone.store_id == store_id).scalar()
        return (current or 0) + 1

    @staticmethod
    def _insert(db: Session, milestone: Milestone) -> Milestone:
        """Assign the next insertion sequence and commit"""
        milestone.sequence = MilestoneService._next_sequence(db, milestone.store_id)
        db.add(milestone)
        try:
            db.commit()
        except IntegrityError as e:
            # A concurrent insert took the same sequence number
            db.rollback()
            raise ConflictError(f"Milestone catalog for store {milestone.store_id} changed concurrently") from e
        db.refresh(milestone)
        return milestone

    @staticmethod
    def list_active_milestones(db: Session, store_id: str) -> List[Milestone]:
        """Active milestones, ascending threshold, ties in insertion order"""
        return (
            db.query(Milestone)
            .filter(Milestone.store_id == store_id, Milestone.status == MilestoneStatus.ACTIVE.value)
            .order_by(Milestone.threshold_amount.asc(), Milestone.sequence.asc())
            .all()
        )

    @staticmethod
    def list_by_status(db: Session, store_id: str, status: Optional[str] = None) -> List[Milestone]:
        """Milestones with the given status; all non-deleted ones when status is None"""
        MilestoneService._require_store(db, store_id)
        query = db.query(Milestone).filter(Milestone.store_id == store_id)

        if status is None:
            query = query.filter(Milestone.status != MilestoneStatus.DELETED.value)
        else:
            query = query.filter(Milestone.status == _enum_value(MilestoneStatus, status, "status"))

        return query.order_by(Milestone.threshold_amount.asc(), Milestone.sequence.asc()).all()

    @staticmethod
    def get_milestone(db: Session, milestone_id: str, store_id: Optional[str] = None) -> Milestone:
        query = db.query(Milestone).filter(Milestone.id == milestone_id)
        if store_id is not None:
            query = query.filter(Milestone.store_id == store_id)
        milestone = query.first()
        if not milestone:
            raise NotFoundError(f"Milestone {milestone_id} not found")
        return milestone

    @staticmethod
    def _validate_fields(data: dict) -> dict:
        """Normalize enum fields and enforce amount/count ranges in place"""
        if "threshold_amount" in data:
            if data["threshold_amount"] is None:
                raise ValidationError("thresholdAmount is required")
            data["threshold_amount"] = parse_amount(data["threshold_amount"], "thresholdAmount")
        if "reward_type" in data:
            if data["reward_type"] is None:
                raise ValidationError("rewardType is required")
            data["reward_type"] = _enum_value(RewardType, data["reward_type"], "rewardType")
        if data.get("discount_type") is not None:
            data["discount_type"] = _enum_value(DiscountType, data["discount_type"], "discountType")
        if data.get("discount_value") is not None:
            data["discount_value"] = parse_amount(data["discount_value"], "discountValue")
        if data.get("free_product_count") is not None and data["free_product_count"] < 0:
            raise ValidationError("freeProductCount must be >= 0")
        if data.get("usage_limit") is not None and data["usage_limit"] < 0:
            raise ValidationError("usageLimit must be >= 0")
        return data

    @staticmethod
    def create_milestone(db: Session, store_id: str, data: dict) -> Milestone:
        """Create a milestone for a store"""
        MilestoneService._require_store(db, store_id)

        data = dict(data)
        data.pop("sequence", None)
        data.setdefault("threshold_amount", None)
        data.setdefault("reward_type", None)
        data = MilestoneService._validate_fields(data)

        milestone = Milestone(
            store_id=store_id,
            status=MilestoneStatus.ACTIVE.value,
            last_modified_by=data.get("created_by"),
            **data
        )
        MilestoneService._insert(db, milestone)
        logger.info(f"Created milestone {milestone.id} ({milestone.reward_type} at {milestone.threshold_amount}) for store {store_id}")
        return milestone

    @staticmethod
    def update_milestone(db: Session, milestone_id: str, data: dict, store_id: Optional[str] = None) -> Milestone:
        """Apply a partial update; keys with None values are ignored"""
        milestone = MilestoneService.get_milestone(db, milestone_id, store_id)

        updates = {k: v for k, v in data.items() if v is not None}
        modified_by = updates.pop("modified_by", None)
        updates.pop("sequence", None)
        updates = MilestoneService._validate_fields(updates)

        for field, value in updates.items():
            setattr(milestone, field, value)
        if modified_by:
            milestone.last_modified_by = modified_by

        db.commit()
        db.refresh(milestone)
        return milestone

    @staticmethod
    def _set_status(db: Session, milestone_id: str, status: MilestoneStatus,
                    modified_by: Optional[str], store_id: Optional[str]) -> Milestone:
        milestone = MilestoneService.get_milestone(db, milestone_id, store_id)
        milestone.status = status.value
        if modified_by:
            milestone.last_modified_by = modified_by
        db.commit()
        db.refresh(milestone)
        logger.info(f"Milestone {milestone_id} is now {status.value}")
        return milestone

    @staticmethod
    def pause_milestone(db: Session, milestone_id: str, modified_by: Optional[str] = None,
                        store_id: Optional[str] = None) -> Milestone:
        return MilestoneService._set_status(db, milestone_id, MilestoneStatus.PAUSED, modified_by, store_id)

    @staticmethod
    def resume_milestone(db: Session, milestone_id: str, modified_by: Optional[str] = None,
                         store_id: Optional[str] = None) -> Milestone:
        return MilestoneService._set_status(db, milestone_id, MilestoneStatus.ACTIVE, modified_by, store_id)

    @staticmethod
    def soft_delete_milestone(db: Session, milestone_id: str, modified_by: Optional[str] = None,
                              store_id: Optional[str] = None) -> Milestone:
        return MilestoneService._set_status(db, milestone_id, MilestoneStatus.DELETED, modified_by, store_id)

    @staticmethod
    def duplicate_milestone(db: Session, milestone_id: str, new_name: Optional[str] = None,
                            modified_by: Optional[str] = None, store_id: Optional[str] = None) -> Milestone:
        """Copy a milestone under a new name; the copy starts active with zero usage"""
        source = MilestoneService.get_milestone(db, milestone_id, store_id)

        copy = Milestone(
            name=new_name or f"{source.name} (Copy)",
            status=MilestoneStatus.ACTIVE.value,
            usage_count=0,
            created_by=modified_by,
            last_modified_by=modified_by,
            **{field: getattr(source, field) for field in COPYABLE_FIELDS}
        )
        return MilestoneService._insert(db, copy)

    @staticmethod
    def initialize_default_milestones(db: Session, store_id: str) -> List[Milestone]:
        """Seed the standard free delivery / free products ladder for a new store"""
        return [
            MilestoneService.create_milestone(db, store_id, dict(defaults))
            for defaults in DEFAULT_MILESTONES
        ]
