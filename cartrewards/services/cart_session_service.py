"""
Cart Session Service - cart value updates, reward history, free product selection
"""
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.exc import IntegrityError
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable, List, Optional
import logging

from cartrewards.core import settings, with_retry
from cartrewards.models import CartSession, RewardHistory, Milestone, MilestoneStatus, RewardType, Store
from .amounts import parse_amount
from .evaluator import MilestoneEvaluator
from .exceptions import ValidationError, NotFoundError, ConflictError

logger = logging.getLogger(__name__)


@dataclass
class CartValueUpdate:
    session: CartSession
    has_new_milestones: bool
    unlocked_milestones: List[Milestone]


class CartSessionService:
    """Cart session use cases; every write runs in a single transaction"""

    @staticmethod
    def get_session(db: Session, cart_token: str) -> CartSession:
        session = db.query(CartSession).filter(CartSession.cart_token == cart_token).first()
        if not session:
            raise NotFoundError(f"Cart session {cart_token} not found")
        return session

    @staticmethod
    def create_session(db: Session, store_id: str, cart_token: str, customer_id: Optional[str] = None) -> CartSession:
        """Register a storefront cart token; an already known token returns its session"""
        existing = db.query(CartSession).filter(CartSession.cart_token == cart_token).first()
        if existing:
            return existing

        if not db.query(Store.id).filter(Store.id == store_id).first():
            raise NotFoundError(f"Store {store_id} not found")

        session = CartSession(
            store_id=store_id,
            cart_token=cart_token,
            customer_id=customer_id,
            current_value=Decimal("0"),
            unlocked_milestones=[],
            selected_free_products=[],
            timer_expires_at=datetime.now(timezone.utc) + timedelta(minutes=settings.CART_TIMER_MINUTES),
            is_active=True,
        )
        db.add(session)
        try:
            db.commit()
        except IntegrityError:
            # Another request registered the same token first
            db.rollback()
            return CartSessionService.get_session(db, cart_token)
        db.refresh(session)
        return session

    @staticmethod
    def _reward_value(store: Store, milestone: Milestone) -> Decimal:
        if milestone.reward_type == RewardType.FREE_DELIVERY.value:
            if store is not None and store.delivery_fee is not None:
                return Decimal(store.delivery_fee)
            return settings.DEFAULT_DELIVERY_FEE
        # Discount amounts are worked out at checkout
        return Decimal("0")

    @staticmethod
    def _apply_value_once(db: Session, cart_token: str, new_value: Decimal) -> CartValueUpdate:
        """One read-evaluate-write attempt; rolls back on any failure"""
        try:
            session = CartSessionService.get_session(db, cart_token)
            previous_ids = list(session.unlocked_milestones or [])

            result = MilestoneEvaluator.evaluate(db, session.store_id, previous_ids, new_value)

            session.current_value = new_value
            # Keep threshold order so the stored list reads like the widget
            session.unlocked_milestones = [m.id for m in result.milestones_matched]

            already_rewarded = set()
            if result.newly_unlocked:
                already_rewarded = {
                    row.milestone_id
                    for row in db.query(RewardHistory.milestone_id).filter(
                        RewardHistory.cart_session_id == session.id,
                        RewardHistory.milestone_id.in_(result.newly_unlocked),
                    )
                }

            store = db.get(Store, session.store_id)
            matched = {m.id: m for m in result.milestones_matched}
            for milestone_id in result.newly_unlocked:
                if milestone_id in already_rewarded:
                    continue
                milestone = matched[milestone_id]
                db.add(RewardHistory(
                    store_id=session.store_id,
                    cart_session_id=session.id,
                    milestone_id=milestone_id,
                    reward_type=milestone.reward_type,
                    reward_value=CartSessionService._reward_value(store, milestone),
                ))
                logger.info(
                    f"Cart {cart_token} crossed {milestone.threshold_amount} "
                    f"({milestone.reward_type}, milestone {milestone_id})"
                )

            db.commit()
        except (StaleDataError, IntegrityError) as e:
            db.rollback()
            raise ConflictError(f"Cart session {cart_token} was updated concurrently") from e
        except Exception:
            db.rollback()
            raise

        db.refresh(session)
        return CartValueUpdate(
            session=session,
            has_new_milestones=len(result.newly_unlocked) > 0,
            unlocked_milestones=result.milestones_matched,
        )

    @staticmethod
    def apply_cart_value_update(db: Session, cart_token: str, new_value) -> CartValueUpdate:
        """
        Record a new cart subtotal and emit reward history for newly crossed thresholds.

        Conflicts re-read the session and re-evaluate, up to CART_UPDATE_MAX_RETRIES
        attempts; transient connection errors are retried by with_retry.
        """
        new_value = parse_amount(new_value, "currentValue")
        max_attempts = max(1, settings.CART_UPDATE_MAX_RETRIES)

        for attempt in range(1, max_attempts + 1):
            try:
                return with_retry(lambda: CartSessionService._apply_value_once(db, cart_token, new_value))
            except ConflictError:
                if attempt >= max_attempts:
                    logger.error(f"Giving up on cart {cart_token} after {attempt} conflicting updates")
                    raise
                logger.warning(f"Conflict updating cart {cart_token} (attempt {attempt}/{max_attempts}), retrying")

    @staticmethod
    def free_product_allowance(db: Session, session: CartSession) -> int:
        """free_product_count of the highest-threshold unlocked free products milestone"""
        unlocked_ids = list(session.unlocked_milestones or [])
        if not unlocked_ids:
            return 0

        best = (
            db.query(Milestone)
            .filter(
                Milestone.id.in_(unlocked_ids),
                Milestone.store_id == session.store_id,
                Milestone.reward_type == RewardType.FREE_PRODUCTS.value,
                Milestone.status == MilestoneStatus.ACTIVE.value,
            )
            .order_by(Milestone.threshold_amount.desc(), Milestone.sequence.desc())
            .first()
        )
        return (best.free_product_count or 0) if best else 0

    @staticmethod
    def apply_free_product_selection(db: Session, cart_token: str, product_ids: Iterable[str]) -> CartSession:
        """Replace the shopper's free product picks, bounded by the unlocked allowance"""
        # Dedupe but keep the shopper's pick order
        selected = list(dict.fromkeys(str(pid) for pid in product_ids))

        try:
            session = CartSessionService.get_session(db, cart_token)
            allowance = CartSessionService.free_product_allowance(db, session)
            if len(selected) > allowance:
                raise ValidationError(
                    f"Selected {len(selected)} free products but only {allowance} unlocked"
                )

            session.selected_free_products = selected
            db.commit()
        except StaleDataError as e:
            db.rollback()
            raise ConflictError(f"Cart session {cart_token} was updated concurrently") from e
        except Exception:
            db.rollback()
            raise

        db.refresh(session)
        return session
