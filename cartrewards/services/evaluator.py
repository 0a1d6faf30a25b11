"""
Milestone Evaluator - maps a cart value to the set of unlocked milestones

evaluate() reads the catalog but never writes; persisting the result is the
job of CartSessionService.apply_cart_value_update.
"""
from sqlalchemy.orm import Session
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Set

from cartrewards.models import Milestone, Store
from .amounts import parse_amount
from .exceptions import NotFoundError
from .milestone_service import MilestoneService


@dataclass
class EvaluationResult:
    unlocked_now: Set[str] = field(default_factory=set)
    # Ascending threshold order, so reward history is written in crossing order
    newly_unlocked: List[str] = field(default_factory=list)
    milestones_matched: List[Milestone] = field(default_factory=list)


def evaluate_milestones(
    active_milestones: Iterable[Milestone],
    previous_unlocked_ids: Iterable[str],
    new_value: Decimal,
) -> EvaluationResult:
    """
    Recompute the unlocked set from scratch.

    active_milestones must already be filtered to status=active and sorted by
    threshold. The previous set only feeds the diff, never the result, so a
    milestone that was paused or re-priced since the last call drops out.
    """
    new_value = parse_amount(new_value, "currentValue")
    previous = set(previous_unlocked_ids or [])

    result = EvaluationResult()
    for milestone in active_milestones:
        if Decimal(milestone.threshold_amount) <= new_value:
            result.unlocked_now.add(milestone.id)
            result.milestones_matched.append(milestone)
            if milestone.id not in previous:
                result.newly_unlocked.append(milestone.id)
    return result


class MilestoneEvaluator:
    """Loads a store's active catalog and evaluates a cart value against it"""

    @staticmethod
    def evaluate(db: Session, store_id: str, previous_unlocked_ids: Iterable[str], new_value) -> EvaluationResult:
        new_value = parse_amount(new_value, "currentValue")
        if not db.query(Store.id).filter(Store.id == store_id).first():
            raise NotFoundError(f"Store {store_id} not found")

        active = MilestoneService.list_active_milestones(db, store_id)
        return evaluate_milestones(active, previous_unlocked_ids, new_value)
