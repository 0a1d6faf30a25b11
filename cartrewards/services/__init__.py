# Services Package
from .exceptions import CartRewardsError, ValidationError, NotFoundError, ConflictError
from .milestone_service import MilestoneService
from .evaluator import MilestoneEvaluator, EvaluationResult, evaluate_milestones
from .cart_session_service import CartSessionService, CartValueUpdate
from .store_service import StoreService
from .analytics_service import AnalyticsService

__all__ = [
    "CartRewardsError", "ValidationError", "NotFoundError", "ConflictError",
    "MilestoneService",
    "MilestoneEvaluator", "EvaluationResult", "evaluate_milestones",
    "CartSessionService", "CartValueUpdate",
    "StoreService",
    "AnalyticsService",
]
