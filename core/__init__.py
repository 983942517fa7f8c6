"""Core modules for call routing resolution."""

from core.errors import (
    CallRoutingError,
    InvalidPattern,
    SubscriberNotFound,
    PolicyNotFound,
    DialPlanNotFound,
    CatalogError,
)
from core.models import (
    TranslationRule,
    DialPlan,
    UsageGroup,
    Route,
    RoutingPolicy,
    Subscriber,
    NormalizationResult,
    ResolutionStatus,
    ResolutionResult,
)
from core.normalizer import NumberNormalizer
from core.resolver import PriorityOrder, RouteResolver
from core.call_routing import CallRoutingService

__all__ = [
    "CallRoutingError",
    "InvalidPattern",
    "SubscriberNotFound",
    "PolicyNotFound",
    "DialPlanNotFound",
    "CatalogError",
    "TranslationRule",
    "DialPlan",
    "UsageGroup",
    "Route",
    "RoutingPolicy",
    "Subscriber",
    "NormalizationResult",
    "ResolutionStatus",
    "ResolutionResult",
    "NumberNormalizer",
    "PriorityOrder",
    "RouteResolver",
    "CallRoutingService",
]
