"""Route resolution for normalized numbers.

Usage groups are tried in the order the routing policy lists them. The
first group holding a route whose pattern matches the number wins; groups
after it are never looked at, even if they would also match. The matching
routes of the winning group are then ordered by priority.
"""

__all__ = [
    "PriorityOrder",
    "RouteResolver",
]

import logging
from enum import Enum
from typing import Mapping, Sequence

from core.models import ResolutionResult, Route, RoutingPolicy, UsageGroup
from core.patterns import pattern_matches

logger = logging.getLogger(__name__)


class PriorityOrder(Enum):
    """Which end of the priority scale is preferred."""

    ASCENDING = "ascending"  # lower value tried first
    DESCENDING = "descending"


class RouteResolver:
    """Selects the usage group and route order for a normalized number."""

    def __init__(self, priority_order: PriorityOrder | str = PriorityOrder.ASCENDING):
        self.priority_order = PriorityOrder(priority_order)

    def resolve(
        self,
        normalized_number: str,
        policy: RoutingPolicy,
        routes_by_usage: Mapping[UsageGroup, Sequence[Route]],
    ) -> ResolutionResult:
        """Resolve the routes for a number under a routing policy.

        Args:
            normalized_number: Output of the number normalizer.
            policy: The subscriber's policy, or the Global policy.
            routes_by_usage: Routes of each usage group in catalog order.

        Returns:
            ROUTED result with the chosen usage group and its matching routes
            in priority order, or NO_ROUTE_FOUND.

        Raises:
            InvalidPattern: If a route in an evaluated usage group has an
                invalid pattern.
        """
        for group in policy.usage_order:
            candidates = self.matching_routes(normalized_number, routes_by_usage.get(group, ()))
            if not candidates:
                logger.debug(f"Policy {policy.name}: usage {group} has no route for {normalized_number}")
                continue

            ordered = self.order_by_priority(candidates)
            logger.debug(
                f"Policy {policy.name}: usage {group} selected for {normalized_number} "
                f"with routes {[route.name for route in ordered]}"
            )
            return ResolutionResult.routed(normalized_number, policy.name, group, ordered)

        logger.debug(f"Policy {policy.name}: no usage routes {normalized_number}")
        return ResolutionResult.no_route_found(normalized_number, policy.name)

    @staticmethod
    def matching_routes(normalized_number: str, routes: Sequence[Route]) -> list[Route]:
        """Routes whose pattern matches the number, in input order."""
        return [
            route
            for route in routes
            if pattern_matches(route.pattern, normalized_number, f"route {route.name}")
        ]

    def order_by_priority(self, routes: Sequence[Route]) -> list[Route]:
        """Stable sort by priority; equal priorities keep their input order."""
        # sorted(reverse=True) keeps equal elements in their original order
        return sorted(
            routes,
            key=lambda route: route.priority,
            reverse=self.priority_order is PriorityOrder.DESCENDING,
        )
