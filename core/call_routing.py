"""Call routing entry point.

Composes the two resolution stages for a subscriber:
dialed number -> NumberNormalizer -> normalized number -> RouteResolver.
All data comes from the injected DirectoryService.
"""

__all__ = [
    "CallRoutingService",
]

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Iterable

from config.settings import RoutingSettings
from core.errors import DialPlanNotFound, PolicyNotFound, SubscriberNotFound
from core.models import DialPlan, ResolutionResult, RoutingPolicy, Subscriber, group_routes_by_usage
from core.normalizer import NumberNormalizer
from core.resolver import PriorityOrder, RouteResolver

if TYPE_CHECKING:
    from services.directory import DirectoryService

logger = logging.getLogger(__name__)


class CallRoutingService:
    """Resolves which routes carry a subscriber's outbound call."""

    def __init__(self, directory: "DirectoryService", settings: RoutingSettings | None = None):
        if settings is None:
            settings = RoutingSettings()
        self.settings = settings
        self.directory = directory

        self._normalizer = NumberNormalizer()
        self._resolver = RouteResolver(PriorityOrder(settings.priority_order))

    def resolve_call_routing(self, dialed_number: str, subscriber_identity: str) -> ResolutionResult:
        """Resolve the routes for a call placed by a subscriber.

        Args:
            dialed_number: Number as dialed.
            subscriber_identity: Identity (SIP URI / UPN) of the caller.

        Returns:
            ResolutionResult. A NO_ROUTE_FOUND status is a normal outcome.

        Raises:
            SubscriberNotFound: If the directory has no such subscriber.
            PolicyNotFound: If the subscriber's assigned policy does not exist.
            DialPlanNotFound: If the subscriber's assigned dial plan does not exist.
            InvalidPattern: If a rule or route pattern fails to compile.
        """
        subscriber = self.directory.get_subscriber(subscriber_identity)
        if subscriber is None:
            logger.warning(f"Subscriber not found: {subscriber_identity}")
            raise SubscriberNotFound(subscriber_identity)

        dial_plan = self.effective_dial_plan(subscriber)
        normalization = self._normalizer.normalize(dialed_number, dial_plan)

        policy = self.effective_policy(subscriber)
        routes_by_usage = group_routes_by_usage(self.directory.get_routes())

        result = self._resolver.resolve(normalization.normalized, policy, routes_by_usage)
        result = replace(result, dialed_number=dialed_number, matched_rule=normalization.matched_rule)

        if result.found:
            logger.info(
                f"{subscriber.identity}: {dialed_number} -> {result.normalized_number} "
                f"via usage {result.usage_group} of policy {policy.name}: {result.route_names}"
            )
        else:
            logger.info(
                f"{subscriber.identity}: {dialed_number} -> {result.normalized_number} "
                f"has no route under policy {policy.name}"
            )
        return result

    def resolve_many(self, dialed_number: str, identities: Iterable[str]) -> dict[str, ResolutionResult]:
        """Resolve the same number for several subscribers independently."""
        return {identity: self.resolve_call_routing(dialed_number, identity) for identity in identities}

    def effective_policy(self, subscriber: Subscriber) -> RoutingPolicy:
        """The subscriber's assigned routing policy, or the Global policy."""
        name = subscriber.routing_policy or self.settings.global_policy_name
        policy = self.directory.get_routing_policy(name)
        if policy is None:
            logger.warning(f"Routing policy {name} for {subscriber.identity} not found")
            raise PolicyNotFound(name)
        return policy

    def effective_dial_plan(self, subscriber: Subscriber) -> DialPlan:
        """The subscriber's assigned dial plan, or the Global dial plan.

        A tenant without a Global dial plan normalizes nothing, so an empty
        plan stands in for it.
        """
        if subscriber.dial_plan:
            plan = self.directory.get_dial_plan(subscriber.dial_plan)
            if plan is None:
                logger.warning(f"Dial plan {subscriber.dial_plan} for {subscriber.identity} not found")
                raise DialPlanNotFound(subscriber.dial_plan)
            return plan

        global_name = self.settings.global_dial_plan_name
        plan = self.directory.get_dial_plan(global_name)
        if plan is None:
            logger.debug(f"No {global_name} dial plan; numbers are used as dialed")
            return DialPlan(name=global_name)
        return plan
