"""Directory collaborator supplying subscribers, policies, dial plans and routes.

The resolver never talks to a directory itself. Whatever fetches the data
(a remote administration API, a database, a JSON export) implements
DirectoryService and is injected into CallRoutingService.
"""

__all__ = [
    "DirectoryService",
    "InMemoryDirectory",
]

import logging
from abc import ABC, abstractmethod
from typing import Iterable

from core.models import DialPlan, Route, RoutingPolicy, Subscriber

logger = logging.getLogger(__name__)


class DirectoryService(ABC):
    """Source of truth for routing data.

    Lookups return None when the record does not exist; deciding whether
    that is an error is left to the caller.
    """

    @abstractmethod
    def get_subscriber(self, identity: str) -> Subscriber | None:
        """Get a subscriber by identity."""

    @abstractmethod
    def get_routing_policy(self, name: str) -> RoutingPolicy | None:
        """Get a routing policy by name."""

    @abstractmethod
    def get_dial_plan(self, name: str) -> DialPlan | None:
        """Get a dial plan by name."""

    @abstractmethod
    def get_routes(self) -> list[Route]:
        """Get the full route catalog in catalog order."""


class InMemoryDirectory(DirectoryService):
    """Directory backed by plain dictionaries."""

    def __init__(
        self,
        subscribers: Iterable[Subscriber] = (),
        policies: Iterable[RoutingPolicy] = (),
        dial_plans: Iterable[DialPlan] = (),
        routes: Iterable[Route] = (),
    ):
        self._subscribers = {s.identity.lower(): s for s in subscribers}
        self._policies = {p.name: p for p in policies}
        self._dial_plans = {d.name: d for d in dial_plans}
        self._routes = list(routes)

        logger.debug(
            f"Directory loaded: {len(self._subscribers)} subscribers, "
            f"{len(self._policies)} policies, {len(self._dial_plans)} dial plans, "
            f"{len(self._routes)} routes"
        )

    def get_subscriber(self, identity: str) -> Subscriber | None:
        # Identities are SIP URIs / UPNs, which compare case-insensitively
        return self._subscribers.get(identity.lower())

    def get_routing_policy(self, name: str) -> RoutingPolicy | None:
        return self._policies.get(name)

    def get_dial_plan(self, name: str) -> DialPlan | None:
        return self._dial_plans.get(name)

    def get_routes(self) -> list[Route]:
        return list(self._routes)

    def add_subscriber(self, subscriber: Subscriber) -> None:
        self._subscribers[subscriber.identity.lower()] = subscriber

    def add_routing_policy(self, policy: RoutingPolicy) -> None:
        self._policies[policy.name] = policy

    def add_dial_plan(self, plan: DialPlan) -> None:
        self._dial_plans[plan.name] = plan

    def add_route(self, route: Route) -> None:
        self._routes.append(route)
