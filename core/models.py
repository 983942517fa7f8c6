"""Data model for call routing resolution.

Entities are loaded from the directory for each request and are never
mutated by the resolver, so every type here is a frozen dataclass.
"""

__all__ = [
    "TranslationRule",
    "DialPlan",
    "UsageGroup",
    "Route",
    "RoutingPolicy",
    "Subscriber",
    "NormalizationResult",
    "ResolutionStatus",
    "ResolutionResult",
    "group_routes_by_usage",
]

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable


@dataclass(frozen=True)
class TranslationRule:
    """Pattern + replacement used to normalize a dialed number."""

    pattern: str
    replacement: str
    order: int = 0
    name: str = ""
    description: str = ""


@dataclass(frozen=True)
class DialPlan:
    """Ordered translation rules effective for a subscriber."""

    name: str
    rules: tuple[TranslationRule, ...] = ()

    @classmethod
    def from_rules(cls, name: str, rules: Iterable[tuple[str, str]]) -> "DialPlan":
        """Build a plan from (pattern, replacement) pairs, numbering them in order."""
        return cls(
            name=name,
            rules=tuple(
                TranslationRule(pattern=pattern, replacement=replacement, order=index, name=f"{name}#{index}")
                for index, (pattern, replacement) in enumerate(rules)
            ),
        )


@dataclass(frozen=True)
class UsageGroup:
    """Named bucket of routes. Identity is the name."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Route:
    """A number pattern mapped to an ordered list of gateways."""

    name: str
    pattern: str
    gateways: tuple[str, ...] = ()
    priority: int = 0
    usage_groups: frozenset[UsageGroup] = field(default_factory=frozenset)
    description: str = ""


@dataclass(frozen=True)
class RoutingPolicy:
    """Usage groups in the order they are tried for outbound calls."""

    name: str
    usage_order: tuple[UsageGroup, ...] = ()

    def __post_init__(self):
        seen: set[UsageGroup] = set()
        for group in self.usage_order:
            if group in seen:
                raise ValueError(f"Routing policy {self.name!r} lists usage {group.name!r} more than once")
            seen.add(group)

    @classmethod
    def from_names(cls, name: str, usages: Iterable[str]) -> "RoutingPolicy":
        return cls(name=name, usage_order=tuple(UsageGroup(u) for u in usages))


@dataclass(frozen=True)
class Subscriber:
    """A user whose calls are routed.

    routing_policy and dial_plan hold the names of the assigned entities;
    None means nothing is assigned and the Global defaults apply.
    """

    identity: str
    routing_policy: str | None = None
    dial_plan: str | None = None


@dataclass(frozen=True)
class NormalizationResult:
    """Outcome of running a dialed number through a dial plan."""

    dialed_number: str
    normalized: str
    matched_rule: TranslationRule | None = None

    @property
    def was_translated(self) -> bool:
        return self.matched_rule is not None


class ResolutionStatus(Enum):
    ROUTED = "routed"
    NO_ROUTE_FOUND = "no_route_found"


@dataclass(frozen=True)
class ResolutionResult:
    """Result of resolving a number against a routing policy.

    A ROUTED result always carries the chosen usage group and at least one
    route, ordered by priority. A NO_ROUTE_FOUND result carries neither.
    """

    status: ResolutionStatus
    normalized_number: str
    policy_name: str
    usage_group: UsageGroup | None = None
    routes: tuple[Route, ...] = ()
    dialed_number: str | None = None
    matched_rule: TranslationRule | None = None

    @classmethod
    def routed(
        cls,
        normalized_number: str,
        policy_name: str,
        usage_group: UsageGroup,
        routes: Iterable[Route],
    ) -> "ResolutionResult":
        routes = tuple(routes)
        if not routes:
            raise ValueError("A routed result needs at least one route")
        return cls(
            status=ResolutionStatus.ROUTED,
            normalized_number=normalized_number,
            policy_name=policy_name,
            usage_group=usage_group,
            routes=routes,
        )

    @classmethod
    def no_route_found(cls, normalized_number: str, policy_name: str) -> "ResolutionResult":
        return cls(
            status=ResolutionStatus.NO_ROUTE_FOUND,
            normalized_number=normalized_number,
            policy_name=policy_name,
        )

    @property
    def found(self) -> bool:
        return self.status is ResolutionStatus.ROUTED

    @property
    def route_names(self) -> list[str]:
        return [route.name for route in self.routes]

    @property
    def gateway_order(self) -> list[str]:
        """Gateways in the order they would be tried, duplicates dropped."""
        ordered: list[str] = []
        for route in self.routes:
            for gateway in route.gateways:
                if gateway not in ordered:
                    ordered.append(gateway)
        return ordered


def group_routes_by_usage(routes: Iterable[Route]) -> dict[UsageGroup, tuple[Route, ...]]:
    """Build the usage group -> routes mapping, keeping catalog order within each group."""
    grouped: dict[UsageGroup, list[Route]] = {}
    for route in routes:
        # frozenset iteration order is arbitrary; sort so the mapping is deterministic
        for group in sorted(route.usage_groups, key=lambda g: g.name):
            grouped.setdefault(group, []).append(route)
    return {group: tuple(members) for group, members in grouped.items()}
