"""Tests for route resolution: usage selection, priority order, edge cases."""

import unittest

from core.errors import InvalidPattern
from core.models import (
    ResolutionResult,
    ResolutionStatus,
    Route,
    RoutingPolicy,
    UsageGroup,
    group_routes_by_usage,
)
from core.resolver import PriorityOrder, RouteResolver

INTERNAL = UsageGroup("Internal")
NATIONAL = UsageGroup("National")
INTERNATIONAL = UsageGroup("International")


def make_route(name, pattern, priority=0, *usages, gateways=()):
    return Route(
        name=name,
        pattern=pattern,
        gateways=tuple(gateways),
        priority=priority,
        usage_groups=frozenset(usages),
    )


class TestResolve(unittest.TestCase):
    """RouteResolver.resolve() usage group selection."""

    def setUp(self):
        self.resolver = RouteResolver()
        self.redmond = make_route("Redmond", r"^\+1425\d{7}$", 0, INTERNAL)
        self.r1 = make_route("R1", r"^\+\d+$", 2, INTERNATIONAL)
        self.r2 = make_route("R2", r"^\+44", 1, INTERNATIONAL)
        self.routes_by_usage = group_routes_by_usage([self.redmond, self.r1, self.r2])
        self.policy = RoutingPolicy(name="Sales", usage_order=(INTERNAL, INTERNATIONAL))

    def test_routes_ordered_by_priority(self):
        result = self.resolver.resolve("+44123456789", self.policy, self.routes_by_usage)
        self.assertEqual(result.status, ResolutionStatus.ROUTED)
        self.assertEqual(result.usage_group, INTERNATIONAL)
        self.assertEqual(result.routes, (self.r2, self.r1))
        self.assertEqual(result.policy_name, "Sales")
        self.assertEqual(result.normalized_number, "+44123456789")

    def test_first_usage_wins(self):
        # R1 in International would also match, but Internal comes first
        result = self.resolver.resolve("+14255550100", self.policy, self.routes_by_usage)
        self.assertEqual(result.usage_group, INTERNAL)
        self.assertEqual(result.route_names, ["Redmond"])

    def test_policy_order_decides(self):
        reversed_policy = RoutingPolicy(name="Reversed", usage_order=(INTERNATIONAL, INTERNAL))
        result = self.resolver.resolve("+14255550100", reversed_policy, self.routes_by_usage)
        self.assertEqual(result.usage_group, INTERNATIONAL)
        self.assertEqual(result.route_names, ["R1"])

    def test_only_matching_routes_of_chosen_group(self):
        result = self.resolver.resolve("+33123456789", self.policy, self.routes_by_usage)
        self.assertEqual(result.usage_group, INTERNATIONAL)
        self.assertEqual(result.route_names, ["R1"])

    def test_no_route_found(self):
        result = self.resolver.resolve("911", self.policy, self.routes_by_usage)
        self.assertEqual(result.status, ResolutionStatus.NO_ROUTE_FOUND)
        self.assertFalse(result.found)
        self.assertIsNone(result.usage_group)
        self.assertEqual(result.routes, ())

    def test_empty_usage_order(self):
        empty = RoutingPolicy(name="Locked")
        result = self.resolver.resolve("+44123456789", empty, self.routes_by_usage)
        self.assertEqual(result.status, ResolutionStatus.NO_ROUTE_FOUND)

    def test_usage_without_routes_is_skipped(self):
        policy = RoutingPolicy(name="P", usage_order=(UsageGroup("Unused"), INTERNATIONAL))
        result = self.resolver.resolve("+44123456789", policy, self.routes_by_usage)
        self.assertEqual(result.usage_group, INTERNATIONAL)

    def test_full_number_searched(self):
        route = make_route("Contains", r"4412", 0, INTERNAL)
        policy = RoutingPolicy(name="P", usage_order=(INTERNAL,))
        result = self.resolver.resolve("+44123", policy, group_routes_by_usage([route]))
        self.assertTrue(result.found)

    def test_directory_pattern_syntax_in_routes(self):
        route = make_route("London", r"^\+44(?<area>20)\d{8}$", 0, INTERNATIONAL)
        policy = RoutingPolicy(name="P", usage_order=(INTERNATIONAL,))
        result = self.resolver.resolve("+442079460000", policy, group_routes_by_usage([route]))
        self.assertEqual(result.route_names, ["London"])

    def test_idempotent(self):
        first = self.resolver.resolve("+44123456789", self.policy, self.routes_by_usage)
        second = self.resolver.resolve("+44123456789", self.policy, self.routes_by_usage)
        self.assertEqual(first, second)


class TestMultiGroupRoutes(unittest.TestCase):
    """Routes that belong to more than one usage group."""

    def setUp(self):
        self.resolver = RouteResolver()
        self.local = make_route("Local", r"^\+1425", 0, INTERNAL)
        self.shared = make_route("Shared", r"^\+44", 5, NATIONAL, INTERNATIONAL)
        self.intl = make_route("Intl", r"^\+", 1, INTERNATIONAL)
        self.routes_by_usage = group_routes_by_usage([self.local, self.shared, self.intl])

    def test_shared_route_selected_via_second_group(self):
        policy = RoutingPolicy(name="P", usage_order=(INTERNAL, NATIONAL, INTERNATIONAL))
        result = self.resolver.resolve("+44123456789", policy, self.routes_by_usage)
        self.assertEqual(result.usage_group, NATIONAL)
        self.assertEqual(result.routes, (self.shared,))

    def test_shared_route_evaluated_per_group(self):
        policy = RoutingPolicy(name="P", usage_order=(INTERNAL, INTERNATIONAL, NATIONAL))
        result = self.resolver.resolve("+44123456789", policy, self.routes_by_usage)
        self.assertEqual(result.usage_group, INTERNATIONAL)
        self.assertEqual(result.route_names, ["Intl", "Shared"])


class TestPriorityOrdering(unittest.TestCase):
    """Stable sort by priority in both directions."""

    def setUp(self):
        self.routes = [
            make_route("a", r"^\+", 1, INTERNATIONAL),
            make_route("b", r"^\+", 3, INTERNATIONAL),
            make_route("c", r"^\+", 3, INTERNATIONAL),
            make_route("d", r"^\+", 2, INTERNATIONAL),
            make_route("e", r"^\+", 1, INTERNATIONAL),
        ]
        self.routes_by_usage = group_routes_by_usage(self.routes)
        self.policy = RoutingPolicy(name="P", usage_order=(INTERNATIONAL,))

    def test_ascending_is_default(self):
        self.assertIs(RouteResolver().priority_order, PriorityOrder.ASCENDING)

    def test_ascending_keeps_ties_in_catalog_order(self):
        result = RouteResolver().resolve("+1", self.policy, self.routes_by_usage)
        self.assertEqual(result.route_names, ["a", "e", "d", "b", "c"])

    def test_descending_keeps_ties_in_catalog_order(self):
        resolver = RouteResolver(PriorityOrder.DESCENDING)
        result = resolver.resolve("+1", self.policy, self.routes_by_usage)
        self.assertEqual(result.route_names, ["b", "c", "d", "a", "e"])

    def test_order_accepts_setting_string(self):
        self.assertIs(RouteResolver("descending").priority_order, PriorityOrder.DESCENDING)

    def test_unknown_order_rejected(self):
        with self.assertRaises(ValueError):
            RouteResolver("sideways")


class TestInvalidRoutePatterns(unittest.TestCase):
    """Invalid route patterns surface only when their group is evaluated."""

    def setUp(self):
        self.resolver = RouteResolver()
        self.good = make_route("Good", r"^\+44", 0, INTERNAL)
        self.bad = make_route("Bad", r"^\+(44", 0, INTERNATIONAL)
        self.routes_by_usage = group_routes_by_usage([self.good, self.bad])

    def test_bad_pattern_in_evaluated_group_raises(self):
        policy = RoutingPolicy(name="P", usage_order=(INTERNATIONAL, INTERNAL))
        with self.assertRaises(InvalidPattern) as ctx:
            self.resolver.resolve("+44123", policy, self.routes_by_usage)
        self.assertEqual(ctx.exception.source, "route Bad")

    def test_bad_pattern_after_chosen_group_not_evaluated(self):
        policy = RoutingPolicy(name="P", usage_order=(INTERNAL, INTERNATIONAL))
        result = self.resolver.resolve("+44123", policy, self.routes_by_usage)
        self.assertEqual(result.route_names, ["Good"])


class TestModels(unittest.TestCase):
    """Invariants of the routing data model."""

    def test_policy_rejects_duplicate_usages(self):
        with self.assertRaises(ValueError):
            RoutingPolicy(name="Dup", usage_order=(INTERNAL, INTERNATIONAL, INTERNAL))

    def test_policy_from_names(self):
        policy = RoutingPolicy.from_names("Global", ["Internal", "International"])
        self.assertEqual(policy.usage_order, (INTERNAL, INTERNATIONAL))

    def test_usage_group_identity_is_name(self):
        self.assertEqual(UsageGroup("Internal"), INTERNAL)
        self.assertEqual(len({UsageGroup("Internal"), INTERNAL}), 1)

    def test_group_routes_by_usage_keeps_catalog_order(self):
        first = make_route("first", "x", 9, INTERNAL, INTERNATIONAL)
        second = make_route("second", "x", 1, INTERNATIONAL)
        third = make_route("third", "x", 5, INTERNAL)
        grouped = group_routes_by_usage([first, second, third])
        self.assertEqual(grouped[INTERNAL], (first, third))
        self.assertEqual(grouped[INTERNATIONAL], (first, second))
        self.assertNotIn(NATIONAL, grouped)

    def test_routed_result_needs_routes(self):
        with self.assertRaises(ValueError):
            ResolutionResult.routed("+1", "P", INTERNAL, [])

    def test_gateway_order_drops_duplicates(self):
        result = ResolutionResult.routed(
            "+44",
            "P",
            INTERNATIONAL,
            [
                make_route("x", "x", 0, INTERNATIONAL, gateways=("gw-b", "gw-c")),
                make_route("y", "y", 1, INTERNATIONAL, gateways=("gw-a", "gw-b")),
            ],
        )
        self.assertEqual(result.gateway_order, ["gw-b", "gw-c", "gw-a"])


if __name__ == "__main__":
    unittest.main()
