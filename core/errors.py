"""Exceptions raised while resolving call routing.

A resolution that finds no route is not an error; it is reported through
ResolutionResult with status NO_ROUTE_FOUND.
"""

__all__ = [
    "CallRoutingError",
    "InvalidPattern",
    "DirectoryLookupError",
    "SubscriberNotFound",
    "PolicyNotFound",
    "DialPlanNotFound",
    "CatalogError",
]


class CallRoutingError(Exception):
    """Base class for all call routing errors."""


class InvalidPattern(CallRoutingError):
    """A translation rule or route pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str, source: str | None = None):
        self.pattern = pattern
        self.reason = reason
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"Invalid pattern{where}: {pattern!r} ({reason})")


class DirectoryLookupError(CallRoutingError):
    """A record the resolution depends on is missing from the directory."""

    kind = "record"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{self.kind} not found: {name!r}")


class SubscriberNotFound(DirectoryLookupError):
    kind = "Subscriber"

    @property
    def identity(self) -> str:
        return self.name


class PolicyNotFound(DirectoryLookupError):
    kind = "Routing policy"


class DialPlanNotFound(DirectoryLookupError):
    kind = "Dial plan"


class CatalogError(CallRoutingError):
    """The directory catalog could not be read or is malformed."""
