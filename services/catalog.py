"""JSON catalog loader.

A catalog is a JSON export of the directory:

    {
      "subscribers": [{"identity": "sip:alice@example.com", "routing_policy": "Sales", "dial_plan": "UK"}],
      "routing_policies": [{"name": "Global", "usages": ["Internal", "International"]}],
      "dial_plans": [{"name": "UK", "rules": [{"pattern": "^00(\\\\d+)$", "replacement": "+$1"}]}],
      "routes": [{"name": "UK-Intl", "pattern": "^\\\\+44", "gateways": ["gw1"], "priority": 1,
                  "usages": ["International"]}]
    }

Rule order within a dial plan and route order within the catalog are taken
from the document order.
"""

__all__ = [
    "TranslationRuleEntry",
    "DialPlanEntry",
    "RouteEntry",
    "RoutingPolicyEntry",
    "SubscriberEntry",
    "CatalogDocument",
    "load_catalog",
    "parse_catalog",
]

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from core.errors import CatalogError
from core.models import DialPlan, Route, RoutingPolicy, Subscriber, TranslationRule, UsageGroup
from services.directory import InMemoryDirectory

logger = logging.getLogger(__name__)


class TranslationRuleEntry(BaseModel):
    name: str = ""
    pattern: str
    replacement: str
    description: str = ""


class DialPlanEntry(BaseModel):
    name: str
    rules: list[TranslationRuleEntry] = Field(default_factory=list)

    def to_model(self) -> DialPlan:
        return DialPlan(
            name=self.name,
            rules=tuple(
                TranslationRule(
                    pattern=rule.pattern,
                    replacement=rule.replacement,
                    order=index,
                    name=rule.name or f"{self.name}#{index}",
                    description=rule.description,
                )
                for index, rule in enumerate(self.rules)
            ),
        )


class RouteEntry(BaseModel):
    name: str
    pattern: str
    gateways: list[str] = Field(default_factory=list)
    priority: int = 0
    usages: list[str] = Field(default_factory=list)
    description: str = ""

    def to_model(self) -> Route:
        return Route(
            name=self.name,
            pattern=self.pattern,
            gateways=tuple(self.gateways),
            priority=self.priority,
            usage_groups=frozenset(UsageGroup(u) for u in self.usages),
            description=self.description,
        )


class RoutingPolicyEntry(BaseModel):
    name: str
    usages: list[str] = Field(default_factory=list)

    def to_model(self) -> RoutingPolicy:
        return RoutingPolicy.from_names(self.name, self.usages)


class SubscriberEntry(BaseModel):
    identity: str
    routing_policy: str | None = None
    dial_plan: str | None = None

    def to_model(self) -> Subscriber:
        return Subscriber(
            identity=self.identity,
            routing_policy=self.routing_policy,
            dial_plan=self.dial_plan,
        )


class CatalogDocument(BaseModel):
    """Top-level catalog document."""

    subscribers: list[SubscriberEntry] = Field(default_factory=list)
    routing_policies: list[RoutingPolicyEntry] = Field(default_factory=list)
    dial_plans: list[DialPlanEntry] = Field(default_factory=list)
    routes: list[RouteEntry] = Field(default_factory=list)

    def to_directory(self) -> InMemoryDirectory:
        return InMemoryDirectory(
            subscribers=[entry.to_model() for entry in self.subscribers],
            policies=[entry.to_model() for entry in self.routing_policies],
            dial_plans=[entry.to_model() for entry in self.dial_plans],
            routes=[entry.to_model() for entry in self.routes],
        )


def parse_catalog(data: str | bytes | dict) -> InMemoryDirectory:
    """Parse a catalog from JSON text or an already-decoded dict.

    Raises:
        CatalogError: If the document is not valid JSON or does not match
            the catalog schema.
    """
    try:
        if isinstance(data, dict):
            document = CatalogDocument.model_validate(data)
        else:
            document = CatalogDocument.model_validate_json(data)
        return document.to_directory()
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog: {e}") from e
    except ValueError as e:
        # Duplicate usages in a policy
        raise CatalogError(f"Invalid catalog: {e}") from e


def load_catalog(path: str | Path) -> InMemoryDirectory:
    """Load a catalog file into an in-memory directory.

    Raises:
        CatalogError: If the file cannot be read or is malformed.
    """
    path = Path(path)
    logger.info(f"Loading routing catalog from {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise CatalogError(f"Catalog {path} must contain a JSON object")

    return parse_catalog(data)
