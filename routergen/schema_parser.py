"""Inspect models: visibility and operation resolution.

Handles:
- @@Gen attributes in model documentation comments
- Hidden models (@@Gen.model(hide: true))
- Filtering declared operations against the generateModelActions allow-list
- OrThrow variants sharing their base operation's input type
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .gen_logging import get_logger
from .loader import Entity, OperationMapping
from .operations import NOTIFICATION_EVENTS, EndpointCategory, ModelOperation

logger = get_logger(__name__)

_ATTRIBUTE_RE = re.compile(r"@@Gen\.([A-Za-z]+)\(([^)]*)\)")
_ARGUMENT_RE = re.compile(r"([A-Za-z]+)\s*:\s*([^,]+)")


@dataclass(frozen=True)
class ModelAttribute:
    """One @@Gen.<name>(<key>: <value>, ...) attribute."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class ResolvedOperation:
    """A declared operation that survived the allow-list."""

    operation: ModelOperation
    declared_name: Optional[str] = None

    @property
    def base(self) -> ModelOperation:
        return self.operation.base

    @property
    def category(self) -> EndpointCategory:
        return self.operation.category


def _parse_argument_value(value: str) -> Any:
    value = value.strip().strip("\"'")
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    return value


def parse_model_attributes(documentation: Optional[str]) -> list[ModelAttribute]:
    """Extract every @@Gen attribute from a documentation comment."""
    if not documentation:
        return []
    attributes = []
    for match in _ATTRIBUTE_RE.finditer(documentation):
        arguments = {
            key: _parse_argument_value(value)
            for key, value in _ARGUMENT_RE.findall(match.group(2))
        }
        attributes.append(ModelAttribute(name=match.group(1), arguments=arguments))
    return attributes


def is_hidden(entity: Entity) -> bool:
    """True if the model carries @@Gen.model(hide: true)."""
    return any(
        attr.name == "model" and attr.arguments.get("hide") is True
        for attr in parse_model_attributes(entity.documentation)
    )


def resolve_visibility(entities: Iterable[Entity]) -> tuple[list[Entity], list[str]]:
    """Split entities into the visible ones and the names of hidden ones."""
    visible: list[Entity] = []
    hidden: list[str] = []
    for entity in entities:
        if is_hidden(entity):
            logger.debug("  %s: hidden by @@Gen.model(hide: true)", entity.name)
            hidden.append(entity.name)
        else:
            visible.append(entity)
    return visible, hidden


def _is_allowed(operation: ModelOperation, allowed: frozenset[str]) -> bool:
    # findUniqueOrThrow passes on either "findUnique" or "findUniqueOrThrow"
    return operation.action.value in allowed or operation.client_method in allowed


def resolve_operations(
    mapping: OperationMapping,
    allowed: Iterable[str],
) -> list[ResolvedOperation]:
    """Keep declared operations whose kind is in the allow-list.

    Declaration order is preserved.
    """
    allowed_set = frozenset(str(getattr(a, "value", a)) for a in allowed)
    resolved = []
    for operation, declared_name in mapping.operations:
        if _is_allowed(operation, allowed_set):
            resolved.append(ResolvedOperation(operation=operation, declared_name=declared_name))
        else:
            logger.debug("  %s: %s not in generateModelActions", mapping.model, operation.value)
    return resolved


def notification_operations() -> list[str]:
    """Subscription events every router exposes."""
    return list(NOTIFICATION_EVENTS)


def has_endpoints(resolved: list[ResolvedOperation], notifications: list[str]) -> bool:
    """An entity without any endpoint is left out of the app router."""
    return bool(resolved) or bool(notifications)
