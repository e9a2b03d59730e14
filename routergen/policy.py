"""Default trpc-shield permissions for every generated endpoint.

The matrix is built from the full canonical operation set of each visible
model, not from the generateModelActions allow-list, so enabling another
operation later never leaves it without a rule.

Subscription rules are keyed like `createUser` while the router exposes the
subscription as `user.create`, so the generated rules do not match it. Integrators who restrict subscriptions
add their own rules for the router paths.
"""

from __future__ import annotations

import json
from pathlib import PurePosixPath
from typing import Any, Iterable

from .config import GeneratorConfig
from .context_builder import SHIELD_PATH
from .document import ImportDeclaration, PolicyDefinition, SourceFile
from .gen_logging import get_logger
from .loader import Entity
from .naming import relative_import_path, resolve_config_path
from .operations import NOTIFICATION_EVENTS, POLICY_MUTATIONS, POLICY_QUERIES

logger = get_logger(__name__)

ALLOW = "allow"

PermissionMatrix = dict[str, dict[str, str]]


def build_permission_matrix(entities: Iterable[Entity]) -> PermissionMatrix:
    """Allow-everything rules keyed by category then endpoint identifier."""
    matrix: PermissionMatrix = {"query": {}, "mutation": {}, "subscription": {}}
    for entity in entities:
        for op in POLICY_QUERIES:
            matrix["query"][f"{op}{entity.name}"] = ALLOW
        for op in POLICY_MUTATIONS:
            matrix["mutation"][f"{op}{entity.name}"] = ALLOW
        for event in NOTIFICATION_EVENTS:
            matrix["subscription"][f"{event}{entity.name}"] = ALLOW
    return matrix


def render_rules(matrix: PermissionMatrix) -> str:
    """Indented object literal with the allow rule referenced, not quoted."""
    return json.dumps(matrix, indent=2).replace(f'"{ALLOW}"', ALLOW)


def build_policy_file(
    matrix: PermissionMatrix,
    config: GeneratorConfig,
    output_dir: Any,
) -> SourceFile:
    """shield/shield.ts exporting ``permissions``."""
    root = PurePosixPath(str(output_dir))
    shield_dir = (root / SHIELD_PATH).parent

    source = SourceFile(path=SHIELD_PATH)
    source.add_import(ImportDeclaration(module="trpc-shield", named=("shield", ALLOW)))
    source.add_import(ImportDeclaration(
        module=relative_import_path(shield_dir, resolve_config_path(root, config.context_path)),
        named=("Context",),
    ))
    source.add_statement(PolicyDefinition(symbol="permissions", context_type="Context", rules=matrix))
    logger.debug(
        "  shield: %d query, %d mutation, %d subscription rules",
        len(matrix["query"]), len(matrix["mutation"]), len(matrix["subscription"]),
    )
    return source
