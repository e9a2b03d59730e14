"""Build the router documents.

Assembles, for one generation run:
  - routers/helpers/createRouter.ts  (tRPC bootstrap, built once, first)
  - routers/<Model>.router.ts        (one per visible model)
  - routers/index.ts                 (app router composing the model routers)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Optional

from .config import GeneratorConfig
from .document import (
    BaseProcedure,
    Endpoint,
    ImportDeclaration,
    Middleware,
    Procedure,
    RouterDefinition,
    RouterEntry,
    SourceFile,
    Subscription,
    TrpcInit,
)
from .errors import NamingCollisionError
from .gen_logging import get_logger
from .loader import Entity
from .naming import (
    endpoint_name,
    event_channel,
    input_type_reference,
    procedure_key,
    relative_import_path,
    resolve_config_path,
    router_key,
    router_symbol,
    schema_module,
    uncapitalize,
)
from .operations import CALL_ARGUMENTS, EndpointCategory
from .schema_parser import ResolvedOperation, has_endpoints

logger = get_logger(__name__)

ROUTERS_DIR = "routers"
HELPERS_DIR = f"{ROUTERS_DIR}/helpers"
CREATE_ROUTER_PATH = f"{HELPERS_DIR}/createRouter.ts"
APP_ROUTER_PATH = f"{ROUTERS_DIR}/index.ts"
SHIELD_PATH = "shield/shield.ts"

CLIENT_MODULE = "@prisma/client"
OBSERVABLE_MODULE = "@trpc/server/observable"
TRPC_MODULE = "@trpc/server"


@dataclass
class ModelRouter:
    """A model's resolved endpoints together with its router document."""

    entity: Entity
    operations: list[ResolvedOperation]
    notifications: list[str]
    source: Optional[SourceFile] = field(default=None, repr=False)


def router_path(entity_name: str) -> str:
    return f"{ROUTERS_DIR}/{entity_name}.router.ts"


def base_procedure_name(config: GeneratorConfig) -> str:
    return "shieldedProcedure" if config.with_shield else "publicProcedure"


def _import_from(output_dir: Any, from_dir: str, configured: str) -> str:
    """Module specifier of a configured (output-relative) path."""
    root = PurePosixPath(str(output_dir))
    return relative_import_path(root / from_dir, resolve_config_path(root, configured))


# ---------------------------------------------------------------------------
# Bootstrap: routers/helpers/createRouter.ts
# ---------------------------------------------------------------------------

def build_create_router_file(config: GeneratorConfig, output_dir: Any) -> SourceFile:
    """The shared tRPC instance and base procedures every router imports."""
    source = SourceFile(path=CREATE_ROUTER_PATH)
    source.add_import(ImportDeclaration(module=TRPC_MODULE, namespace="trpc"))
    source.add_import(ImportDeclaration(
        module=_import_from(output_dir, HELPERS_DIR, config.context_path),
        named=("Context",),
        type_only=True,
    ))
    if config.with_shield:
        source.add_import(ImportDeclaration(
            module=relative_import_path(HELPERS_DIR, SHIELD_PATH),
            named=("permissions",),
        ))
    if config.trpc_options_path:
        source.add_import(ImportDeclaration(
            module=_import_from(output_dir, HELPERS_DIR, config.trpc_options_path),
            default="trpcOptions",
        ))
    custom_middleware = isinstance(config.with_middleware, str)
    if custom_middleware:
        source.add_import(ImportDeclaration(
            module=_import_from(output_dir, HELPERS_DIR, config.with_middleware),
            default="defaultMiddleware",
        ))

    source.add_statement(TrpcInit(
        context_type="Context",
        options="trpcOptions" if config.trpc_options_path else None,
    ))

    middlewares: list[str] = []
    if config.with_middleware is not False:
        source.add_statement(Middleware(
            name="globalMiddleware",
            handler="defaultMiddleware" if custom_middleware else None,
        ))
        middlewares.append("globalMiddleware")
    source.add_statement(BaseProcedure(name="publicProcedure", middlewares=tuple(middlewares)))

    if config.with_shield:
        source.add_statement(Middleware(name="permissionsMiddleware", handler="permissions"))
        source.add_statement(BaseProcedure(
            name="shieldedProcedure",
            middlewares=tuple(middlewares) + ("permissionsMiddleware",),
        ))
    return source


# ---------------------------------------------------------------------------
# Per-model router: routers/<Model>.router.ts
# ---------------------------------------------------------------------------

def build_procedure(
    entity_name: str,
    resolved: ResolvedOperation,
    config: GeneratorConfig,
) -> Procedure:
    """One query or mutation endpoint for a resolved operation."""
    operation = resolved.operation
    name = endpoint_name(operation, resolved.declared_name)
    category = operation.category
    channel = None
    if category is EndpointCategory.MUTATION:
        channel = event_channel(entity_name, operation.action.value)
    input_type = input_type_reference(resolved.base, entity_name, config.with_zod)
    # Without an .input() parser tRPC hands the resolver no input
    call_arguments = CALL_ARGUMENTS[operation] if input_type else ()
    return Procedure(
        key=procedure_key(name, entity_name, config.show_model_name_in_procedure),
        category=category,
        base_procedure=base_procedure_name(config),
        result_name=name,
        client_accessor=uncapitalize(entity_name),
        client_method=operation.client_method,
        input_type=input_type,
        call_arguments=call_arguments,
        event_channel=channel,
    )


def build_subscription(entity_name: str, event: str, config: GeneratorConfig) -> Subscription:
    return Subscription(
        key=event,
        base_procedure=base_procedure_name(config),
        payload_type=entity_name,
        channel=event_channel(entity_name, event),
        listener=f"on{event[:1].upper()}{event[1:]}",
    )


def build_router_file(
    entity: Entity,
    operations: list[ResolvedOperation],
    notifications: list[str],
    config: GeneratorConfig,
    output_dir: Any,
) -> SourceFile:
    """Router document for one model.

    Dispatch endpoints come first, in declaration order, followed by one
    subscription per notification event.
    """
    name = entity.name
    source = SourceFile(path=router_path(name))

    source.add_import(ImportDeclaration(
        module="./helpers/createRouter",
        named=("t", base_procedure_name(config)),
    ))

    if config.with_zod:
        seen: set[str] = set()
        for resolved in operations:
            schema = input_type_reference(resolved.base, name, with_zod=True)
            if schema in seen:
                continue
            seen.add(schema)
            source.add_import(ImportDeclaration(
                module=schema_module(resolved.base, name),
                named=(schema,),
            ))

    source.add_import(ImportDeclaration(module=CLIENT_MODULE, named=(name,), type_only=True))
    source.add_import(ImportDeclaration(module=OBSERVABLE_MODULE, named=("observable",)))
    source.add_import(ImportDeclaration(
        module=_import_from(output_dir, ROUTERS_DIR, config.emitter_path),
        named=("ee",),
    ))

    endpoints: list[Endpoint] = [build_procedure(name, op, config) for op in operations]
    endpoints.extend(build_subscription(name, event, config) for event in notifications)

    source.add_statement(RouterDefinition(symbol=router_symbol(name), endpoints=tuple(endpoints)))
    logger.debug(
        "  %s: %d procedures, %d subscriptions",
        name, len(operations), len(notifications),
    )
    return source


# ---------------------------------------------------------------------------
# App router: routers/index.ts
# ---------------------------------------------------------------------------

def build_app_router(model_routers: list[ModelRouter]) -> SourceFile:
    """Compose the model routers into the app router, in declaration order.

    Raises NamingCollisionError when two models share a router key or a
    router symbol.
    """
    source = SourceFile(path=APP_ROUTER_PATH)
    source.add_import(ImportDeclaration(module="./helpers/createRouter", named=("t",)))

    keys: dict[str, str] = {}
    symbols: dict[str, str] = {}
    entries: list[RouterEntry] = []
    for model_router in model_routers:
        name = model_router.entity.name
        if not has_endpoints(model_router.operations, model_router.notifications):
            logger.debug("  %s: no endpoints, left out of the app router", name)
            continue

        key = router_key(name)
        symbol = router_symbol(name)
        if key in keys:
            raise NamingCollisionError(key, keys[key], name)
        if symbol in symbols:
            raise NamingCollisionError(symbol, symbols[symbol], name)
        keys[key] = name
        symbols[symbol] = name

        source.add_import(ImportDeclaration(module=f"./{name}.router", named=(symbol,)))
        entries.append(RouterEntry(key=key, router=symbol))

    source.add_statement(RouterDefinition(symbol="appRouter", entries=tuple(entries)))
    return source
