"""Structured representation of a generated TypeScript file.

Builders append import declarations and statement nodes to a SourceFile;
codegen renders the finished document through templates/source_file.ts.j2.
Each node carries a ``kind`` the template dispatches on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Union

from .operations import EndpointCategory


@dataclass(frozen=True)
class ImportDeclaration:
    kind: ClassVar[str] = "import"

    module: str
    named: tuple[str, ...] = ()
    namespace: Optional[str] = None
    default: Optional[str] = None
    type_only: bool = False


@dataclass(frozen=True)
class TrpcInit:
    """export const t = trpc.initTRPC.context<Context>().create(options)"""

    kind: ClassVar[str] = "trpc_init"

    context_type: str = "Context"
    options: Optional[str] = None


@dataclass(frozen=True)
class Middleware:
    """export const <name> = t.middleware(<handler>)

    ``handler`` None renders the inline pass-through middleware.
    """

    kind: ClassVar[str] = "middleware"

    name: str
    handler: Optional[str] = None


@dataclass(frozen=True)
class BaseProcedure:
    kind: ClassVar[str] = "base_procedure"

    name: str
    middlewares: tuple[str, ...] = ()


@dataclass(frozen=True)
class Procedure:
    """A query or mutation dispatching to one client operation."""

    kind: ClassVar[str] = "procedure"

    key: str
    category: EndpointCategory
    base_procedure: str
    result_name: str
    client_accessor: str
    client_method: str
    input_type: str = ""
    # None forwards the whole input object, an empty tuple calls without arguments
    call_arguments: Optional[tuple[str, ...]] = None
    # Mutations publish their result on this channel
    event_channel: Optional[str] = None

    @property
    def call_expression(self) -> str:
        if self.call_arguments is None:
            return "input"
        if not self.call_arguments:
            return ""
        pairs = ", ".join(f"{name}: input.{name}" for name in self.call_arguments)
        return f"{{ {pairs} }}"


@dataclass(frozen=True)
class Subscription:
    """A long-lived listener on one emitter channel."""

    kind: ClassVar[str] = "subscription"

    key: str
    base_procedure: str
    payload_type: str
    channel: str
    listener: str

    @property
    def category(self) -> EndpointCategory:
        return EndpointCategory.SUBSCRIPTION


Endpoint = Union[Procedure, Subscription]


@dataclass(frozen=True)
class RouterEntry:
    key: str
    router: str


@dataclass(frozen=True)
class RouterDefinition:
    """export const <symbol> = t.router({ ... })"""

    kind: ClassVar[str] = "router"

    symbol: str
    endpoints: tuple[Endpoint, ...] = ()
    entries: tuple[RouterEntry, ...] = ()


@dataclass(frozen=True)
class PolicyDefinition:
    """export const <symbol> = shield<Context>({...})"""

    kind: ClassVar[str] = "policy"

    symbol: str
    context_type: str
    rules: dict[str, dict[str, str]] = field(default_factory=dict, hash=False)


Statement = Union[TrpcInit, Middleware, BaseProcedure, RouterDefinition, PolicyDefinition]


@dataclass
class SourceFile:
    """One generated file: path relative to the output directory."""

    path: str
    imports: list[ImportDeclaration] = field(default_factory=list)
    statements: list[Statement] = field(default_factory=list)

    def add_import(self, declaration: ImportDeclaration) -> None:
        if declaration not in self.imports:
            self.imports.append(declaration)

    def add_statement(self, statement: Statement) -> None:
        self.statements.append(statement)

    def import_for(self, module: str) -> Optional[ImportDeclaration]:
        for declaration in self.imports:
            if declaration.module == module:
                return declaration
        return None

    @property
    def routers(self) -> list[RouterDefinition]:
        return [s for s in self.statements if isinstance(s, RouterDefinition)]

    @property
    def endpoints(self) -> list[Endpoint]:
        return [endpoint for router in self.routers for endpoint in router.endpoints]
