"""Operation kinds understood by the generator.

Two vocabularies are involved:

  - ModelOperation: keys of the client's per-model mapping table
    (findUnique, createOne, upsertOne, ...).
  - ModelAction: the allow-list vocabulary used in configuration
    (findUnique, create, upsert, ...). A ModelOperation maps onto its
    ModelAction by stripping a trailing "One" or "OrThrow".

Every table below is keyed by the full enum so a new kind fails loudly
(tests assert exhaustiveness) instead of silently dropping out of a branch.
"""

from __future__ import annotations

from enum import Enum


class EndpointCategory(str, Enum):
    """tRPC procedure categories."""

    QUERY = "query"
    MUTATION = "mutation"
    SUBSCRIPTION = "subscription"


class ModelAction(str, Enum):
    """Operation kinds accepted by the generateModelActions allow-list."""

    FIND_UNIQUE = "findUnique"
    FIND_UNIQUE_OR_THROW = "findUniqueOrThrow"
    FIND_FIRST = "findFirst"
    FIND_FIRST_OR_THROW = "findFirstOrThrow"
    FIND_MANY = "findMany"
    CREATE = "create"
    CREATE_MANY = "createMany"
    UPDATE = "update"
    UPDATE_MANY = "updateMany"
    UPSERT = "upsert"
    DELETE = "delete"
    DELETE_MANY = "deleteMany"
    GROUP_BY = "groupBy"
    COUNT = "count"
    AGGREGATE = "aggregate"
    FIND_RAW = "findRaw"
    AGGREGATE_RAW = "aggregateRaw"


class ModelOperation(str, Enum):
    """Keys of a model's operation mapping table."""

    FIND_UNIQUE = "findUnique"
    FIND_UNIQUE_OR_THROW = "findUniqueOrThrow"
    FIND_FIRST = "findFirst"
    FIND_FIRST_OR_THROW = "findFirstOrThrow"
    FIND_MANY = "findMany"
    CREATE_ONE = "createOne"
    CREATE_MANY = "createMany"
    UPDATE_ONE = "updateOne"
    UPDATE_MANY = "updateMany"
    UPSERT_ONE = "upsertOne"
    DELETE_ONE = "deleteOne"
    DELETE_MANY = "deleteMany"
    AGGREGATE = "aggregate"
    GROUP_BY = "groupBy"
    COUNT = "count"
    FIND_RAW = "findRaw"
    AGGREGATE_RAW = "aggregateRaw"

    @property
    def action(self) -> ModelAction:
        """Allow-list kind: trailing One/OrThrow stripped."""
        return ModelAction(_strip_suffix(_strip_suffix(self.value, "OrThrow"), "One"))

    @property
    def base(self) -> ModelOperation:
        """The operation an OrThrow variant shares its input type with."""
        return ModelOperation(_strip_suffix(self.value, "OrThrow"))

    @property
    def category(self) -> EndpointCategory:
        return OPERATION_CATEGORIES[self]

    @property
    def client_method(self) -> str:
        """Method name on the client delegate (createOne -> create)."""
        return self.value.replace("One", "", 1)


def _strip_suffix(value: str, suffix: str) -> str:
    if value.endswith(suffix):
        return value[: -len(suffix)]
    return value


_Q = EndpointCategory.QUERY
_M = EndpointCategory.MUTATION

OPERATION_CATEGORIES: dict[ModelOperation, EndpointCategory] = {
    ModelOperation.FIND_UNIQUE: _Q,
    ModelOperation.FIND_UNIQUE_OR_THROW: _Q,
    ModelOperation.FIND_FIRST: _Q,
    ModelOperation.FIND_FIRST_OR_THROW: _Q,
    ModelOperation.FIND_MANY: _Q,
    ModelOperation.CREATE_ONE: _M,
    ModelOperation.CREATE_MANY: _M,
    ModelOperation.UPDATE_ONE: _M,
    ModelOperation.UPDATE_MANY: _M,
    ModelOperation.UPSERT_ONE: _M,
    ModelOperation.DELETE_ONE: _M,
    ModelOperation.DELETE_MANY: _M,
    ModelOperation.AGGREGATE: _Q,
    ModelOperation.GROUP_BY: _Q,
    ModelOperation.COUNT: _Q,
    ModelOperation.FIND_RAW: _Q,
    ModelOperation.AGGREGATE_RAW: _Q,
}

# Zod schema symbol suffix per base operation: <Entity><suffix>.
INPUT_SCHEMA_SUFFIXES: dict[ModelOperation, str] = {
    ModelOperation.FIND_UNIQUE: "FindUniqueSchema",
    ModelOperation.FIND_UNIQUE_OR_THROW: "FindUniqueSchema",
    ModelOperation.FIND_FIRST: "FindFirstSchema",
    ModelOperation.FIND_FIRST_OR_THROW: "FindFirstSchema",
    ModelOperation.FIND_MANY: "FindManySchema",
    ModelOperation.CREATE_ONE: "CreateOneSchema",
    ModelOperation.CREATE_MANY: "CreateManySchema",
    ModelOperation.UPDATE_ONE: "UpdateOneSchema",
    ModelOperation.UPDATE_MANY: "UpdateManySchema",
    ModelOperation.UPSERT_ONE: "UpsertSchema",
    ModelOperation.DELETE_ONE: "DeleteOneSchema",
    ModelOperation.DELETE_MANY: "DeleteManySchema",
    ModelOperation.AGGREGATE: "AggregateSchema",
    ModelOperation.GROUP_BY: "GroupBySchema",
    ModelOperation.COUNT: "CountSchema",
    ModelOperation.FIND_RAW: "FindRawObjectSchema",
    ModelOperation.AGGREGATE_RAW: "AggregateRawObjectSchema",
}

# Arguments forwarded to the client call. None forwards the whole input.
CALL_ARGUMENTS: dict[ModelOperation, tuple[str, ...] | None] = {
    ModelOperation.FIND_UNIQUE: ("where",),
    ModelOperation.FIND_UNIQUE_OR_THROW: ("where",),
    ModelOperation.FIND_FIRST: None,
    ModelOperation.FIND_FIRST_OR_THROW: None,
    ModelOperation.FIND_MANY: None,
    ModelOperation.CREATE_ONE: ("data",),
    ModelOperation.CREATE_MANY: None,
    ModelOperation.UPDATE_ONE: ("where", "data"),
    ModelOperation.UPDATE_MANY: None,
    ModelOperation.UPSERT_ONE: ("where", "create", "update"),
    ModelOperation.DELETE_ONE: ("where",),
    ModelOperation.DELETE_MANY: None,
    ModelOperation.AGGREGATE: None,
    ModelOperation.GROUP_BY: ("where", "orderBy", "by", "having", "take", "skip"),
    ModelOperation.COUNT: None,
    ModelOperation.FIND_RAW: None,
    ModelOperation.AGGREGATE_RAW: None,
}

# Change events published on the shared emitter, one subscription each.
NOTIFICATION_EVENTS: tuple[str, ...] = ("create", "update", "delete")

# Canonical operation names used for the default permission matrix.
POLICY_QUERIES: tuple[str, ...] = ("aggregate", "findFirst", "findMany", "findUnique", "groupBy")
POLICY_MUTATIONS: tuple[str, ...] = (
    "createOne",
    "deleteMany",
    "deleteOne",
    "updateMany",
    "updateOne",
    "upsertOne",
)
