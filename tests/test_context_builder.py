"""Tests for the context_builder module (bootstrap, model routers, app router)."""

import pytest

from routergen.context_builder import (
    APP_ROUTER_PATH,
    CREATE_ROUTER_PATH,
    ModelRouter,
    build_app_router,
    build_create_router_file,
    build_router_file,
    router_path,
)
from routergen.document import Procedure, Subscription
from routergen.errors import NamingCollisionError
from routergen.loader import Entity
from routergen.operations import EndpointCategory, ModelOperation
from routergen.schema_parser import ResolvedOperation, notification_operations

from conftest import OUTPUT_DIR, make_config


def _resolved(*operations: ModelOperation, model: str = "User") -> list[ResolvedOperation]:
    return [ResolvedOperation(operation=op, declared_name=f"{op.value}{model}") for op in operations]


def _router(entity_name: str, operations=None, config=None):
    config = config or make_config()
    return build_router_file(
        Entity(name=entity_name),
        operations if operations is not None else _resolved(model=entity_name),
        notification_operations(),
        config,
        OUTPUT_DIR,
    )


class TestCreateRouterFile:
    """The bootstrap every model router imports."""

    def test_path(self):
        assert build_create_router_file(make_config(), OUTPUT_DIR).path == CREATE_ROUTER_PATH

    def test_context_import(self):
        source = build_create_router_file(make_config(), OUTPUT_DIR)
        context = source.import_for("../../../../src/context")
        assert context is not None
        assert context.named == ("Context",)
        assert context.type_only

    def test_shield_import_and_procedure(self):
        source = build_create_router_file(make_config(withShield=True), OUTPUT_DIR)
        assert source.import_for("../../shield/shield").named == ("permissions",)
        names = [getattr(s, "name", None) for s in source.statements]
        assert "permissionsMiddleware" in names
        assert "shieldedProcedure" in names
        shielded = [s for s in source.statements if getattr(s, "name", None) == "shieldedProcedure"][0]
        assert shielded.middlewares == ("globalMiddleware", "permissionsMiddleware")

    def test_no_shield(self):
        source = build_create_router_file(make_config(withShield=False), OUTPUT_DIR)
        assert source.import_for("../../shield/shield") is None
        names = [getattr(s, "name", None) for s in source.statements]
        assert "shieldedProcedure" not in names
        assert "publicProcedure" in names

    def test_without_middleware(self):
        source = build_create_router_file(make_config(withMiddleware=False, withShield=False), OUTPUT_DIR)
        public = [s for s in source.statements if getattr(s, "name", None) == "publicProcedure"][0]
        assert public.middlewares == ()

    def test_custom_middleware(self):
        config = make_config(withMiddleware="../../src/middleware", withShield=False)
        source = build_create_router_file(config, OUTPUT_DIR)
        assert source.import_for("../../../../src/middleware").default == "defaultMiddleware"
        middleware = [s for s in source.statements if getattr(s, "name", None) == "globalMiddleware"][0]
        assert middleware.handler == "defaultMiddleware"

    def test_trpc_options(self):
        config = make_config(trpcOptionsPath="../../src/trpcOptions")
        source = build_create_router_file(config, OUTPUT_DIR)
        assert source.import_for("../../../../src/trpcOptions").default == "trpcOptions"
        assert source.statements[0].options == "trpcOptions"


class TestRouterFile:
    """One router document per model."""

    def test_path_and_symbol(self):
        source = _router("User", _resolved(ModelOperation.FIND_MANY))
        assert source.path == router_path("User") == "routers/User.router.ts"
        assert source.routers[0].symbol == "usersRouter"

    def test_one_procedure_per_operation_plus_three_subscriptions(self):
        ops = _resolved(ModelOperation.FIND_MANY, ModelOperation.CREATE_ONE, ModelOperation.DELETE_MANY)
        source = _router("User", ops)
        procedures = [e for e in source.endpoints if isinstance(e, Procedure)]
        subscriptions = [e for e in source.endpoints if isinstance(e, Subscription)]
        assert [p.key for p in procedures] == ["findManyUser", "createOneUser", "deleteManyUser"]
        assert [s.key for s in subscriptions] == ["create", "update", "delete"]

    def test_procedures_precede_subscriptions(self):
        source = _router("User", _resolved(ModelOperation.FIND_MANY, ModelOperation.UPDATE_ONE))
        categories = [e.category for e in source.endpoints]
        assert categories == [
            EndpointCategory.QUERY,
            EndpointCategory.MUTATION,
            EndpointCategory.SUBSCRIPTION,
            EndpointCategory.SUBSCRIPTION,
            EndpointCategory.SUBSCRIPTION,
        ]

    def test_empty_operations_still_subscribe(self):
        source = _router("User", [])
        assert [e.key for e in source.endpoints] == ["create", "update", "delete"]

    def test_mutation_publishes_action_event(self):
        source = _router("User", _resolved(ModelOperation.CREATE_ONE, ModelOperation.UPDATE_MANY))
        create, update_many = source.endpoints[:2]
        assert create.event_channel == "User:create"
        assert update_many.event_channel == "User:updateMany"

    def test_query_does_not_publish(self):
        source = _router("User", _resolved(ModelOperation.FIND_MANY))
        assert source.endpoints[0].event_channel is None

    def test_subscription_channels(self):
        source = _router("User", [])
        assert [s.channel for s in source.endpoints] == ["User:create", "User:update", "User:delete"]
        assert source.endpoints[0].listener == "onCreate"
        assert source.endpoints[0].payload_type == "User"

    def test_client_call(self):
        source = _router("BlogPost", _resolved(ModelOperation.UPDATE_ONE, model="BlogPost"))
        procedure = source.endpoints[0]
        assert procedure.client_accessor == "blogPost"
        assert procedure.client_method == "update"
        assert procedure.call_expression == "{ where: input.where, data: input.data }"

    def test_find_many_forwards_input(self):
        source = _router("User", _resolved(ModelOperation.FIND_MANY))
        assert source.endpoints[0].call_expression == "input"

    def test_no_call_arguments_without_zod(self):
        ops = _resolved(ModelOperation.FIND_MANY, ModelOperation.UPDATE_ONE)
        source = _router("User", ops, make_config(withZod=False))
        assert [p.call_arguments for p in source.endpoints[:2]] == [(), ()]
        assert [p.call_expression for p in source.endpoints[:2]] == ["", ""]

    def test_schema_imports_with_zod(self):
        ops = _resolved(ModelOperation.FIND_UNIQUE, ModelOperation.FIND_UNIQUE_OR_THROW, ModelOperation.CREATE_ONE)
        source = _router("User", ops, make_config(withZod=True))
        schema_imports = [i for i in source.imports if i.module.startswith("../schemas/")]
        assert [(i.module, i.named) for i in schema_imports] == [
            ("../schemas/findUniqueUser.schema", ("UserFindUniqueSchema",)),
            ("../schemas/createOneUser.schema", ("UserCreateOneSchema",)),
        ]
        assert source.endpoints[1].input_type == "UserFindUniqueSchema"

    def test_no_schema_imports_without_zod(self):
        source = _router("User", _resolved(ModelOperation.FIND_MANY), make_config(withZod=False))
        assert not [i for i in source.imports if i.module.startswith("../schemas/")]
        assert source.endpoints[0].input_type == ""

    def test_import_order(self):
        source = _router("User", _resolved(ModelOperation.FIND_MANY), make_config(withZod=True))
        assert [i.module for i in source.imports] == [
            "./helpers/createRouter",
            "../schemas/findManyUser.schema",
            "@prisma/client",
            "@trpc/server/observable",
            "../../../src/emitter",
        ]

    def test_base_procedure_follows_shield(self):
        shielded = _router("User", _resolved(ModelOperation.FIND_MANY), make_config(withShield=True))
        public = _router("User", _resolved(ModelOperation.FIND_MANY), make_config(withShield=False))
        assert shielded.imports[0].named == ("t", "shieldedProcedure")
        assert {e.base_procedure for e in shielded.endpoints} == {"shieldedProcedure"}
        assert public.imports[0].named == ("t", "publicProcedure")

    def test_hide_model_name_in_keys(self):
        config = make_config(showModelNameInProcedure="false")
        source = _router("User", _resolved(ModelOperation.FIND_MANY), config)
        assert source.endpoints[0].key == "findMany"
        assert source.endpoints[0].result_name == "findManyUser"

    def test_missing_declared_name_uses_kind(self):
        ops = [ResolvedOperation(operation=ModelOperation.COUNT, declared_name=None)]
        source = _router("User", ops)
        assert source.endpoints[0].key == "count"


class TestAppRouter:
    """Composition of the model routers."""

    def _model_router(self, name, operations=None, notifications=None):
        return ModelRouter(
            entity=Entity(name=name),
            operations=operations or [],
            notifications=notification_operations() if notifications is None else notifications,
        )

    def test_entries_in_declaration_order(self):
        source = build_app_router([self._model_router("User"), self._model_router("Post")])
        assert source.path == APP_ROUTER_PATH
        entries = source.routers[0].entries
        assert [(e.key, e.router) for e in entries] == [("user", "usersRouter"), ("post", "postsRouter")]
        assert source.routers[0].symbol == "appRouter"

    def test_imports(self):
        source = build_app_router([self._model_router("Category"), self._model_router("Person")])
        assert [(i.module, i.named) for i in source.imports] == [
            ("./helpers/createRouter", ("t",)),
            ("./Category.router", ("categoriesRouter",)),
            ("./Person.router", ("peopleRouter",)),
        ]

    def test_model_without_endpoints_left_out(self):
        source = build_app_router([
            self._model_router("User"),
            self._model_router("Empty", notifications=[]),
        ])
        assert [e.key for e in source.routers[0].entries] == ["user"]

    def test_duplicate_router_symbol(self):
        with pytest.raises(NamingCollisionError, match="peopleRouter"):
            build_app_router([self._model_router("Person"), self._model_router("People")])

    def test_duplicate_key(self):
        with pytest.raises(NamingCollisionError, match="'user'"):
            build_app_router([self._model_router("User"), self._model_router("USER")])
