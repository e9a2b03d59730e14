"""Shared fixtures: schema documents and an in-memory output sink.

``make_schema`` builds the decoded JSON structure the loader accepts, with a
full operation mapping table per model unless one is given explicitly.
"""

from __future__ import annotations

from typing import Any

import pytest

from routergen.codegen import MemorySink
from routergen.config import parse_config
from routergen.loader import parse_schema

OUTPUT_DIR = "/repo/prisma/generated"

HIDE_MARKER = "@@Gen.model(hide: true)"

# Mapping keys in the order the client lists them
MAPPING_KEYS = [
    "findUnique",
    "findUniqueOrThrow",
    "findFirst",
    "findFirstOrThrow",
    "findMany",
    "createOne",
    "createMany",
    "updateOne",
    "updateMany",
    "upsertOne",
    "deleteOne",
    "deleteMany",
    "aggregate",
    "groupBy",
    "count",
]

# Paths chosen so every relative import stays inside /repo
TEST_OPTIONS: dict[str, Any] = {
    "contextPath": "../../src/context",
    "emitterPath": "../../src/emitter",
}


def model_operations(model: str) -> dict[str, Any]:
    """Full mapping table entry, named the way the client names them."""
    entry: dict[str, Any] = {"model": model, "plural": model.lower() + "s"}
    for key in MAPPING_KEYS:
        if key.endswith("OrThrow"):
            entry[key] = f"{key[:-len('OrThrow')]}{model}OrThrow"
        else:
            entry[key] = f"{key}{model}"
    return entry


def make_model(name: str, documentation: str | None = None) -> dict[str, Any]:
    model: dict[str, Any] = {
        "name": name,
        "fields": [
            {"name": "id", "kind": "scalar", "type": "Int", "isList": False, "isRequired": True},
            {"name": "name", "kind": "scalar", "type": "String", "isList": False, "isRequired": False},
        ],
    }
    if documentation is not None:
        model["documentation"] = documentation
    return model


def make_schema(
    models: list[dict[str, Any]],
    operations: list[dict[str, Any]] | None = None,
    generators: list[dict[str, Any]] | None = None,
    config: dict[str, Any] | None = None,
) -> dict[str, Any]:
    if operations is None:
        operations = [model_operations(model["name"]) for model in models]
    if generators is None:
        generators = [
            {"name": "client", "provider": {"value": "prisma-client-js", "fromEnvVar": None}},
            {"name": "trpc", "provider": {"value": "routergen", "fromEnvVar": None}},
        ]
    return {
        "generators": generators,
        "datamodel": {"models": models},
        "mappings": {"modelOperations": operations},
        "schemaPath": "/repo/prisma/schema.prisma",
        "config": config or {},
    }


def make_config(**overrides: Any):
    options = dict(TEST_OPTIONS)
    options.update(overrides)
    return parse_config(options)


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def blog_document():
    """User and Post, plus a hidden Secret."""
    return parse_schema(make_schema([
        make_model("User"),
        make_model("Post", documentation="A blog post"),
        make_model("Secret", documentation=f"Internal only\n{HIDE_MARKER}"),
    ]))


@pytest.fixture
def default_config():
    return make_config()
