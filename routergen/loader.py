"""Load the pre-parsed schema document.

The document is the JSON dump of the client's data model description:
declared generators, models with their fields and documentation comments,
and the per-model operation mapping table. Parsing the schema language
itself happens upstream.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .errors import MissingClientGeneratorError, SchemaLoadError
from .gen_logging import get_logger
from .operations import ModelOperation

logger = get_logger(__name__)

CLIENT_PROVIDER = "prisma-client-js"


@dataclass(frozen=True)
class Field:
    name: str
    kind: str = "scalar"
    type: str = "String"
    is_list: bool = False
    is_required: bool = True


@dataclass(frozen=True)
class Entity:
    """A model from the data model description."""

    name: str
    fields: tuple[Field, ...] = ()
    documentation: Optional[str] = None


@dataclass(frozen=True)
class OperationMapping:
    """Declared operation names of one model, in declaration order."""

    model: str
    operations: tuple[tuple[ModelOperation, Optional[str]], ...] = ()

    def declared_name(self, operation: ModelOperation) -> Optional[str]:
        for declared, name in self.operations:
            if declared is operation:
                return name
        return None


@dataclass(frozen=True)
class GeneratorDeclaration:
    name: str
    provider: str
    preview_features: tuple[str, ...] = ()


@dataclass(frozen=True)
class SchemaDocument:
    entities: tuple[Entity, ...]
    mappings: tuple[OperationMapping, ...]
    generators: tuple[GeneratorDeclaration, ...] = ()
    schema_path: Optional[str] = None
    config: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    def mapping_for(self, model: str) -> OperationMapping:
        for mapping in self.mappings:
            if mapping.model == model:
                return mapping
        return OperationMapping(model=model)


def load_schema(path: Path) -> SchemaDocument:
    """Read and parse a schema document from disk."""
    try:
        with open(path) as f:
            raw = json.load(f)
    except OSError as exc:
        raise SchemaLoadError(f"Cannot read schema document {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise SchemaLoadError(f"Schema document {path} is not valid JSON: {exc}") from exc
    return parse_schema(raw)


def parse_schema(raw: Any) -> SchemaDocument:
    """Build a SchemaDocument from the decoded JSON structure."""
    if not isinstance(raw, dict):
        raise SchemaLoadError("Schema document must be a JSON object")

    models = _section(raw, "datamodel").get("models")
    if not isinstance(models, list):
        raise SchemaLoadError("Schema document has no datamodel.models list")

    entities = tuple(_parse_entity(model) for model in models)
    names = [entity.name for entity in entities]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise SchemaLoadError(f"Duplicate model names: {', '.join(duplicates)}")

    model_operations = _section(raw, "mappings").get("modelOperations") or []
    if not isinstance(model_operations, list):
        raise SchemaLoadError("mappings.modelOperations must be a list")
    mappings = tuple(_parse_mapping(entry) for entry in model_operations)

    generators = tuple(_parse_generator(gen) for gen in raw.get("generators") or [])

    return SchemaDocument(
        entities=entities,
        mappings=mappings,
        generators=generators,
        schema_path=raw.get("schemaPath"),
        config=dict(_section(raw, "config")),
    )


def find_client_generator(document: SchemaDocument) -> GeneratorDeclaration:
    """Return the client generator the entity types are imported from."""
    for generator in document.generators:
        if generator.provider == CLIENT_PROVIDER:
            return generator
    raise MissingClientGeneratorError([g.provider for g in document.generators])


def _section(raw: dict, key: str) -> dict:
    section = raw.get(key) or {}
    if not isinstance(section, dict):
        raise SchemaLoadError(f"Schema document {key} must be an object, got {type(section).__name__}")
    return section


def _parse_generator(gen: Any) -> GeneratorDeclaration:
    if not isinstance(gen, dict):
        raise SchemaLoadError(f"Generator entry must be an object: {gen!r}")
    return GeneratorDeclaration(
        name=gen.get("name", ""),
        provider=_provider_value(gen.get("provider", "")),
        preview_features=tuple(gen.get("previewFeatures") or []),
    )


def _provider_value(provider: Any) -> str:
    # Generator blocks may carry env-backed values: {"value": ..., "fromEnvVar": ...}
    if isinstance(provider, dict):
        return provider.get("value") or ""
    return provider


def _parse_entity(model: Any) -> Entity:
    if not isinstance(model, dict) or not model.get("name"):
        raise SchemaLoadError(f"Model entry without a name: {model!r}")
    fields = tuple(_parse_field(model["name"], f) for f in model.get("fields") or [])
    return Entity(name=model["name"], fields=fields, documentation=model.get("documentation"))


def _parse_field(model_name: str, raw_field: Any) -> Field:
    if not isinstance(raw_field, dict) or not raw_field.get("name"):
        raise SchemaLoadError(f"Model {model_name} has a field without a name: {raw_field!r}")
    return Field(
        name=raw_field["name"],
        kind=raw_field.get("kind", "scalar"),
        type=raw_field.get("type", "String"),
        is_list=raw_field.get("isList", False),
        is_required=raw_field.get("isRequired", True),
    )


def _parse_mapping(entry: Any) -> OperationMapping:
    if not isinstance(entry, dict) or not entry.get("model"):
        raise SchemaLoadError(f"Operation mapping without a model: {entry!r}")

    operations: list[tuple[ModelOperation, Optional[str]]] = []
    for key, name in entry.items():
        if key == "model":
            continue
        try:
            operation = ModelOperation(key)
        except ValueError:
            logger.debug("  %s: ignoring mapping key %r", entry["model"], key)
            continue
        # Null names fall back to the operation kind when naming endpoints
        operations.append((operation, name))
    return OperationMapping(model=entry["model"], operations=tuple(operations))
