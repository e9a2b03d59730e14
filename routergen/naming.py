"""Names and import paths of generated code.

Pattern, for model User:
  - collection       -> users            (router symbol usersRouter)
  - endpoint         -> findManyUser     (declared name, or the kind itself)
  - procedure key    -> findManyUser     (findMany with showModelNameInProcedure=false)
  - input schema     -> UserFindManySchema from ../schemas/findManyUser.schema
  - client accessor  -> ctx.prisma.user

Pluralization is linguistic, not suffixing:
  Category -> categories
  Person   -> people
"""

from __future__ import annotations

import posixpath
from pathlib import PurePath
from typing import Optional, Union

from pluralizer import Pluralizer

from .operations import INPUT_SCHEMA_SUFFIXES, ModelOperation

_pluralizer = Pluralizer()

_MODULE_EXTENSIONS = (".ts", ".tsx", ".js", ".mjs", ".cjs")


def collection_name(entity_name: str) -> str:
    """Plural of the lower-cased model name."""
    return _pluralizer.pluralize(entity_name.lower())


def router_symbol(entity_name: str) -> str:
    return f"{collection_name(entity_name)}Router"


def router_key(entity_name: str) -> str:
    """Key of the model's router inside the app router."""
    return entity_name.lower()


def endpoint_name(operation: Union[ModelOperation, str], declared_name: Optional[str]) -> str:
    """Declared operation name, falling back to the operation kind."""
    if declared_name:
        return declared_name
    return getattr(operation, "value", operation)


def procedure_key(name: str, entity_name: str, show_model_name: bool = True) -> str:
    if show_model_name:
        return name
    return name.replace(entity_name, "", 1) or name


def input_type_reference(
    base_operation: Optional[ModelOperation],
    entity_name: str,
    with_zod: bool = True,
) -> str:
    """Zod schema symbol validating the operation's input.

    Empty when validation is disabled or for notification endpoints
    (base_operation None).
    """
    if not with_zod or base_operation is None:
        return ""
    return f"{entity_name}{INPUT_SCHEMA_SUFFIXES[base_operation]}"


def schema_module(base_operation: ModelOperation, entity_name: str) -> str:
    """Module the validation delegate emits the operation's schema into."""
    return f"../schemas/{base_operation.value}{entity_name}.schema"


def event_channel(entity_name: str, event: str) -> str:
    return f"{entity_name}:{event}"


def uncapitalize(name: str) -> str:
    return name[:1].lower() + name[1:]


def relative_import_path(
    from_dir: Union[str, PurePath],
    to_path: Union[str, PurePath],
) -> str:
    """Module specifier for ``to_path`` as imported from a file in ``from_dir``.

    Always posix separators, always a leading ./ or ../, no file extension.
    """
    source = posixpath.normpath(PurePath(from_dir).as_posix())
    target = posixpath.normpath(PurePath(to_path).as_posix())
    for extension in _MODULE_EXTENSIONS:
        if target.endswith(extension):
            target = target[: -len(extension)]
            break
    relative = posixpath.relpath(target, source)
    if relative == ".":
        return "./"
    if relative == ".." or relative.startswith("../"):
        return relative
    return f"./{relative}"


def resolve_config_path(output_dir: Union[str, PurePath], configured: str) -> str:
    """Configured paths are relative to the output directory unless absolute."""
    configured_path = PurePath(configured)
    if configured_path.is_absolute():
        return configured_path.as_posix()
    return posixpath.normpath(posixpath.join(PurePath(output_dir).as_posix(), configured_path.as_posix()))
