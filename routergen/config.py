"""Generator options.

Options arrive as the string key/value pairs of a generator block
(``withZod = "false"``) or as native JSON values from a config file. They
are validated once by ``parse_config`` and the resulting frozen
``GeneratorConfig`` is passed to every stage unchanged.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import ConfigurationError
from .operations import ModelAction

DEFAULT_CONTEXT_PATH = "../../../../src/context"
DEFAULT_EMITTER_PATH = "../../../../src/emitter"

_BOOLEAN_STRINGS = {"true": True, "false": False}


def _coerce_boolean_string(value: Any) -> Any:
    if isinstance(value, str) and value.strip().lower() in _BOOLEAN_STRINGS:
        return _BOOLEAN_STRINGS[value.strip().lower()]
    return value


class GeneratorConfig(BaseModel):
    """Validated run configuration."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    with_zod: bool = True
    with_shield: bool = True
    # True for the inline global middleware, or an import path to a custom one
    with_middleware: Union[bool, str] = True
    context_path: str = DEFAULT_CONTEXT_PATH
    emitter_path: str = DEFAULT_EMITTER_PATH
    trpc_options_path: Optional[str] = None
    show_model_name_in_procedure: bool = True
    generate_model_actions: Tuple[ModelAction, ...] = tuple(ModelAction)

    @field_validator("with_zod", "with_shield", "show_model_name_in_procedure", mode="before")
    @classmethod
    def _parse_boolean(cls, value: Any) -> Any:
        return _coerce_boolean_string(value)

    @field_validator("with_middleware", mode="before")
    @classmethod
    def _parse_middleware(cls, value: Any) -> Any:
        value = _coerce_boolean_string(value)
        if isinstance(value, str) and not value.strip():
            raise ValueError("withMiddleware must be true, false or a module path")
        return value

    @field_validator("context_path", "emitter_path")
    @classmethod
    def _non_empty_path(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("path must not be empty")
        return value.strip()

    @field_validator("trpc_options_path", mode="before")
    @classmethod
    def _optional_path(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("generate_model_actions", mode="before")
    @classmethod
    def _split_actions(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [part.strip() for part in value.split(",") if part.strip()]
        return value

    @property
    def allowed_actions(self) -> frozenset[str]:
        return frozenset(action.value for action in self.generate_model_actions)


def parse_config(raw: Optional[Mapping[str, Any]] = None) -> GeneratorConfig:
    """Validate raw generator options, raising ConfigurationError on failure."""
    try:
        return GeneratorConfig.model_validate(dict(raw or {}))
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'config'}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigurationError(f"Invalid options passed: {problems}") from exc
