"""Validation and policy-starter delegates.

Both are external generators run before the router documents are built:

  - the validation delegate must leave a zod schema module per
    (model, operation) at schemas/<operation><Model>.schema
  - the policy-starter delegate scaffolds the shield directory that
    shield/shield.ts is written into

A delegate is any callable taking a RunContext. Exceptions it raises abort
the run unchanged.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Optional

from .config import GeneratorConfig
from .errors import DelegateLoadError
from .loader import SchemaDocument


@dataclass(frozen=True)
class RunContext:
    document: SchemaDocument
    config: GeneratorConfig
    output_dir: Path
    # Resolved location of the Context type, set for the policy starter
    context_path: Optional[str] = None

    def for_policy_starter(self, shield_dir: Path, context_path: str) -> RunContext:
        return replace(self, output_dir=shield_dir, context_path=context_path)


Delegate = Callable[[RunContext], None]


@dataclass(frozen=True)
class Delegates:
    validation: Optional[Delegate] = None
    policy_starter: Optional[Delegate] = None


def load_delegate(reference: str) -> Delegate:
    """Import a delegate from a ``package.module:callable`` reference."""
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise DelegateLoadError(
            f"Delegate reference {reference!r} must look like 'package.module:callable'"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise DelegateLoadError(f"Cannot import delegate module {module_name!r}: {exc}") from exc

    target = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise DelegateLoadError(f"{module_name!r} has no attribute {attribute!r}") from exc
    if not callable(target):
        raise DelegateLoadError(f"Delegate {reference!r} is not callable")
    return target
