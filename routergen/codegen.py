"""Render documents and write generated output.

``generate`` runs one generation: it validates the options, runs the
delegates, builds every document, renders them through
templates/source_file.ts.j2 and hands the text to an output sink. Option
and client-generator errors abort before the sink is reset; no file reaches
the sink until every document was built.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol, Union

import jinja2

from .config import GeneratorConfig, parse_config
from .context_builder import (
    ModelRouter,
    build_app_router,
    build_create_router_file,
    build_router_file,
)
from .delegates import Delegates, RunContext
from .document import SourceFile
from .gen_logging import get_logger
from .loader import SchemaDocument, find_client_generator
from .naming import resolve_config_path
from .policy import PermissionMatrix, build_permission_matrix, build_policy_file, render_rules
from .schema_parser import notification_operations, resolve_operations, resolve_visibility

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
SOURCE_TEMPLATE = "source_file.ts.j2"


# ---------------------------------------------------------------------------
# Output sinks
# ---------------------------------------------------------------------------

class OutputSink(Protocol):
    def reset(self) -> None: ...

    def create_file(self, path: str, content: str) -> None: ...

    def save(self) -> None: ...


class FileSink:
    """Writes files under a root directory on save()."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self._pending: dict[str, str] = {}

    def reset(self) -> None:
        """Empty the output directory, keeping the directory itself."""
        self.root.mkdir(parents=True, exist_ok=True)
        for child in self.root.iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
        self._pending.clear()

    def create_file(self, path: str, content: str) -> None:
        self._pending[path] = content

    def save(self) -> None:
        for path, content in self._pending.items():
            output_path = self.root / path
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content)
        self._pending.clear()


class MemorySink:
    """Collects rendered files in memory."""

    def __init__(self) -> None:
        self.files: dict[str, str] = {}
        self.saved = False
        self.resets = 0

    def reset(self) -> None:
        self.files.clear()
        self.saved = False
        self.resets += 1

    def create_file(self, path: str, content: str) -> None:
        self.files[path] = content

    def save(self) -> None:
        self.saved = True


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["policy_rules"] = render_rules
    return env


_ENV = _environment()


def render_source_file(source: SourceFile) -> str:
    template = _ENV.get_template(SOURCE_TEMPLATE)
    return template.render(imports=source.imports, statements=source.statements)


# ---------------------------------------------------------------------------
# Generation run
# ---------------------------------------------------------------------------

@dataclass
class GenerationResult:
    config: GeneratorConfig
    sources: list[SourceFile] = field(default_factory=list)
    model_routers: list[ModelRouter] = field(default_factory=list)
    hidden_models: list[str] = field(default_factory=list)
    permissions: Optional[PermissionMatrix] = None

    @property
    def paths(self) -> list[str]:
        return [source.path for source in self.sources]

    def source(self, path: str) -> SourceFile:
        for source in self.sources:
            if source.path == path:
                return source
        raise KeyError(path)


def generate(
    document: SchemaDocument,
    output_dir: Union[str, Path],
    sink: OutputSink,
    options: Union[GeneratorConfig, Mapping[str, Any], None] = None,
    delegates: Optional[Delegates] = None,
) -> GenerationResult:
    """Run one generation of the router layer into ``sink``."""
    if isinstance(options, GeneratorConfig):
        config = options
    else:
        config = parse_config(document.config if options is None else options)
    delegates = delegates or Delegates()
    output_dir = Path(output_dir)

    client = find_client_generator(document)
    logger.debug("Using client generator %r", client.name or client.provider)

    sink.reset()
    context = RunContext(document=document, config=config, output_dir=output_dir)

    if config.with_zod:
        if delegates.validation is None:
            logger.warning("withZod is enabled but no validation delegate is configured; "
                           "schemas/ must be provided externally")
        else:
            logger.info("Running validation delegate")
            delegates.validation(context)

    if config.with_shield:
        if delegates.policy_starter is None:
            logger.warning("withShield is enabled but no policy-starter delegate is configured")
        else:
            logger.info("Running policy-starter delegate")
            delegates.policy_starter(context.for_policy_starter(
                output_dir / "shield",
                resolve_config_path(output_dir, config.context_path),
            ))

    visible, hidden = resolve_visibility(document.entities)
    result = GenerationResult(config=config, hidden_models=hidden)

    result.sources.append(build_create_router_file(config, output_dir))

    for entity in visible:
        operations = resolve_operations(document.mapping_for(entity.name), config.allowed_actions)
        notifications = notification_operations()
        model_router = ModelRouter(entity=entity, operations=operations, notifications=notifications)
        model_router.source = build_router_file(entity, operations, notifications, config, output_dir)
        result.model_routers.append(model_router)
        result.sources.append(model_router.source)

    if config.with_shield:
        result.permissions = build_permission_matrix(visible)
        result.sources.append(build_policy_file(result.permissions, config, output_dir))

    result.sources.append(build_app_router(result.model_routers))

    rendered = [(source.path, render_source_file(source)) for source in result.sources]
    for path, content in rendered:
        sink.create_file(path, content)
    sink.save()

    logger.info(
        "Generated %d files (%d routers, %d hidden models) in %s",
        len(rendered), len(result.model_routers), len(hidden), output_dir,
    )
    return result
