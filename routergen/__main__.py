"""Entry point: python -m routergen SCHEMA -o OUTPUT_DIR

Reads a pre-parsed schema document (JSON), generates the tRPC router layer
into OUTPUT_DIR.
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from .codegen import FileSink, generate
from .delegates import Delegates, load_delegate
from .errors import RouterGenError
from .gen_logging import configure_gen_logging
from .loader import load_schema


def _parse_assignments(values: tuple[str, ...]) -> dict[str, str]:
    options: dict[str, str] = {}
    for value in values:
        key, sep, raw = value.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected key=value, got {value!r}", param_hint="--set")
        options[key.strip()] = raw.strip()
    return options


def _read_config_file(path: Path) -> dict:
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"{path} is not valid JSON: {exc}", param_hint="--config")
    if not isinstance(data, dict):
        raise click.BadParameter(f"{path} must contain a JSON object", param_hint="--config")
    return data


@click.command()
@click.argument("schema", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", "output_dir", required=True,
              type=click.Path(file_okay=False, path_type=Path),
              help="Directory the router layer is generated into (emptied first).")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="JSON file with generator options.")
@click.option("--set", "assignments", multiple=True, metavar="KEY=VALUE",
              help="Override one generator option, e.g. --set withZod=false.")
@click.option("--validation-delegate", metavar="MODULE:CALLABLE",
              help="Generator producing the zod schemas (run when withZod is on).")
@click.option("--policy-delegate", metavar="MODULE:CALLABLE",
              help="Generator producing the shield scaffold (run when withShield is on).")
@click.option("-v", "--verbose", is_flag=True, help="Log per-model decisions.")
@click.option("-q", "--quiet", is_flag=True, help="Only log warnings and errors.")
def main(schema, output_dir, config_file, assignments, validation_delegate, policy_delegate,
         verbose, quiet) -> None:
    """Generate tRPC routers from SCHEMA."""
    configure_gen_logging(verbose=verbose, quiet=quiet)

    try:
        document = load_schema(schema)
        options = dict(document.config)
        if config_file:
            options.update(_read_config_file(config_file))
        options.update(_parse_assignments(assignments))

        delegates = Delegates(
            validation=load_delegate(validation_delegate) if validation_delegate else None,
            policy_starter=load_delegate(policy_delegate) if policy_delegate else None,
        )
        result = generate(document, output_dir, FileSink(output_dir), options, delegates)
    except RouterGenError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Generated {output_dir} ({len(result.sources)} files)")


if __name__ == "__main__":
    main()
