import json
import os
import sys
import traceback
from pathlib import Path

import click

from .logging import configure_logging
from .pipeline import (
    CONFIG_FILE_NAME,
    AtomicWriter,
    ConfigLoader,
    GenerateResult,
    SchemaGen,
    SchemaGenConfig,
    SchemaGenError,
    available_backends,
    default_config,
)


def handle_error(error: Exception) -> None:
    click.secho(f"Error: {error}", fg="red", err=True)
    if os.environ.get("DEBUG"):
        traceback.print_exc()
    sys.exit(1)


@click.group()
@click.version_option(package_name="ts_class_to_schema")
def cli():
    """Generate runtime validation schemas from TypeScript classes."""


@cli.command()
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite an existing config file")
def init(force):
    """Create a default schema-gen.config.json in the current directory."""
    config_path = Path.cwd() / CONFIG_FILE_NAME
    if config_path.exists() and not force:
        click.secho(f"Config file already exists: {config_path}", fg="yellow", err=True)
        sys.exit(1)

    config_path.write_text(json.dumps(default_config().to_dict(), indent=2) + "\n", encoding="utf-8")
    click.secho(f"Created {config_path}", fg="green")
    click.echo("Edit the mappings, then run: ts_class_to_schema generate")


@cli.command()
@click.option("--config", "-c", default=None, type=click.Path(dir_okay=False), help=f"Path to {CONFIG_FILE_NAME}")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log every processed file")
def generate(config, verbose):
    """Generate schemas for every mapping of the config file."""
    configure_logging("info" if verbose else None)

    try:
        loader = ConfigLoader(config)
        schema_config = loader.load()
        result = SchemaGen(schema_config, root_dir=loader.config_path.parent).run()
    except SchemaGenError as e:
        handle_error(e)
        return

    print_summary(result)
    if result.failures:
        sys.exit(1)


@cli.command()
@click.option("--generator", "-g", default="elysia", type=click.Choice(available_backends()))
@click.argument("path", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.argument("output", default=None, required=False, type=click.Path(dir_okay=False, resolve_path=True))
def convert(generator, path, output):
    """Convert the exported classes of one file, to OUTPUT or stdout."""
    configure_logging()

    try:
        schema_gen = SchemaGen(SchemaGenConfig(generator=generator))
        converted = schema_gen.convert_source(path)
        for failure in converted.failures:
            click.secho(f"✗ {failure.source_location}: {failure.message}", fg="red", err=True)
        if not converted.classes:
            handle_error(SchemaGenError(f"No exported class could be converted in {path}"))
            return

        code = schema_gen.backend.render_module(converted.classes) + "\n"
        if output is None:
            click.echo(code, nl=False)
        else:
            AtomicWriter(overwrite=True).write(Path(output), code)
            click.secho(f"Wrote {len(converted.classes)} schema(s) to {output}", fg="green", err=True)
    except SchemaGenError as e:
        handle_error(e)
        return

    if converted.failures:
        sys.exit(1)


def print_summary(result: GenerateResult) -> None:
    click.echo(f"Processed {result.files_processed} file(s)")
    click.secho(f"✓ Generated {result.schemas_generated} schema(s)", fg="green")
    if result.files_created:
        click.echo(f"  Created: {result.files_created} file(s)")
    if result.files_overwritten:
        click.echo(f"  Overwritten: {result.files_overwritten} file(s)")
    if result.files_skipped:
        click.secho(f"  Skipped (already exist): {result.files_skipped} file(s)", fg="yellow")

    if result.failures:
        click.secho(f"✗ {len(result.failures)} failure(s):", fg="red", err=True)
        for failure in result.failures:
            click.secho(f"  {failure.source_location}: {failure.message}", fg="red", err=True)


def main():
    cli()


if __name__ == "__main__":
    main()
