"""CLI entry point for openapi-tool."""

import logging
import os
import sys

import click

from openapi_tool.config import load_config
from openapi_tool.errors import BundlingProblemsError, OpenApiToolError
from openapi_tool.output import dump_yaml
from openapi_tool.pipeline import generate as generate_document
from openapi_tool.report import format_problems, get_totals
from openapi_tool.version import __version__

LOG_LEVEL_ENV = "OPENAPI_TOOL_LOG_LEVEL"


def _configure_logging() -> None:
    name = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
    level = getattr(logging, name, logging.WARNING)
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.group()
def main():
    """OpenAPI Tool: bundle and merge OpenAPI documents."""
    _configure_logging()


@main.command()
@click.argument("files", nargs=-1)
def generate(files: tuple[str, ...]):
    """Bundle FILES (paths or glob patterns) and print the merged document."""
    if not files:
        raise click.UsageError("No files provided.")

    try:
        config = load_config()
        merged = generate_document(files, config)
    except BundlingProblemsError as e:
        report = format_problems(e.problems, get_totals(e.problems), __version__)
        click.echo(report, err=True)
        raise click.ClickException(e.message) from e
    except OpenApiToolError as e:
        raise click.ClickException(e.message) from e
    except OSError as e:
        raise click.ClickException(str(e)) from e

    click.echo(dump_yaml(merged), nl=False)
