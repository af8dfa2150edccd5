import json
import logging
from pathlib import Path
from typing import Any

import click
import yaml

from refinery.cli.utils import (
    configure_logging_from_config,
    format_parse_result,
    output_error,
    output_result,
)
from refinery.config import load_config
from refinery.loaders import schema_from_file

logger = logging.getLogger(__name__)


def read_data(source: str) -> Any:
    """Read the document to validate from a file or, for "-", from stdin.

    ``.json`` files are parsed as JSON; anything else as YAML, which also
    accepts JSON documents.

    Raises:
        ValueError: If the document cannot be parsed
    """
    if source == "-":
        content = click.get_text_stream("stdin").read()
        suffix = ""
    else:
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Data file not found: {path}")
        content = path.read_text(encoding="utf-8")
        suffix = path.suffix.lower()

    try:
        if suffix == ".json":
            return json.loads(content)
        return yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Failed to parse data from {source}: {e}") from e


@click.command(name="check")
@click.argument("schema_file", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("data_file", required=False, default="-")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
@click.pass_context
def check(
    ctx: click.Context, schema_file: Path, data_file: str, json_output: bool, debug: bool
) -> None:
    """Validate a data document against a schema definition.

    The schema is a YAML or JSON definition file. The data is read from
    DATA_FILE, or from stdin when it is omitted or "-". Exits with status 1
    when the data is invalid.

    \b
    Examples:
        refinery check user.yml user.json            # Validate a file
        cat user.json | refinery check user.yml      # Validate stdin
        refinery check user.yml user.json --json-output
    """
    try:
        configure_logging_from_config(load_config(), debug=debug)
        schema = schema_from_file(schema_file)
        data = read_data(data_file)
    except (OSError, ValueError) as e:
        output_error(e, json_output, debug)
        return

    logger.debug(f"Validating {data_file} against {schema_file}")
    result = schema.safe_parse(data)

    if json_output:
        output_result(result.model_dump(mode="json"), json_output, debug)
    else:
        click.echo(format_parse_result(result))

    if not result.success:
        ctx.exit(1)
