import click

from refinery.cli.utils import (
    configure_logging_from_config,
    format_parse_result,
    output_error,
    output_result,
)
from refinery.config import load_config
from refinery.examples import EXAMPLES, run_examples


@click.command(name="demo")
@click.argument("names", nargs=-1)
@click.option("--list", "list_only", is_flag=True, help="List example names and exit")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Log every evaluation")
def demo(names: tuple[str, ...], list_only: bool, json_output: bool, debug: bool) -> None:
    """Run the built-in example schemas against their sample inputs.

    \b
    Examples:
        refinery demo                   # Run every example
        refinery demo passwords strip   # Run selected examples
        refinery demo --list            # Show available examples
    """
    if list_only:
        rows = [{"name": e.name, "title": e.title} for e in EXAMPLES]
        if json_output:
            output_result(rows, json_output, debug)
        else:
            output_result([f"{row['name']:<22} {row['title']}" for row in rows])
        return

    try:
        configure_logging_from_config(load_config(), debug=debug)
        runs = run_examples(names or None)
    except ValueError as e:
        output_error(e, json_output, debug)
        return

    if json_output:
        output_result([run.model_dump(mode="json") for run in runs], json_output, debug)
        return

    current = None
    for run in runs:
        if run.name != current:
            current = run.name
            click.echo(f"\n{click.style(f'▶ {run.title}', fg='cyan', bold=True)} ({run.name})")
        click.echo(f"{click.style('Input:', fg='yellow')} {run.input!r}")
        click.echo(format_parse_result(run.result))
