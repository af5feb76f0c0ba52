"""CLI entry point: `routes-js gen`."""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, Optional, Tuple

import click

from . import __version__


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Generate JavaScript/TypeScript route helpers from a route table."""


@main.command()
@click.option("--router", "-r", default=None,
              help="routes.rb, route manifest (.yaml/.json) or module:attribute (default: auto-detect)")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False),
              help="YAML file with generation options")
@click.option("--output", "-o", default=None, help="Output JS file (classic style)")
@click.option("--types-file", default=None, help="Type declarations file (default: derived from --output)")
@click.option("--no-types", is_flag=True, help="Skip the .d.ts file")
@click.option("--module-type", type=click.Choice(["esm", "cjs", "umd", "none"]), default=None,
              help="Module format (default: esm)")
@click.option("--variant", type=click.Choice(["simple", "rich"]), default=None,
              help="Helper output shape (default: simple)")
@click.option("--with-methods", is_flag=True, help="Rich variant: add .get/.head/.url and verb variants")
@click.option("--with-forms", is_flag=True, help="Rich variant: add .form helpers with method spoofing")
@click.option("--include", multiple=True, help="Only helpers matching this regex (repeatable)")
@click.option("--exclude", multiple=True, help="Skip helpers matching this regex (repeatable)")
@click.option("--camel-case", is_flag=True, help="camelCase helper names")
@click.option("--compact", is_flag=True, help="Drop the _path suffix")
@click.option("--url-helpers", is_flag=True, help="Also emit absolute *_url helpers")
@click.option("--no-documentation", is_flag=True, help="Skip JSDoc comments")
@click.option("--style", type=click.Choice(["classic", "resource"]), default=None,
              help="One file (classic) or one file per resource (default: classic)")
@click.option("--output-dir", default=None, help="Output directory (resource style)")
@click.option("--group-by", type=click.Choice(["resource", "scope", "controller"]), default=None,
              help="Resource grouping strategy (default: resource)")
@click.option("--no-index", is_flag=True, help="Resource style: skip the index.ts barrel")
@click.option("--no-live", is_flag=True, help="Skip live routes")
@click.option("--show-routes", is_flag=True, help="Print a table of generated helpers")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def gen(router: Optional[str], config_file: Optional[str], output: Optional[str],
        types_file: Optional[str], no_types: bool, module_type: Optional[str],
        variant: Optional[str], with_methods: bool, with_forms: bool,
        include: Tuple[str, ...], exclude: Tuple[str, ...], camel_case: bool,
        compact: bool, url_helpers: bool, no_documentation: bool, style: Optional[str],
        output_dir: Optional[str], group_by: Optional[str], no_index: bool,
        no_live: bool, show_routes: bool, verbose: bool) -> None:
    """Generate route helpers.

    Options from --config are applied first; flags given on the command
    line override them.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    # Import here to keep CLI snappy for --help
    from rich.console import Console
    from rich.markup import escape

    from .config import Configuration, load_config_file
    from .errors import RoutesJsError
    from .generator import generate_files, write_files
    from .reporter import print_report
    from .sources import load_records

    console = Console()

    overrides: Dict[str, Any] = {
        "router": router,
        "output_file": output,
        "types_file": types_file,
        "module_type": module_type,
        "variant": variant,
        "style": style,
        "output_dir": output_dir,
        "group_by": group_by,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    flags = {
        "generate_types": (no_types, False),
        "with_methods": (with_methods, True),
        "with_forms": (with_forms, True),
        "camel_case": (camel_case, True),
        "compact": (compact, True),
        "url_helpers": (url_helpers, True),
        "documentation": (no_documentation, False),
        "include_index": (no_index, False),
        "include_live": (no_live, False),
    }
    overrides.update({key: value for key, (given, value) in flags.items() if given})
    if include:
        overrides["include"] = list(include)
    if exclude:
        overrides["exclude"] = list(exclude)

    try:
        options = load_config_file(config_file) if config_file else {}
        options.update(overrides)
        config = Configuration.new(**options)

        records = load_records(config.router)
        console.print(f"[green]✓[/green] Loaded {len(records)} route records")

        result = generate_files(records, config)
        for path in write_files(result.files):
            console.print(f"[green]✓[/green] Generated {path}")
        console.print(f"[green]✓[/green] {len(result.routes)} routes")
    except (RoutesJsError, OSError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    if show_routes:
        console.print()
        print_report(result.routes, console=console)


if __name__ == "__main__":
    main()
