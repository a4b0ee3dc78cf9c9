"""
girlink command line interface.

Commands:
  list     Show the modules a run would load, grouped by namespace
  resolve  Load modules and settle version conflicts
  lookup   Resolve a type reference as seen from one module
"""

import logging
import platform
import sys
from pathlib import Path

import typer
from rich import box
from rich.table import Table

from girlink._version import get_version
from girlink.cli_ui import RichPrompter, console, print_error, print_header, print_success, print_warning
from girlink.core.config import CONFIG_FILENAME, GenerateConfig, YamlConfigStore, load_config
from girlink.core.errors import GirlinkError
from girlink.core.module_loader import ModuleLoader
from girlink.core.session import ResolutionSession

app = typer.Typer(
    help="""girlink – dependency and symbol resolution for GIR documents

Commands:
  • list: show discovered modules and version conflicts
  • resolve: pick versions and report what is ignored
  • lookup: resolve a type reference inside a module
""",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"girlink version {get_version()}")
        typer.echo(f"  Python:        {platform.python_implementation()} {platform.python_version()}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """girlink CLI main callback for global options."""
    pass


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


def _build_config(
    modules: list[str] | None,
    gir_directories: list[Path] | None,
    ignore: list[str] | None,
    config_path: Path | None,
    verbose: bool,
    ignore_version_conflicts: bool | None = None,
) -> GenerateConfig:
    config = load_config(config_path).merged(
        modules=modules,
        gir_directories=gir_directories,
        ignore=ignore,
        ignore_version_conflicts=ignore_version_conflicts,
    )
    if verbose:
        config = config.merged(verbose=True)
    _configure_logging(config.verbose)
    return config


MODULES_ARG = typer.Argument(None, help="Module names or patterns, e.g. Gtk-3.0 or 'Gtk*'")
GIR_DIR_OPT = typer.Option(
    None, "--gir-directory", "-g", help="Directory to search for .gir files (repeatable)"
)
IGNORE_OPT = typer.Option(None, "--ignore", "-i", help="Package name to ignore (repeatable)")
CONFIG_OPT = typer.Option(None, "--config", "-c", help=f"Config file (default: ./{CONFIG_FILENAME})")
VERBOSE_OPT = typer.Option(False, "--verbose", "-v", help="Enable debug logging")


@app.command("list")
def list_modules(
    modules: list[str] | None = MODULES_ARG,
    gir_directories: list[Path] | None = GIR_DIR_OPT,
    ignore: list[str] | None = IGNORE_OPT,
    config_path: Path | None = CONFIG_OPT,
    verbose: bool = VERBOSE_OPT,
) -> None:
    """List the modules a run would load, grouped by namespace."""
    try:
        config = _build_config(modules, gir_directories, ignore, config_path, verbose)
        result = ModuleLoader(config).get_modules(config.modules, config.ignore)
    except GirlinkError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    if not result.loaded:
        typer.echo("No modules found.")
    else:
        table = Table(box=box.ROUNDED, show_header=True, header_style="bold cyan")
        table.add_column("Namespace", style="white bold")
        table.add_column("Package")
        table.add_column("Resolved by", style="bright_black")
        table.add_column("Conflict")
        for group in result.grouped.values():
            for module in group.modules:
                table.add_row(
                    group.namespace,
                    module.package_name,
                    module.resolved_by.value,
                    "yes" if group.has_conflict else "",
                )
        console.print(table)

        conflicts = [g.namespace for g in result.grouped.values() if g.has_conflict]
        if conflicts:
            print_warning(f"Version conflicts: {', '.join(conflicts)}")

    if result.failed:
        print_warning(f"No GIR file found for: {', '.join(result.failed)}")


@app.command("resolve")
def resolve(
    modules: list[str] | None = MODULES_ARG,
    gir_directories: list[Path] | None = GIR_DIR_OPT,
    ignore: list[str] | None = IGNORE_OPT,
    config_path: Path | None = CONFIG_OPT,
    verbose: bool = VERBOSE_OPT,
    ignore_version_conflicts: bool | None = typer.Option(
        None,
        "--ignore-version-conflicts/--ask",
        help="Keep every version instead of asking which one to use",
    ),
) -> None:
    """Load modules and decide which versions take part in the run."""
    try:
        config = _build_config(
            modules, gir_directories, ignore, config_path, verbose, ignore_version_conflicts
        )
        session = ResolutionSession(config)
        store = YamlConfigStore(config_path)
        result = session.resolve(prompter=RichPrompter(), store=store)
    except GirlinkError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    print_header("Modules")
    for module in result.keep:
        typer.echo(f"  {module.package_name} ({module.resolved_by.value})")

    if result.ignore:
        print_header("Ignored")
        for name in result.ignore:
            typer.echo(f"  {name}")

    for module_name, dep in result.inconsistencies:
        print_warning(f"{module_name} depends on ignored {dep}")

    if result.failed:
        print_warning(f"No GIR file found for: {', '.join(sorted(result.failed))}")

    print_success(f"{len(result.keep)} modules, {len(session.symbols)} symbols")


@app.command("lookup")
def lookup(
    package_name: str = typer.Argument(..., help="Module the reference appears in, e.g. Gtk-3.0"),
    reference: str = typer.Argument(..., help="Type reference, e.g. Window or Gdk.Window"),
    gir_directories: list[Path] | None = GIR_DIR_OPT,
    config_path: Path | None = CONFIG_OPT,
    verbose: bool = VERBOSE_OPT,
) -> None:
    """Resolve a type reference as seen from one module."""
    try:
        config = _build_config(
            [package_name], gir_directories, None, config_path, verbose, True
        ).model_copy(update={"modules": [package_name], "ignore": []})
        session = ResolutionSession(config)
        session.resolve()
    except GirlinkError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    symbols = session.symbols_for(package_name)
    if symbols is None:
        print_error(f"Module '{package_name}' not found")
        raise typer.Exit(code=1)

    key = symbols.key(reference)
    element = symbols.get(reference)
    if key is None or element is None:
        print_error(f"Unknown type '{reference}' in {package_name}" + (f" ({key})" if key else ""))
        raise typer.Exit(code=1)

    typer.echo(f"{key}: {element.kind}" + (f" ({element.c_type})" if element.c_type else ""))


def main(argv: list[str] | None = None) -> None:
    app(args=argv if argv is not None else sys.argv[1:], standalone_mode=True)


if __name__ == "__main__":
    main()
