from __future__ import annotations

from enum import Enum

import click
import typer
from click.shell_completion import get_completion_class
from rich.console import Console
from rich.markup import escape

from ..config import AppConfig, load_config
from ..constants import STDIN_SENTINEL, __version__
from ..core import ViewerService
from ..errors import MdcatError
from ..logging import configure_logging
from ..models import ProcessOptions, ResourceAccess
from ..output import Output
from ..render import RenderSettings
from ..settings import get_settings
from ..terminal import detect_terminal

console = Console()
err_console = Console(stderr=True)

AFTER_HELP = "mdcat can be installed as or linked to mdless, for automatic pagination."


class Shell(str, Enum):
    bash = "bash"
    zsh = "zsh"
    fish = "fish"


def _load_config() -> AppConfig:
    return load_config(get_settings().config_path)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"mdcat {__version__}", highlight=False)
        raise typer.Exit()


def _print_completions(prog_name: str, shell: Shell) -> None:
    complete_var = f"_{prog_name.upper()}_COMPLETE"
    completion_class = get_completion_class(shell.value)
    if completion_class is None:
        raise typer.BadParameter(f"Completions are not available for {shell.value}")
    command = click.get_current_context().command
    typer.echo(completion_class(command, {}, prog_name, complete_var).source())


def _run(
    prog_name: str,
    filenames: list[str] | None,
    *,
    no_colour: bool,
    columns: int | None,
    local_only: bool,
    fail_fast: bool,
    detect_and_exit: bool,
    ansi_only: bool,
    line_numbers: bool,
    stats: bool,
    completions: Shell | None,
    paginate: bool,
) -> None:
    settings = get_settings()
    if settings.log_level:
        configure_logging(settings.log_level)
    if completions is not None:
        _print_completions(prog_name, completions)
        raise typer.Exit()
    if detect_and_exit:
        typer.echo(detect_terminal())
        raise typer.Exit()
    if ansi_only and no_colour:
        raise typer.BadParameter("--ansi cannot be used together with --no-colour")

    try:
        cfg = _load_config()
        pager = settings.pager or cfg.output.pager
        output = Output.pager(pager) if paginate else Output.stdout()
    except MdcatError as exc:
        err_console.print(f"[red]Error[/red]: {escape(f'{exc.code} - {exc}')}", highlight=False)
        raise typer.Exit(1) from exc

    render_settings = RenderSettings(
        colour=not no_colour,
        ansi_only=ansi_only,
        columns=columns,
        force_terminal=True if output.is_paginated else None,
    )
    options = ProcessOptions(
        show_line_numbers=line_numbers,
        show_stats=stats,
        fail_fast=fail_fast,
        resource_access=ResourceAccess.from_flag(local_only),
    )
    service = ViewerService(cfg)
    try:
        summary = service.process_files(
            filenames or [STDIN_SENTINEL],
            output,
            options=options,
            settings=render_settings,
        )
    finally:
        output.close()
    for failure in summary.failures:
        err_console.print(f"[red]Error[/red]: {escape(failure.describe())}", highlight=False)
    if summary.failed:
        raise typer.Exit(1)


def create_app(prog_name: str, *, paginate_default: bool) -> typer.Typer:
    """Build the command for one invocation name; only the pagination default differs."""

    app = typer.Typer(
        name=prog_name,
        help="Render markdown to the terminal.",
        epilog=AFTER_HELP,
        add_completion=False,
    )
    default_note = "paginated" if paginate_default else "direct"

    @app.command(name=prog_name)
    def main(
        filenames: list[str] | None = typer.Argument(
            None, help="Files to read. If - read from standard input instead."
        ),
        no_colour: bool = typer.Option(
            False,
            "--no-colour",
            "-c",
            "--nocolour",
            "--no-color",
            "--nocolor",
            help="Disable all colours and other styles.",
        ),
        columns: int | None = typer.Option(
            None, "--columns", min=1, help="Maximum number of columns to use for output."
        ),
        local_only: bool = typer.Option(
            False, "--local", "-l", help="Do not load remote resources like images."
        ),
        fail_fast: bool = typer.Option(
            False, "--fail", help="Exit immediately if any error occurs processing an input file."
        ),
        detect_and_exit: bool = typer.Option(
            False, "--detect-terminal", help="Print detected terminal name and exit."
        ),
        ansi_only: bool = typer.Option(
            False, "--ansi", help="Skip terminal detection and only use ANSI formatting."
        ),
        line_numbers: bool = typer.Option(False, "--line-numbers", help="Show line numbers in the output."),
        stats: bool = typer.Option(
            False,
            "--stats",
            help="Display statistics about the document (word count, character count, etc.).",
        ),
        completions: Shell | None = typer.Option(
            None,
            "--completions",
            help="Generate completions for a shell to standard output and exit.",
        ),
        paginate: bool = typer.Option(
            paginate_default,
            "--paginate/--no-pager",
            "-p/-P",
            help=(
                "Paginate the output with a pager like less, or write directly to standard output "
                f"(default: {default_note}). The flag given last wins."
            ),
        ),
        version: bool = typer.Option(
            False,
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Print version information and exit.",
        ),
    ) -> None:
        _run(
            prog_name,
            filenames,
            no_colour=no_colour,
            columns=columns,
            local_only=local_only,
            fail_fast=fail_fast,
            detect_and_exit=detect_and_exit,
            ansi_only=ansi_only,
            line_numbers=line_numbers,
            stats=stats,
            completions=completions,
            paginate=paginate,
        )

    return app


mdcat_app = create_app("mdcat", paginate_default=False)
mdless_app = create_app("mdless", paginate_default=True)
app = mdcat_app


if __name__ == "__main__":
    app()
