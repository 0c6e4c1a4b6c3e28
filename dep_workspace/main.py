"""dep-workspace command line interface.

Builds a WorkspaceContext once from options, environment and settings files,
then hands it to the core operations.
"""

import functools
import os
import sys
from dataclasses import dataclass
from pathlib import Path

import click
from rich.table import Table

from .console import console
from .context import WorkspaceContext
from .error_format import escape_markup
from .error_format import format_error_message
from .errors import DepWorkspaceError
from .logging_setup import init_json_logging
from .paths import absolute_project_root
from .paths import split_absolute_project_root
from .project import load_project
from .roots import detect_root
from .settings import SettingsError
from .settings import WorkspaceSettings
from .settings import default_settings_paths
from .settings import load_settings
from .vcs import describe_revision
from .vcs import version_in_workspace


@dataclass
class CliState:
    """Options collected by the root command."""

    roots: tuple[str, ...]
    working_dir: Path

    def settings(self) -> WorkspaceSettings:
        return load_settings(default_settings_paths(self.working_dir))

    def workspace(self) -> WorkspaceContext:
        """Resolve roots (options/env first, then settings files) into a context."""
        roots = list(self.roots) or self.settings().roots
        if not roots:
            raise click.UsageError(
                "No workspace roots configured. Use --root, set DEP_WORKSPACE_ROOTS, "
                "or add 'roots' to .dep-workspace/settings.yaml"
            )
        absolute = [os.path.abspath(os.path.join(self.working_dir, os.path.expanduser(r))) for r in roots]
        return WorkspaceContext.create(self.working_dir, absolute)


def _handle_errors(func):
    """Print library errors in red and exit non-zero."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (DepWorkspaceError, SettingsError, ValueError) as e:
            console.print(f"[red]Error:[/red] {escape_markup(format_error_message(e, include_type=False))}")
            sys.exit(1)

    return wrapper


@click.group()
@click.version_option(package_name="dep-workspace")
@click.option(
    "--root",
    "roots",
    multiple=True,
    type=click.Path(file_okay=False),
    envvar="DEP_WORKSPACE_ROOTS",
    help="Workspace root (repeatable, first wins). Defaults to DEP_WORKSPACE_ROOTS or settings.yaml",
)
@click.option(
    "--cwd",
    "working_dir",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Directory to start the project search from (default: current directory)",
)
@click.option("--log-level", default=None, help="Log level for the JSONL log (default: WARNING)")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="JSONL log file path")
@click.pass_context
def cli(ctx: click.Context, roots: tuple[str, ...], working_dir: str | None, log_level: str | None, log_file: str | None):
    """Resolve projects, workspace roots and checked-out dependency versions."""
    if log_file or log_level:
        init_json_logging(log_file, log_level)
    ctx.obj = CliState(roots=roots, working_dir=Path(os.path.abspath(working_dir or os.getcwd())))


@cli.command()
@click.pass_obj
@_handle_errors
def status(state: CliState):
    """Load the project enclosing the working directory and summarize it."""
    workspace = state.workspace()
    project = load_project(workspace)

    table = Table(title="Project", show_header=False)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")

    table.add_row("Import root", escape_markup(project.import_root))
    table.add_row("Directory", escape_markup(project.abs_root))
    if project.resolved_abs_root != project.abs_root:
        table.add_row("Resolved directory", escape_markup(project.resolved_abs_root))
    table.add_row("Workspace roots", escape_markup(", ".join(str(r) for r in workspace.roots)))

    manifest = project.manifest
    if manifest is not None:
        table.add_row("Constraints", str(len(manifest.constraints)))
        table.add_row("Overrides", str(len(manifest.overrides)))
        table.add_row("Required", str(len(manifest.required)))
        table.add_row("Ignored", str(len(manifest.ignored)))

    if project.lock is None:
        table.add_row("Lock", "[yellow]none[/yellow]")
    else:
        table.add_row("Locked projects", str(len(project.lock.projects)))
        freshness = "[yellow]stale[/yellow]" if project.lock_is_stale() else "[green]in sync[/green]"
        table.add_row("Lock memo", freshness)

    console.print(table)


@cli.command()
@click.argument("path", type=click.Path())
@click.pass_obj
@_handle_errors
def split(state: CliState, path: str):
    """Print the import path of an absolute PATH inside a workspace root."""
    click.echo(split_absolute_project_root(state.workspace(), os.path.abspath(path)))


@cli.command(name="abs")
@click.argument("import_path")
@click.pass_obj
@_handle_errors
def abs_command(state: CliState, import_path: str):
    """Print the directory of IMPORT_PATH under the primary workspace root."""
    click.echo(str(absolute_project_root(state.workspace(), import_path)))


@cli.command()
@click.argument("path", type=click.Path())
@click.pass_obj
@_handle_errors
def detect(state: CliState, path: str):
    """Print the workspace root whose src directory contains PATH."""
    click.echo(str(detect_root(state.workspace(), os.path.abspath(path))))


@cli.command()
@click.argument("import_root")
@click.option("--timeout", type=float, default=None, help="Seconds allowed for the probe (default from settings)")
@click.pass_obj
@_handle_errors
def version(state: CliState, import_root: str, timeout: float | None):
    """Print the checked-out version of the dependency at IMPORT_ROOT."""
    workspace = state.workspace()
    if timeout is None:
        timeout = state.settings().probe_timeout
    rev = version_in_workspace(workspace, import_root, timeout=timeout)
    click.echo(describe_revision(rev))


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
