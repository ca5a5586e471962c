import json
from typing import cast

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text
from typing_extensions import Annotated

from miseupdater import app_config
from miseupdater.data import AppState, Done, Installing, PackageUpdate, Updates
from miseupdater.updater import UpdaterModel

app = typer.Typer(
    help="Check for and install updates",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def _get_model() -> UpdaterModel:
    """
    Build the updater model from the global configuration.
    """
    return UpdaterModel.from_config(app_config["options"])


def _updates_table(updates: tuple[PackageUpdate, ...]) -> Table:
    """
    Render a list of updates as a Rich table.
    """
    table = Table(title="Updates available", title_justify="left")
    table.add_column("", no_wrap=True)
    table.add_column("Package", style="bold")
    table.add_column("Current", style="dim")
    table.add_column("New", style="green")

    for update in updates:
        table.add_row(
            update.source.icon,
            Text(update.name),
            Text(update.current_version),
            Text(update.new_version),
        )

    return table


def _check(model: UpdaterModel, quiet: bool = False) -> AppState:
    """
    Run the update check, with a spinner unless quiet.
    """
    if quiet:
        return model.check_for_updates()

    with console.status("Checking for updates..."):
        return model.check_for_updates()


@app.command()
def check(
    as_json: Annotated[
        bool,
        typer.Option("--json", "-j", help="Print updates as JSON"),
    ] = False,
) -> None:
    """
    List outdated packages.
    """
    model = _get_model()
    state = _check(model, quiet=as_json)

    updates = state.updates if isinstance(state, Updates) else ()

    if as_json:
        payload = [
            {
                "name": u.name,
                "current_version": u.current_version,
                "new_version": u.new_version,
                "source": u.source.value,
            }
            for u in updates
        ]
        console.print_json(json.dumps(payload))
        return

    if not updates:
        console.print("[green]✅ Everything is up to date[/green]")
        return

    console.print(_updates_table(updates))


@app.command()
def install(
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
) -> None:
    """
    Check for updates and install them.
    """
    model = _get_model()
    state = _check(model)

    if not isinstance(state, Updates):
        console.print("[green]✅ Everything is up to date[/green]")
        return

    console.print(_updates_table(state.updates))

    if not yes and not typer.confirm("Install these updates?"):
        raise typer.Exit(0)

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )

    with progress:
        task = progress.add_task("Installing...", total=1.0)

        def follow(state: AppState) -> None:
            if isinstance(state, Installing):
                progress.update(
                    task,
                    completed=state.progress,
                    description=(
                        escape(state.log[-1]) if state.log else "Installing..."
                    ),
                )

        model.subscribe(follow)
        final = model.install_updates()

    final = cast(Done, final)

    console.print(
        Panel.fit(
            Text("\n".join(final.log)),
            title="Upgrade log",
            title_align="left",
            style="red" if final.failed else "",
        )
    )

    if final.failed:
        err_console.print("[red]Installation did not complete.[/red]")
        raise typer.Exit(code=1)
