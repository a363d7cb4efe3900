import logging
from pathlib import Path

from typer import Typer, Exit, Abort, confirm
from rich.console import Console

from .modes import ModeMachine
from .utils.error_handler import ErrorReporter
from ..config import AppConfig, ConfigManager, DEFAULT_CONFIG_PATH
from ..core.artifacts import ArtifactFileManager, DEFAULT_PLUGINS_DIR
from ..core.context import MngrContext
from ..github.client import GitHubClient
from ..github.exceptions import StoreError

__all__ = ['app', 'console']

console = Console()

app = Typer(
    add_completion=False,
    help="Keep a plugin directory in sync with GitHub releases.",
)


def setup_logging(level_name: str) -> None:
    """Configure the root logger once for the process."""
    level = logging.getLevelNamesMapping().get(level_name, logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def confirm_overwrite(path: Path) -> bool:
    """Ask before an existing file in the plugin directory gets overwritten.

    An aborted prompt (end of input or Ctrl-C) keeps the existing file.
    """
    try:
        return confirm(f"'{path}' already exists. Overwrite it?", default=False)
    except Abort:
        console.print()
        return False


@app.command()
def session():
    """
    Start the interactive plugin manager.

    The registry is kept in [cyan]mngr.toml[/] and the plugin files in the
    [cyan]plugins[/] directory, both relative to the working directory.
    """
    config = AppConfig.from_env()
    setup_logging(config.log_level)

    store = ConfigManager(DEFAULT_CONFIG_PATH)
    try:
        registry, created = store.load_or_create()
    except StoreError as e:
        ErrorReporter(console).report(e)
        console.print("[red]Process closed.[/red]")
        raise Exit(1)

    if created:
        console.print(f"[green]Task successful. mngr made '{DEFAULT_CONFIG_PATH}'.[/green]")

    artifacts = ArtifactFileManager(DEFAULT_PLUGINS_DIR, confirm_overwrite=confirm_overwrite)
    if not artifacts.plugins_dir.is_dir():
        console.print(f"[yellow]⚠️  Plugin directory '{artifacts.plugins_dir}' not found, "
                      f"plugin files can't be written until it exists.[/yellow]")

    with GitHubClient(token=registry.api_token or config.github_token) as client:
        context = MngrContext(registry=registry, client=client, artifacts=artifacts, store=store)
        machine = ModeMachine(context, console)
        machine.show_help()
        machine.run()
