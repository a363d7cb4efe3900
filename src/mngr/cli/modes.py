"""
Interactive command modes.

The session is a small state machine: the top level plus the register,
unregister, update and update/select sub-modes. Each input line is dispatched
to the handler of the current mode, which may switch to another mode.
"""

from enum import Enum
from typing import Callable

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .utils.error_handler import ErrorReporter
from ..core.context import MngrContext
from ..core.orchestrator import Orchestrator, UpdateOutcome, UpdateStatus
from ..core.selector import UpdatePolicy

__all__ = ['Mode', 'ModeMachine', 'PROMPTS']


class Mode(Enum):
    TOP_LEVEL = 'top_level'
    REGISTER = 'register'
    UNREGISTER = 'unregister'
    UPDATE = 'update'
    UPDATE_MULTI = 'update_multi'


PROMPTS = {
    Mode.TOP_LEVEL: "mngr> ",
    Mode.REGISTER: "mngr/register> ",
    Mode.UNREGISTER: "mngr/unregister> ",
    Mode.UPDATE: "mngr/update> ",
    Mode.UPDATE_MULTI: "mngr/update/select> ",
}

# Command aliases, lowercase
TOP_LEVEL_COMMANDS = {
    'help': 'help', 'h': 'help',
    'register': 'register', 'r': 'register',
    'unregister': 'unregister', 'ur': 'unregister',
    'update': 'update', 'u': 'update',
    'list': 'list', 'l': 'list',
    'exit': 'exit', 'e': 'exit',
}
COMMON_COMMANDS = {'help': 'help', 'h': 'help', 'exit': 'exit', 'e': 'exit'}
UNREGISTER_COMMANDS = COMMON_COMMANDS | {'name': 'name', 'n': 'name', 'file': 'file', 'f': 'file'}
UPDATE_COMMANDS = COMMON_COMMANDS | {'all': 'all', 'a': 'all', 'stable': 'stable', 's': 'stable',
                                     'select': 'select', 'm': 'select'}

PRE_RELEASE_FLAGS = ('pre', '--pre')


def split_command(line: str, commands: dict[str, str]) -> tuple[str | None, str]:
    """
    Split an input line into a known command and its argument.

    :param line: The stripped input line
    :param commands: Alias -> command mapping of the current mode
    :return: The command (None if unknown) and the rest of the line
    """
    word, _, argument = line.partition(' ')
    return commands.get(word.lower()), argument.strip()


def split_names(text: str) -> list[str]:
    """Split a comma-separated name list, dropping empty entries."""
    return [name.strip() for name in text.split(',') if name.strip()]


class ModeMachine:
    """
    Runs the interactive session on a :class:`MngrContext`.
    """

    def __init__(self, context: MngrContext, console: Console | None = None,
                 read_line: Callable[[str], str] | None = None):
        """
        :param context: Session state
        :param console: Where output goes
        :param read_line: Reads one line after printing a prompt, defaults to ``console.input``
        """
        self.context = context
        self.orchestrator = Orchestrator(context)
        self.console = console or Console()
        self.read_line = read_line or self.console.input
        self.state = Mode.TOP_LEVEL
        self.multi_include_pre_release = False

        self._handlers: dict[Mode, Callable[[str], bool]] = {
            Mode.TOP_LEVEL: self._on_top_level,
            Mode.REGISTER: self._on_register,
            Mode.UNREGISTER: self._on_unregister,
            Mode.UPDATE: self._on_update,
            Mode.UPDATE_MULTI: self._on_update_multi,
        }
        self._help: dict[Mode, Callable[[], None]] = {
            Mode.TOP_LEVEL: self.show_help,
            Mode.REGISTER: self.show_register_help,
            Mode.UNREGISTER: self.show_unregister_help,
            Mode.UPDATE: self.show_update_help,
            Mode.UPDATE_MULTI: self.show_update_multi_help,
        }

    def run(self) -> None:
        """Read and dispatch lines until ``exit`` at the top level or end of input."""
        while True:
            try:
                line = self.read_line(PROMPTS[self.state])
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                break
            if not self.step(line):
                break

    def step(self, line: str) -> bool:
        """
        Dispatch one input line to the handler of the current mode.

        :return: False if the session should end
        """
        return self._handlers[self.state](line.strip())

    def _enter(self, state: Mode) -> None:
        self.state = state
        self._help[state]()

    # Handlers

    def _on_top_level(self, line: str) -> bool:
        if not line:
            return True
        command, argument = split_command(line, TOP_LEVEL_COMMANDS)

        if command == 'exit':
            return False
        elif command == 'help':
            self.show_help()
        elif command == 'list':
            self.print_plugins()
        elif command == 'register':
            if argument:
                self.register(argument)
            else:
                self._enter(Mode.REGISTER)
        elif command == 'unregister':
            if argument:
                self.unregister(argument)
            else:
                self._enter(Mode.UNREGISTER)
        elif command == 'update':
            if argument:
                self._update_inline(argument)
            else:
                self._enter(Mode.UPDATE)
        else:
            self.show_help()
        return True

    def _on_register(self, line: str) -> bool:
        if not line:
            return True
        command, _ = split_command(line, COMMON_COMMANDS)
        if command == 'exit':
            self.state = Mode.TOP_LEVEL
        elif command == 'help':
            self.show_register_help()
        elif self.register(line):
            self.state = Mode.TOP_LEVEL
        else:
            self.show_register_help()
        return True

    def _on_unregister(self, line: str) -> bool:
        if not line:
            return True
        command, argument = split_command(line, UNREGISTER_COMMANDS)
        if command == 'exit':
            self.state = Mode.TOP_LEVEL
        elif command in ('name', 'file') and argument:
            self.unregister(argument, by_file_name=command == 'file')
        else:
            self.show_unregister_help()
        return True

    def _on_update(self, line: str) -> bool:
        if not line:
            return True
        command, argument = split_command(line, UPDATE_COMMANDS)
        include_pre_release = argument.lower() in PRE_RELEASE_FLAGS
        if argument and not include_pre_release:
            command = None

        if command == 'exit':
            self.state = Mode.TOP_LEVEL
        elif command == 'all':
            self.update(UpdatePolicy.ALL, include_pre_release=include_pre_release)
        elif command == 'stable':
            self.update(UpdatePolicy.STABLE, include_pre_release=include_pre_release)
        elif command == 'select':
            self.multi_include_pre_release = include_pre_release
            self._enter(Mode.UPDATE_MULTI)
        else:
            self.show_update_help()
        return True

    def _on_update_multi(self, line: str) -> bool:
        if not line:
            return True
        command, _ = split_command(line, COMMON_COMMANDS)
        if command == 'exit':
            self.state = Mode.UPDATE
        elif command == 'help':
            self.show_update_multi_help()
        else:
            self.update(UpdatePolicy.NAMED, split_names(line),
                        include_pre_release=self.multi_include_pre_release)
            self.state = Mode.UPDATE
        return True

    def _update_inline(self, argument: str) -> None:
        """``update <all|stable|names> [pre]`` typed at the top level."""
        words = argument.split()
        include_pre_release = words[-1].lower() in PRE_RELEASE_FLAGS
        if include_pre_release:
            words = words[:-1]
        command = UPDATE_COMMANDS.get(words[0].lower()) if len(words) == 1 else None

        if command in ('help', 'exit'):
            self.show_update_help()
        elif command == 'all':
            self.update(UpdatePolicy.ALL, include_pre_release=include_pre_release)
        elif command == 'stable':
            self.update(UpdatePolicy.STABLE, include_pre_release=include_pre_release)
        elif command == 'select':
            self.multi_include_pre_release = include_pre_release
            self._enter(Mode.UPDATE_MULTI)
        elif words:
            self.update(UpdatePolicy.NAMED, split_names(' '.join(words)),
                        include_pre_release=include_pre_release)
        else:
            self.show_update_help()

    # Operations

    def _save(self) -> None:
        with ErrorReporter(self.console):
            self.context.persist()

    def register(self, url: str) -> bool:
        """
        Register a repository and report the result.

        :return: True if the plugin was registered
        """
        with ErrorReporter(self.console) as reporter:
            result = self.orchestrator.register(url)
            record = result.record
            self.console.print(f"[green]✓[/green] Registered [cyan]{record.name}[/cyan] "
                               f"{record.version}" + (" [yellow](pre-release)[/yellow]" if record.pre_release else ""))
            if result.file_written:
                self.console.print(f"  Saved [cyan]{record.file_name}[/cyan]")
            elif result.file_error is not None:
                self.console.print("[yellow]  The plugin file wasn't saved:[/yellow]")
                ErrorReporter(self.console).report(result.file_error)
            else:
                self.console.print(f"[yellow]  Kept the existing {record.file_name}[/yellow]")
            remaining = result.rate_limit_remaining
            self.console.print(f"[dim]Remaining API calls: "
                               f"{remaining if remaining is not None else 'unknown'}[/dim]")
        if reporter.failed:
            return False
        self._save()
        return True

    def unregister(self, selector: str, by_file_name: bool = False) -> bool:
        """
        Unregister a plugin by name or file name and report the result.

        :return: True if the plugin was removed from the registry
        """
        with ErrorReporter(self.console) as reporter:
            result = self.orchestrator.unregister(selector, by_file_name=by_file_name)
            self.console.print(f"[green]✓[/green] Unregistered [cyan]{result.record.name}[/cyan]")
            if result.file_deleted:
                self.console.print(f"  Deleted [cyan]{result.record.file_name}[/cyan]")
            elif result.file_error is not None:
                self.console.print("[yellow]  The plugin file wasn't deleted:[/yellow]")
                ErrorReporter(self.console).report(result.file_error)
        if reporter.failed:
            return False
        self._save()
        return True

    def update(self, policy: UpdatePolicy, names: list[str] | None = None,
               include_pre_release: bool = False) -> list[UpdateOutcome]:
        """Update the plugins selected by ``policy`` and report every outcome."""
        finished = False
        try:
            outcomes = self.orchestrator.update_policy(policy, names, include_pre_release=include_pre_release)
            finished = True
        finally:
            if not finished:
                # Plugins updated before the interruption already have their new files
                self._save()

        if not outcomes:
            self.console.print("[yellow]No plugins to update.[/yellow]")
            return outcomes

        for outcome in outcomes:
            self._print_outcome(outcome)
        if any(outcome.changed for outcome in outcomes):
            self._save()
        return outcomes

    def _print_outcome(self, outcome: UpdateOutcome) -> None:
        name = f"[cyan]{outcome.name}[/cyan]"
        if outcome.status is UpdateStatus.UPDATED:
            self.console.print(f"[green]✓[/green] {name}: {outcome.old_version} → {outcome.new_version}")
        elif outcome.status is UpdateStatus.CURRENT:
            self.console.print(f"[dim]-[/dim] {name}: skipped, already current ({outcome.old_version})")
        elif outcome.status is UpdateStatus.NO_CANDIDATE:
            self.console.print(f"[yellow]-[/yellow] {name}: skipped, no applicable release")
        elif outcome.status is UpdateStatus.DECLINED:
            self.console.print(f"[yellow]-[/yellow] {name}: skipped, kept the existing file")
        else:
            self.console.print(f"[red]✗[/red] {name}: update failed")
            if outcome.error is not None:
                ErrorReporter(self.console).report(outcome.error)

    # Output

    def print_plugins(self) -> None:
        """Print every registered plugin."""
        registry = self.context.registry
        if len(registry):
            table = Table(title="Plugins")
            table.add_column("Name", style="cyan")
            table.add_column("Version", style="white")
            table.add_column("Introduced", style="white")
            table.add_column("File", style="white")
            table.add_column("Repository", style="blue")
            for record in sorted(registry, key=lambda r: r.name):
                version = record.version + (" [yellow](pre)[/yellow]" if record.pre_release else "")
                table.add_row(record.name, version, record.introduced_at, record.file_name,
                              record.repository_url)
            self.console.print(table)
        self.console.print("[green]End of the plugins list.[/green]")

    def _print_commands(self, commands: list[tuple[str, str, str]]) -> None:
        for command, alias, description in commands:
            self.console.print(f"'[green]{escape(command)}[/green]' or '[green]{escape(alias)}[/green]' - {description}")

    def show_help(self) -> None:
        self._print_commands([
            ("help", "H", "show this page."),
            ("register [url]", "R [url]", "register a plugin repository."),
            ("unregister [name]", "UR [name]", "unregister a plugin from mngr."),
            ("update [all | stable | names] [pre]", "U", "update plugins."),
            ("list", "L", "show the registered plugins."),
            ("exit", "E", "quit mngr."),
        ])

    def show_register_help(self) -> None:
        self.console.print("Type a repository URL like [cyan]https://github.com/owner/repository[/cyan].")
        self._print_commands([
            ("help", "H", "show this page."),
            ("exit", "E", "back to the main menu."),
        ])

    def show_unregister_help(self) -> None:
        self._print_commands([
            ("name (plugin name)", "N (plugin name)", "unregister a plugin by its name."),
            ("file (file name)", "F (file name)", "unregister a plugin by its file name."),
            ("help", "H", "show this page."),
            ("exit", "E", "back to the main menu."),
        ])

    def show_update_help(self) -> None:
        self._print_commands([
            ("all [pre]", "A [pre]", "update every plugin."),
            ("stable [pre]", "S [pre]", "update the plugins not on a pre-release."),
            ("select [pre]", "M [pre]", "update the plugins you list."),
            ("help", "H", "show this page."),
            ("exit", "E", "back to the main menu."),
        ])
        self.console.print("[dim]Pre-releases are only installed with 'pre'.[/dim]")

    def show_update_multi_help(self) -> None:
        self.console.print("Type plugin names separated by commas, like [cyan]foo, bar[/cyan].")
        self._print_commands([
            ("help", "H", "show this page."),
            ("exit", "E", "back to the update menu."),
        ])
