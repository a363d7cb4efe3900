"""Centralized error reporting for the interactive session."""

from rich.console import Console
from rich.markup import escape

from mngr.github.exceptions import (
    MngrError,
    InvalidUrlError,
    TransportError,
    RemoteError,
    UnauthorizedError,
    ParseError,
    NoReleaseError,
    NotRegisteredError,
    AlreadyRegisteredError,
    FileSystemError,
    StoreError,
)


class ErrorReporter:
    """
    Context manager that prints mngr errors and keeps the session running.

    Every :class:`MngrError` is reported and suppressed, other exceptions propagate.
    """

    def __init__(self, console: Console | None = None):
        if not console:
            console = Console()
        self.console = console
        self.failed = False

    def __enter__(self):
        self.failed = False
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is None or not issubclass(exc_type, MngrError):
            return False

        self.failed = True
        self.report(exc_value)
        return True

    def report(self, e: MngrError):
        """Print one error with a hint matching its kind."""
        if isinstance(e, UnauthorizedError):
            self._handle_unauthorized(e)
        elif isinstance(e, RemoteError):
            self._handle_remote_error(e)
        elif isinstance(e, InvalidUrlError):
            self.console.print(f"[red]✗ Invalid URL:[/red] {escape(str(e))}")
            self.console.print("[yellow]Expected:[/yellow] https://github.com/<owner>/<repository>")
        elif isinstance(e, TransportError):
            self.console.print(f"[red]✗ Network error:[/red] {escape(str(e))}")
            self.console.print("[yellow]Check your internet connection and try again.[/yellow]")
        elif isinstance(e, ParseError):
            self.console.print(f"[red]✗ Unexpected response:[/red] {escape(str(e))}")
        elif isinstance(e, NoReleaseError):
            self.console.print(f"[red]✗ Nothing to install:[/red] {escape(str(e))}")
        elif isinstance(e, AlreadyRegisteredError):
            self.console.print(f"[red]✗ {escape(str(e))}.[/red]")
            self.console.print("[yellow]Use 'update' to get its newest release.[/yellow]")
        elif isinstance(e, NotRegisteredError):
            self.console.print(f"[red]✗ {escape(str(e))}.[/red]")
            self.console.print("[yellow]Use 'list' to see the registered plugins.[/yellow]")
        elif isinstance(e, FileSystemError):
            self.console.print(f"[red]✗ File error:[/red] {escape(str(e))}")
        elif isinstance(e, StoreError):
            self.console.print(f"[red]✗ Registry file error:[/red] {escape(str(e))}")
        else:
            self.console.print(f"[red]✗ Error:[/red] {escape(str(e))}")

    def _handle_unauthorized(self, e: UnauthorizedError):
        self.console.print(f"[red]🔐 Authentication failed:[/red] {escape(str(e))}")
        self.console.print("[yellow]To fix:[/yellow] Check [cyan]github_token[/cyan] in [cyan]mngr.toml[/cyan] "
                           "or [cyan]MNGR_GITHUB_TOKEN[/cyan], the token may be invalid or expired")

    def _handle_remote_error(self, e: RemoteError):
        """Handle non-2xx responses with specific status code handling."""
        status_code = e.status_code or 0
        if status_code == 404:
            self.console.print(f"[red]🔍 Not Found:[/red] {escape(str(e))}")
            self.console.print("[yellow]The repository or the release asset doesn't exist, "
                               "or it is private.[/yellow]")
        elif status_code in (403, 429):
            self.console.print(f"[red]🚦 Rate limit or permission issue:[/red] {escape(str(e))}")
            self.console.print("[yellow]Configure a GitHub token to get a higher rate limit.[/yellow]")
        elif status_code >= 500:
            self.console.print(f"[red]🔧 GitHub server error:[/red] {escape(str(e))}")
            self.console.print("[yellow]Please try again in a few moments.[/yellow]")
        else:
            self.console.print(f"[red]🌐 Remote error:[/red] {escape(str(e))}")
