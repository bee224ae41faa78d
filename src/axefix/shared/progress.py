"""Rich progress display for audit phases."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

console = Console()


class AuditProgress:
    """Tracks progress across the audit phases using Rich.

    Also usable silently (``enabled=False``) so library callers and tests
    get no terminal output.
    """

    def __init__(self, *, enabled: bool = True) -> None:
        self._enabled = enabled
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
            disable=not enabled,
        )
        self._task_ids: dict[str, int] = {}

    def __enter__(self) -> "AuditProgress":
        self._progress.__enter__()
        return self

    def __exit__(self, *args: object) -> None:
        self._progress.__exit__(*args)

    def start_phase(self, phase: str) -> None:
        tid = self._progress.add_task(f"[cyan]{phase}[/]", total=None)
        self._task_ids[phase] = tid

    def update_phase(self, phase: str, status: str) -> None:
        if phase in self._task_ids:
            self._progress.update(
                self._task_ids[phase],
                description=f"[cyan]{phase}[/]: {status}",
            )

    def finish_phase(self, phase: str, detail: str = "") -> None:
        if phase in self._task_ids:
            suffix = f" ({detail})" if detail else ""
            self._progress.update(
                self._task_ids[phase],
                description=f"[green]✓ {phase}{suffix}[/]",
                completed=True,
            )

    def fail_phase(self, phase: str, error: str) -> None:
        if phase in self._task_ids:
            self._progress.update(
                self._task_ids[phase],
                description=f"[red]✗ {phase}: {error}[/]",
                completed=True,
            )

    def log_event(self, message: str, style: str = "dim") -> None:
        """Print a persistent log line above the spinner."""
        if self._enabled:
            self._progress.console.print(f"  [{style}]{message}[/]")

    def print_header(self, label: str) -> None:
        if self._enabled:
            self._progress.console.print(Panel(f"[bold]{label}[/bold]", style="blue"))
