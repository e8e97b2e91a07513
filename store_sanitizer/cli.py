"""
store-sanitizer CLI.

Command-line interface for sanitizing or inspecting a persisted preference store.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.config import Config, PolicyConfig, ReportingConfig, StoreConfig, get_config
from .core.logging import setup_logging
from .models.outcome import Outcome
from .models.store import StoreSnapshot
from .policies import build_policy
from .reporting import build_sink
from .sanitizer import StartupSanitizer
from .storage import JsonFileStore, KeyValueStore, SharedPreferencesStore, build_store

app = typer.Typer(
    name="store-sanitizer",
    help="Assess a persisted key-value store and wipe it when it is unhealthy",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from . import __version__
        console.print(f"store-sanitizer v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """store-sanitizer: startup sanitation for persisted preference stores."""
    pass


def _build_config(
    backend: Optional[str],
    policy: Optional[str],
    max_entries: Optional[int],
    max_bytes: Optional[int],
    report_file: Optional[Path],
    verbose: bool,
) -> Config:
    try:
        base = get_config()
        return base.model_copy(
            update={
                "log_level": "DEBUG" if verbose else base.log_level,
                "store": StoreConfig(
                    name=base.store.name,
                    backend=backend or base.store.backend,
                    base_path=base.store.base_path,
                ),
                "policy": PolicyConfig(
                    kind=policy or base.policy.kind,
                    max_entries=max_entries if max_entries is not None else base.policy.max_entries,
                    max_bytes=max_bytes if max_bytes is not None else base.policy.max_bytes,
                ),
                "reporting": ReportingConfig(
                    log_events=base.reporting.log_events,
                    jsonl_path=report_file or base.reporting.jsonl_path,
                ),
            }
        )
    except ValueError as exc:
        console.print(f"[red]Invalid configuration: {escape(str(exc))}[/red]")
        raise typer.Exit(2)


def _open_store(path: Optional[Path], backend: Optional[str], cfg: Config) -> KeyValueStore:
    if path is None:
        return build_store(cfg.store)
    # an explicit --backend wins over the file suffix
    fmt = backend or ("json" if path.suffix.lower() == ".json" else "shared_prefs")
    if fmt == "json":
        return JsonFileStore(path)
    return SharedPreferencesStore(path)


def _snapshot_table(snapshot: StoreSnapshot) -> Table:
    table = Table(title=f"Store: {escape(snapshot.store_name)}")
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    if snapshot.load_failed:
        table.add_row("Readable", "[red]no[/red]")
        table.add_row("Failure", escape(snapshot.failure_detail or "unknown"))
    else:
        table.add_row("Readable", "[green]yes[/green]")
        table.add_row("Entries", str(snapshot.entry_count))
        table.add_row("Approx. Size", f"{snapshot.approx_size_bytes} bytes")
    return table


def _outcome_table(outcome: Outcome) -> Table:
    table = Table(title="Sanitizer Outcome")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Store", escape(outcome.store_name))
    table.add_row("Verdict", str(outcome.verdict))
    table.add_row("Action", outcome.action_taken.value)
    table.add_row("Entries Before", "?" if outcome.entries_before is None else str(outcome.entries_before))
    table.add_row("Error", outcome.error.value if outcome.error else "-")
    table.add_row("Duration", f"{outcome.duration_ms:.1f}ms")
    return table


PathArgument = typer.Argument(
    None,
    help="Store file (.xml SharedPreferences or .json); defaults to the configured store",
    file_okay=True,
    dir_okay=False,
    resolve_path=True,
)
BackendOption = typer.Option(None, "--backend", "-b", help="Store format: json or shared_prefs")
PolicyOption = typer.Option(
    None, "--policy", "-p", help="Health policy: forced, size_threshold or load_failure"
)
MaxEntriesOption = typer.Option(None, "--max-entries", help="Entry count limit (size_threshold)")
MaxBytesOption = typer.Option(None, "--max-bytes", help="Serialized size limit (size_threshold)")


@app.command()
def run(
    path: Optional[Path] = PathArgument,
    backend: Optional[str] = BackendOption,
    policy: Optional[str] = PolicyOption,
    max_entries: Optional[int] = MaxEntriesOption,
    max_bytes: Optional[int] = MaxBytesOption,
    report_file: Optional[Path] = typer.Option(
        None,
        "--report-file",
        "-r",
        help="Append the outcome as a JSON line to this file",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
) -> None:
    """Sanitize a store: clear it if the health policy finds it unhealthy."""
    cfg = _build_config(backend, policy, max_entries, max_bytes, report_file, verbose)
    setup_logging(cfg)

    sanitizer = StartupSanitizer(
        store=_open_store(path, backend, cfg),
        policy=build_policy(cfg.policy),
        sink=build_sink(cfg.reporting),
    )
    outcome = sanitizer.run()
    console.print(_outcome_table(outcome))

    if not outcome.succeeded:
        console.print(f"\n[bold red]✗ Clear failed:[/bold red] {escape(outcome.error_detail or '')}")
        raise typer.Exit(1)
    if outcome.cleared:
        console.print("\n[bold green]✓ Store cleared[/bold green]")
    else:
        console.print("\n[bold green]✓ Store healthy, nothing to do[/bold green]")


@app.command()
def inspect(
    path: Optional[Path] = PathArgument,
    backend: Optional[str] = BackendOption,
    policy: Optional[str] = PolicyOption,
    max_entries: Optional[int] = MaxEntriesOption,
    max_bytes: Optional[int] = MaxBytesOption,
) -> None:
    """Show a store's snapshot and verdict without modifying it."""
    cfg = _build_config(backend, policy, max_entries, max_bytes, None, False)
    setup_logging(cfg)

    store = _open_store(path, backend, cfg)
    try:
        snapshot = store.snapshot()
    except Exception as exc:  # noqa: BLE001
        snapshot = StoreSnapshot.unreadable(store.name, str(exc))

    verdict = build_policy(cfg.policy).assess(snapshot)
    console.print(_snapshot_table(snapshot))
    style = "green" if verdict.is_healthy else "yellow"
    console.print(f"\n[bold]Verdict:[/bold] [{style}]{verdict}[/{style}]")


@app.command()
def config() -> None:
    """Show the effective configuration."""
    try:
        cfg = get_config()
    except ValueError as exc:
        console.print(f"[red]Invalid configuration: {escape(str(exc))}[/red]")
        raise typer.Exit(2)

    table = Table(title="Current Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Enabled", str(cfg.enabled))
    table.add_row("Log Level", cfg.log_level)
    table.add_row("Log Format", cfg.log_format)
    table.add_row("Store Name", cfg.store.name)
    table.add_row("Store Backend", cfg.store.backend)
    table.add_row("Store File", str(cfg.store.file_path or "(memory)"))
    table.add_row("Policy", cfg.policy.kind)
    table.add_row("Max Entries", str(cfg.policy.max_entries))
    table.add_row("Max Bytes", str(cfg.policy.max_bytes))
    table.add_row("Report File", str(cfg.reporting.jsonl_path or "-"))

    console.print(table)

    console.print("\n[dim]Configure via environment variables:[/dim]")
    console.print("  SANITIZER_ENABLED, SANITIZER_LOG_LEVEL, SANITIZER_STORE_NAME")
    console.print("  SANITIZER_STORE_BACKEND, SANITIZER_STORE_PATH, SANITIZER_POLICY")
    console.print("  SANITIZER_MAX_ENTRIES, SANITIZER_MAX_BYTES, SANITIZER_REPORT_FILE")


def cli_main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli_main()
