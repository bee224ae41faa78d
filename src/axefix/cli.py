"""Typer CLI: ``axefix audit``, ``validate``, ``render``, ``tags`` and ``doctor`` commands."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from pydantic import ValidationError

from axefix.config import build_config, load_config
from axefix.errors import AuditError
from axefix.schemas.violations import IMPACT_ORDER
from axefix.shared.progress import console

# Load .env file from the working directory (if it exists)
load_dotenv()

app = typer.Typer(
    name="axefix",
    help="axefix: audit a live page for WCAG issues and get copy-paste fixes.",
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def _resolve_config(
    config: Optional[Path], overrides: dict[str, object]
) -> "AuditConfig":  # noqa: F821
    try:
        if config is not None:
            return load_config(config, overrides)
        return build_config(overrides)
    except (FileNotFoundError, ValueError, ValidationError) as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)


@app.command()
def audit(
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Page to audit (overrides target_url in the config)."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to audit-config.yml"),
    level: Optional[str] = typer.Option(None, "--level", "-l", help="WCAG conformance level: A, AA or AAA."),
    keyboard: Optional[bool] = typer.Option(None, "--keyboard/--no-keyboard", help="Run the keyboard focus walk."),
    captions: Optional[bool] = typer.Option(None, "--captions/--no-captions", help="Check media for caption tracks."),
    wait_for: Optional[str] = typer.Option(None, "--wait-for", help="CSS selector to wait for before scanning."),
    timeout_ms: Optional[int] = typer.Option(None, "--timeout-ms", help="Overall audit budget in milliseconds."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Directory for report.json, Markdown and HTML."),
    fail_on: Optional[str] = typer.Option(None, "--fail-on", help="Exit with code 2 if any violation is at least this severe (critical, serious, moderate, minor)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Audit a page and write the report.

    Examples:

        axefix audit --url https://example.com

        axefix audit --config audit-config.yml --level AAA --fail-on serious
    """
    _setup_logging(verbose)

    if fail_on is not None and fail_on not in IMPACT_ORDER:
        console.print(f"[red]--fail-on must be one of {', '.join(IMPACT_ORDER)}[/]")
        raise typer.Exit(code=1)

    cfg = _resolve_config(config, {
        "target_url": url,
        "conformance_level": level,
        "run_keyboard_walk": keyboard,
        "run_caption_check": captions,
        "wait_for_selector": wait_for,
        "overall_timeout_ms": timeout_ms,
        "output_directory": str(output) if output else None,
    })

    console.print(f"[bold]Auditing:[/] {cfg.target_url} [dim](WCAG {cfg.conformance_level.value})[/]\n")

    try:
        report = asyncio.run(_run_audit(cfg))
    except AuditError as exc:
        console.print(f"\n[red]Audit failed:[/] {exc}")
        raise typer.Exit(code=1)

    _write_outputs(report, Path(cfg.output_directory))
    _print_summary(report)

    if fail_on is not None:
        threshold = IMPACT_ORDER[fail_on]
        if any(IMPACT_ORDER.get(v.impact or "", len(IMPACT_ORDER)) <= threshold for v in report.violations):
            console.print(f"[red]Violations at or above '{fail_on}' found.[/]")
            raise typer.Exit(code=2)


async def _run_audit(cfg: "AuditConfig") -> "AuditReport":  # noqa: F821
    from axefix.orchestrator import AuditOrchestrator
    from axefix.shared.progress import AuditProgress

    with AuditProgress() as progress:
        progress.print_header(f"WCAG {cfg.conformance_level.value} audit")
        orchestrator = AuditOrchestrator(cfg, progress=progress)
        return await orchestrator.run()


def _write_outputs(report: "AuditReport", out_dir: Path) -> None:  # noqa: F821
    from axefix.output.dashboard import render_dashboard
    from axefix.output.markdown import render_markdown_report

    out_dir.mkdir(parents=True, exist_ok=True)

    json_path = out_dir / "report.json"
    json_path.write_text(report.model_dump_json(indent=2))
    console.print(f"[green]Report written to:[/] {json_path}")

    md_path = out_dir / "accessibility-report.md"
    md_path.write_text(render_markdown_report(report))
    console.print(f"[green]Markdown report written to:[/] {md_path}")

    html_path = out_dir / "accessibility-dashboard.html"
    html_path.write_text(render_dashboard(report))
    console.print(f"[green]HTML dashboard written to:[/] {html_path}")


def _print_summary(report: "AuditReport") -> None:  # noqa: F821
    s = report.summary
    console.print("\n[bold]── Summary ──[/]")
    console.print(
        f"  Violations: {s.total_violations} "
        f"([red]{s.critical} critical[/], [yellow]{s.serious} serious[/], "
        f"{s.moderate} moderate, {s.minor} minor)"
    )
    console.print(f"  Affected elements: {s.affected_nodes}")
    if report.keyboard is not None:
        kb = report.keyboard
        console.print(
            f"  Keyboard walk: {kb.state.value}, {len(kb.tab_order)} stop(s), "
            f"{len(kb.missing_focus_indicators)} missing indicator(s), {len(kb.focus_traps)} trap(s)"
        )
    if report.video_accessibility is not None:
        video = report.video_accessibility
        console.print(f"  Media: {len(video.elements)} found, {len(video.remediations)} without captions")


@app.command()
def validate(
    config: Path = typer.Option(..., "--config", "-c", help="Path to audit-config.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Validate a configuration file without running the audit."""
    _setup_logging(verbose)
    cfg = _resolve_config(config, {})

    console.print("[green]Config is valid![/]\n")
    console.print(f"  Target URL:     {cfg.target_url}")
    console.print(f"  Level:          WCAG {cfg.conformance_level.value}")
    console.print(f"  Keyboard walk:  {cfg.run_keyboard_walk} (budget {cfg.keyboard_step_budget})")
    console.print(f"  Caption check:  {cfg.run_caption_check}")
    if cfg.wait_for_selector:
        console.print(f"  Wait for:       {cfg.wait_for_selector}")
    console.print(f"  Timeout:        {cfg.overall_timeout_ms} ms")
    console.print(f"  Viewport:       {cfg.viewport.width}x{cfg.viewport.height}")
    console.print(f"  axe-core:       {cfg.axe_script_path or cfg.axe_script_url}")
    console.print(f"  Output dir:     {cfg.output_directory}")


@app.command()
def render(
    output: Path = typer.Option(..., "--output", "-o", help="Output directory from a previous run (must contain report.json)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Re-render the Markdown report and HTML dashboard from a saved report.json."""
    _setup_logging(verbose)
    from axefix.schemas.report import AuditReport

    report_path = output / "report.json"
    if not report_path.exists():
        console.print(f"[red]No report.json found in {output}[/]")
        console.print("Run [bold]axefix audit[/] first; it saves report.json at the end.")
        raise typer.Exit(code=1)

    report = AuditReport.model_validate_json(report_path.read_text())
    _write_outputs(report, output)


@app.command()
def tags(
    level: str = typer.Option("AA", "--level", "-l", help="WCAG conformance level: A, AA or AAA."),
) -> None:
    """Print the axe-core rule tags evaluated for a conformance level."""
    from axefix.remediation.tags import resolve_tags

    try:
        resolved = resolve_tags(level.strip().upper())
    except ValueError:
        console.print(f"[red]Unknown conformance level:[/] {level}")
        raise typer.Exit(code=1)
    for tag in resolved:
        console.print(tag)


@app.command()
def doctor(verbose: bool = typer.Option(False, "--verbose", "-v")) -> None:
    """Check that Playwright can launch Chromium on this machine."""
    _setup_logging(verbose)
    from axefix.shared.browser import check_browser_available, install_instructions

    if asyncio.run(check_browser_available()):
        console.print("[green]Chromium launched successfully.[/] axefix is ready to audit.")
        return
    console.print("[red]Chromium could not be launched.[/]\n")
    console.print(install_instructions())
    raise typer.Exit(code=1)
