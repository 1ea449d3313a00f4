"""Typer CLI entrypoints for termfolio."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import List, Optional

import click
import typer
from typer.core import TyperGroup

from termfolio.config import Settings, initialize_project_config, load_settings
from termfolio.errors import ProjectConfigError, UnknownThemeError, error_summary
from termfolio.kernel.cells import DeferredScheduler, Fetcher, HttpxFetcher
from termfolio.kernel.content import build_default_registry
from termfolio.kernel.theme import get_theme, theme_ids
from termfolio.tui.controller import TerminalController, start_tui
from termfolio.ui.render import print_scrollback, render_doctor_text, render_notice


class TermfolioGroup(TyperGroup):
    """Treat an unknown first positional token as an implicit `run` command."""

    def resolve_command(self, ctx: click.Context, args: List[str]):
        if args and not args[0].startswith("-"):
            known = set(self.list_commands(ctx))
            if args[0] not in known:
                run_command = self.get_command(ctx, "run")
                if run_command is not None:
                    return "run", run_command, args
        return super().resolve_command(ctx, args)


app = typer.Typer(
    invoke_without_command=True,
    no_args_is_help=False,
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
    help="termfolio: a portfolio terminal on a fake desktop",
)
app.info.cls = TermfolioGroup


def _build_fetcher(settings: Settings) -> Fetcher:
    return HttpxFetcher(timeout_sec=settings.fetch_timeout_sec, user_agent=settings.user_agent)


def _load_settings_or_exit(theme: Optional[str]) -> Settings:
    try:
        return load_settings(theme=theme)
    except (ProjectConfigError, UnknownThemeError) as exc:
        typer.echo(render_notice("error", error_summary(exc)), err=True)
        raise typer.Exit(code=2)


def _execute_desktop(theme: Optional[str]) -> int:
    settings = _load_settings_or_exit(theme)
    return start_tui(settings)


def _execute_command(raw: str, theme: Optional[str]) -> int:
    settings = _load_settings_or_exit(theme)
    controller = TerminalController(settings, fetcher=_build_fetcher(settings))
    scheduler = DeferredScheduler()
    controller.set_scheduler(scheduler)
    terminal = controller.terminal
    try:
        start = len(terminal.session.scrollback)
        terminal.submit_command(raw)
        asyncio.run(scheduler.run_all(terminal.runner))
        print_scrollback(
            terminal.session.scrollback[start:],
            terminal.cells,
            terminal.theme,
            sys.stdout,
        )
    finally:
        controller.close()
    return 0


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    theme: Optional[str] = typer.Option(None, "--theme", help="Theme preset ID (default from config)"),
) -> None:
    ctx.obj = ctx.obj or {}
    ctx.obj["theme"] = theme

    if ctx.invoked_subcommand is not None:
        return

    raise typer.Exit(code=_execute_desktop(theme))


@app.command("init")
def init_cmd(
    force: bool = typer.Option(
        False,
        "--force",
        help="Recreate .termfolio (removes the existing directory first)",
    ),
) -> None:
    try:
        config_root = initialize_project_config(force=force)
    except ProjectConfigError as exc:
        typer.echo(render_notice("error", str(exc)), err=True)
        raise typer.Exit(code=2)

    typer.echo(render_notice("success", "Initialized project config at: {0}".format(config_root)))


@app.command("desktop")
def desktop_cmd(
    ctx: typer.Context,
    theme: Optional[str] = typer.Option(None, "--theme", help="Theme preset ID (default from config)"),
) -> None:
    """Open the desktop with the terminal window."""
    parent_obj = ctx.obj or {}
    resolved_theme = theme if theme is not None else parent_obj.get("theme")
    raise typer.Exit(code=_execute_desktop(resolved_theme))


@app.command("run")
def run_cmd(
    ctx: typer.Context,
    command_parts: List[str] = typer.Argument(..., help="Terminal command to dispatch"),
    theme: Optional[str] = typer.Option(None, "--theme", help="Theme preset ID (default from config)"),
) -> None:
    """Dispatch one terminal command and print the resulting lines."""
    raw = " ".join(command_parts).strip()
    if not raw:
        typer.echo(render_notice("error", "A command is required."), err=True)
        raise typer.Exit(code=2)

    parent_obj = ctx.obj or {}
    resolved_theme = theme if theme is not None else parent_obj.get("theme")
    raise typer.Exit(code=_execute_command(raw, resolved_theme))


@app.command("doctor")
def doctor_cmd(
    output_format: str = typer.Option("text", "--format", help="Output format: json|text"),
    theme: Optional[str] = typer.Option(None, "--theme", help="Theme preset ID (default from config)"),
) -> None:
    """Report settings, config state and debug log health."""
    normalized_format = output_format.strip().lower()
    if normalized_format not in {"json", "text"}:
        typer.echo(render_notice("error", "Unsupported format: {0}".format(output_format)), err=True)
        raise typer.Exit(code=2)

    settings = _load_settings_or_exit(theme)
    controller = TerminalController(settings, fetcher=_build_fetcher(settings))
    try:
        report = controller.doctor()
        if normalized_format == "json":
            typer.echo(json.dumps(report, ensure_ascii=True, indent=2))
            return
        typer.echo(render_doctor_text(report))
    finally:
        controller.close()


@app.command("commands")
def commands_cmd() -> None:
    """List the terminal's commands."""
    registry = build_default_registry()
    summaries = registry.list_commands()
    width = max(len(item.name) for item in summaries)
    for item in summaries:
        typer.echo("{0}  {1}".format(item.name.ljust(width), item.description))


@app.command("themes")
def themes_cmd() -> None:
    """List theme presets."""
    for preset_id in theme_ids():
        theme = get_theme(preset_id)
        typer.echo("{0}  {1}".format(preset_id.ljust(10), theme.header))


if __name__ == "__main__":
    app()
