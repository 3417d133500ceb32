"""Command line interface for the mineral report toolkit."""

from __future__ import annotations

import json
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path

import typer
import uvicorn
from loguru import logger

from .catalog import CatalogError, MineralNotFoundError, MineralStore
from .config import AppConfig, load_config
from .config.inspector import check_config
from .report import AnalysisContext, ReportError, ReportService, ReportSettings
from .web import create_app


@dataclass(slots=True)
class CLIState:
    """Holds shared state between Typer commands."""

    config_path: Path
    _config: AppConfig | None = None

    def ensure_config(self) -> AppConfig:
        if self._config is None:
            self._config = load_config(AppConfig, self.config_path)
            _configure_logging(self._config.logging_level)
            logger.debug("Loaded configuration from {}", self.config_path)
        return self._config

    def minerals_root(self) -> Path:
        config = self.ensure_config()
        root = config.minerals_root
        if not root.is_absolute():
            root = (self.config_path.parent / root).resolve()
        return root

    def store(self) -> MineralStore:
        return MineralStore(self.minerals_root())

    def service(self) -> ReportService:
        return ReportService(ReportSettings.from_config(self.ensure_config().report))


app = typer.Typer(help="Mineral report generation helpers")
config_app = typer.Typer(help="Validate configuration files")
app.add_typer(config_app, name="config")


def _default_config_path() -> Path:
    repo_root = Path(__file__).resolve().parents[1]
    return repo_root / "config" / "example.toml"


def _stderr_sink(message: str) -> None:
    sys.stderr.write(message)


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(_stderr_sink, level=level)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):  # pragma: no cover - defensive guard
        raise RuntimeError("CLI context is not initialised")
    return state


def _exit(code: int) -> None:
    raise typer.Exit(code)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config: Path = typer.Option(
        _default_config_path(),
        help="Path to the TOML configuration file",
    ),
) -> None:
    """Initialise CLI state."""

    ctx.obj = CLIState(config_path=config.resolve())
    if ctx.invoked_subcommand is None:
        logger.warning("No command provided. Try 'status' or 'report <slug>'.")
        _exit(0)


@app.command(help="Show configuration and toolchain status")
def status(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    config = state.ensure_config()
    _report_system_status(config, state.minerals_root())


@app.command("list", help="List catalogued minerals")
def list_minerals(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    try:
        records = state.store().list_minerals()
    except CatalogError as exc:
        logger.error("Cannot read mineral catalogue: {}", exc)
        _exit(1)
        return
    if not records:
        logger.warning("No minerals found in {}", state.minerals_root())
    for record in records:
        typer.echo(f"{record.slug}\t{record.name()}")


@app.command(help="Generate the HTML and PDF report for one mineral")
def report(
    ctx: typer.Context,
    slug: str = typer.Argument(..., help="Mineral folder name, e.g. mineral.silicate.0x1a2b3c"),
    audience: str = typer.Option("", "--audience", help="Who the report is written for"),
    purpose: str = typer.Option("", "--purpose", help="Decision the report supports"),
    site_context: str = typer.Option("", "--site-context", help="Optional site description"),
    language: str | None = typer.Option(None, "--language", help="Language code for localized text"),
) -> None:
    state = _get_state(ctx)
    config = state.ensure_config()
    store = state.store()

    try:
        record = store.get(slug)
    except MineralNotFoundError as exc:
        logger.error("{}", exc)
        _exit(2)
        return
    except CatalogError as exc:
        logger.error("Cannot load mineral {}: {}", slug, exc)
        _exit(2)
        return

    context = AnalysisContext(
        audience=audience,
        purpose=purpose,
        site_context=site_context,
        language=language or config.report.default_language,
    )
    try:
        artifacts = state.service().generate_report(record, store.folder_for(record), context)
    except ReportError as exc:
        logger.error("Report generation failed at stage {}", exc.stage)
        typer.echo(exc.diagnostic, err=True)
        _exit(1)
        return

    typer.echo(json.dumps(artifacts.to_dict(), indent=2, ensure_ascii=False))


@app.command(help="Run the report API server")
def serve(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", help="Host to bind the API server to"),
    port: int = typer.Option(8000, help="Port to bind the API server to"),
    dry_run: bool = typer.Option(False, help="Build the application without starting the server"),
) -> None:
    state = _get_state(ctx)
    config = state.ensure_config()
    if config.web is not None and not config.web.enabled:
        logger.error("Web API is disabled in the configuration")
        _exit(1)
        return

    app_instance = create_app(state.store(), state.service(), config)
    if dry_run:
        logger.info("[Dry Run] Server will not be started.")
        return

    logger.info("Serving report API on {}:{}", host, port)
    uvicorn.run(app_instance, host=host, port=port)


@config_app.command("check", help="Validate a configuration file")
def config_check(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    result, exit_code, _ = check_config(state.config_path)
    typer.echo(json.dumps(result, indent=2, ensure_ascii=False))
    if exit_code:
        _exit(exit_code)


def _report_system_status(config: AppConfig, minerals_root: Path) -> None:
    logger.info("=== Mineral Catalogue ===")
    logger.info("Minerals root: {} (exists={})", minerals_root, minerals_root.exists())

    logger.info("=== Report Pipeline ===")
    report_cfg = config.report
    build = report_cfg.build
    executable = shutil.which(build.command[0])
    logger.info("Build command: {}", " ".join([*build.command, build.source_filename]))
    logger.info("Build executable: {}", executable or "NOT FOUND")
    logger.info("Timeout: {}s, artifact: {}", build.timeout_seconds, build.artifact_filename)
    logger.info("Markup document: {}", report_cfg.markup_filename)
    logger.info("Max recommendations: {}", report_cfg.analysis.max_recommendations)
    logger.info("Logging level: {}", config.logging_level)


def main(argv: list[str] | None = None) -> int:
    """Entry point compatible with setuptools console scripts."""

    try:
        result = app(args=argv, standalone_mode=False)
    except typer.Exit as exc:  # pragma: no cover - Typer translates exit codes
        return exc.exit_code
    if isinstance(result, int):
        return result
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
