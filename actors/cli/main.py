"""ulid-core command-line interface implemented with Typer."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import typer
import yaml
from pydantic import ValidationError

from packages.ulid_core.config import load_settings
from packages.ulid_core.errors import UlidError, exception_to_error
from packages.ulid_core.ids import ClockRegressionPolicy, Ulid
from packages.ulid_core.logging import configure_logging
from packages.ulid_core.service import UlidService, build_ulid_service

SUCCESS_EXIT_CODE = 0
INVALID_EXIT_CODE = 1
CONFIG_ERROR_EXIT_CODE = 2
DOMAIN_ERROR_EXIT_CODE = 3


@dataclass(frozen=True)
class CliConfig:
    """Global CLI runtime options shared by every command."""

    service: UlidService
    as_json: bool


def _emit_output(result: Any, as_json: bool, render: Callable[[Any], str] = str) -> None:
    """Render command output in requested format."""
    if as_json:
        typer.echo(json.dumps(result, sort_keys=True, separators=(",", ":")))
        return
    typer.echo(render(result))


def _emit_error(exc: UlidError, as_json: bool) -> None:
    """Render a domain error to stderr."""
    if as_json:
        detail = exception_to_error(exc)
        typer.echo(
            json.dumps(
                {
                    "error": detail.message,
                    "code": detail.code,
                    "category": detail.category.value,
                    "retryable": detail.retryable,
                },
                sort_keys=True,
            ),
            err=True,
        )
        return
    typer.echo(f"error: {exc}", err=True)


def _run_command(
    cfg: CliConfig,
    invoke: Callable[[UlidService], Any],
    render: Callable[[Any], str] = str,
) -> None:
    """Execute one service call and map outputs/errors to process semantics."""
    try:
        result = invoke(cfg.service)
    except UlidError as exc:
        _emit_error(exc, cfg.as_json)
        raise typer.Exit(code=DOMAIN_ERROR_EXIT_CODE) from exc

    _emit_output(result, cfg.as_json, render)
    raise typer.Exit(code=SUCCESS_EXIT_CODE)


def _require_config(ctx: typer.Context) -> CliConfig:
    """Return required CLI config from Typer context."""
    config = ctx.obj
    if not isinstance(config, CliConfig):
        raise RuntimeError("CLI configuration not initialized")
    return config


def _iso_or_none(value: Ulid) -> str | None:
    """Return the ISO-8601 time of ``value`` when ``datetime`` can represent it."""
    try:
        return value.as_datetime().isoformat()
    except (OverflowError, ValueError, OSError):
        return None


def _describe(value: Ulid) -> dict[str, Any]:
    return {
        "ulid": str(value),
        "timestamp": value.timestamp,
        "datetime": _iso_or_none(value),
        "randomness": f"{value.randomness:020x}",
        "bytes": value.to_bytes().hex(),
    }


def _render_description(data: dict[str, Any]) -> str:
    return "\n".join(
        f"{key}: {'-' if data[key] is None else data[key]}"
        for key in ("ulid", "timestamp", "datetime", "randomness", "bytes")
    )


app = typer.Typer(no_args_is_help=True, help="ULID command-line interface")


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Path | None = typer.Option(
        None,
        "--config",
        envvar="ULID_CONFIG_PATH",
        help="YAML settings file (defaults to ~/.config/ulid-core/ulid.yaml)",
    ),
    log_level: str | None = typer.Option(None, help="Override logging level"),
    hold_on_regression: bool = typer.Option(
        False,
        "--hold-on-regression",
        help="Reuse the last timestamp when the clock moves backwards",
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON output"),
) -> None:
    """Load settings, configure logging, and build the ULID service."""
    cli_params: dict[str, Any] = {}
    if log_level is not None:
        cli_params["logging"] = {"level": log_level.upper()}
    if hold_on_regression:
        cli_params["generator"] = {"clock_regression": ClockRegressionPolicy.HOLD}
    try:
        settings = load_settings(cli_params=cli_params, config_path=config_path)
    except (ValidationError, yaml.YAMLError) as exc:
        typer.echo(f"error: invalid configuration: {exc}", err=True)
        raise typer.Exit(code=CONFIG_ERROR_EXIT_CODE) from exc

    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
        stream=sys.stderr,
    )
    ctx.obj = CliConfig(service=build_ulid_service(settings=settings), as_json=as_json)


@app.command("generate")
def generate_command(
    ctx: typer.Context,
    seed_time: int | None = typer.Option(
        None, help="Timestamp in milliseconds since the Unix epoch"
    ),
    count: int = typer.Option(1, min=1, help="Number of ULIDs to generate"),
) -> None:
    """Generate one or more monotonic ULIDs."""
    cfg = _require_config(ctx)
    _run_command(
        cfg,
        lambda service: [service.generate(seed_time) for _ in range(count)],
        render="\n".join,
    )


@app.command("validate")
def validate_command(
    ctx: typer.Context, text: str = typer.Argument(..., help="ULID text")
) -> None:
    """Check ULID syntax; exits 1 when invalid."""
    cfg = _require_config(ctx)
    valid = cfg.service.is_valid(text)
    _emit_output(
        {"ulid": text, "valid": valid},
        cfg.as_json,
        render=lambda data: "valid" if data["valid"] else "invalid",
    )
    raise typer.Exit(code=SUCCESS_EXIT_CODE if valid else INVALID_EXIT_CODE)


@app.command("decode-time")
def decode_time_command(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="ULID text"),
    iso: bool = typer.Option(False, "--iso", help="Print ISO-8601 UTC time"),
) -> None:
    """Print the millisecond timestamp encoded in a ULID."""
    cfg = _require_config(ctx)
    if iso:
        _run_command(
            cfg,
            lambda service: _iso_or_none(service.decode(text)),
            render=lambda value: value or "-",
        )
    else:
        _run_command(cfg, lambda service: service.decode_time(text))


@app.command("inspect")
def inspect_command(
    ctx: typer.Context, text: str = typer.Argument(..., help="ULID text")
) -> None:
    """Print every component of a ULID."""
    cfg = _require_config(ctx)
    _run_command(
        cfg,
        lambda service: _describe(service.decode(text)),
        render=_render_description,
    )


if __name__ == "__main__":
    app()
