"""CLI entry point for the weather contract suite.

Usage:
    weather-contract run --city London --concurrency 4
    weather-contract run --case invalid_api_key --case response_schema --json
    weather-contract list --expectations
    weather-contract stub --port 8008

Exit status of `run` is 0 only when every selected case passed.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys

import click

from .config import STUB_API_KEY, STUB_HOST, STUB_PORT, HarnessConfig
from .errors import HarnessFailure
from .report import exit_code, format_report, results_to_dict
from .suites import create_openweather_registry

logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
)
def cli(log_level: str) -> None:
    """Contract tests for the OpenWeather current weather API."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@cli.command()
@click.option("--base-url", default=None, help="API base URL (default: OPENWEATHER_BASE_URL).")
@click.option("--api-key", default=None, envvar="OPENWEATHER_API_KEY", show_envvar=True)
@click.option("--city", default=None, help="City expected in success responses.")
@click.option("--lat", type=float, default=None)
@click.option("--lon", type=float, default=None)
@click.option("--timeout-ms", type=float, default=None, help="Per-request deadline.")
@click.option("--concurrency", type=int, default=1, show_default=True, help="Cases in flight at once.")
@click.option("--case", "cases", multiple=True, help="Run only the named case (repeatable).")
@click.option("--json", "as_json", is_flag=True, help="Print a JSON report instead of text.")
def run(
    base_url: str | None,
    api_key: str | None,
    city: str | None,
    lat: float | None,
    lon: float | None,
    timeout_ms: float | None,
    concurrency: int,
    cases: tuple[str, ...],
    as_json: bool,
) -> None:
    """Run the contract cases and exit nonzero if any did not pass."""
    config = HarnessConfig.from_env(
        base_url=base_url,
        api_key=api_key,
        city=city,
        lat=lat,
        lon=lon,
        timeout_ms=timeout_ms,
    )
    registry = create_openweather_registry(config)
    only = list(cases) or None

    try:
        if concurrency > 1:
            results = asyncio.run(registry.run_all_async(concurrency=concurrency, only=only))
        else:
            results = registry.run_all(only=only)
    except HarnessFailure as e:
        raise click.UsageError(str(e)) from e

    if as_json:
        click.echo(json.dumps(results_to_dict(results), indent=2))
    else:
        click.echo(format_report(results))
    sys.exit(exit_code(results))


@cli.command(name="list")
@click.option(
    "--expectations", "-e", "show_expectations", is_flag=True,
    help="Also print what each case asserts.",
)
def list_cases(show_expectations: bool) -> None:
    """List registered case names with their descriptions."""
    registry = create_openweather_registry(HarnessConfig.from_env())
    for case in registry.cases:
        click.echo(f"{case.name}: {case.description}")
        if show_expectations:
            for expectation in case.expectations_factory():
                click.echo(f"    - {expectation.describe()}")


@cli.command()
@click.option("--host", default=STUB_HOST, show_default=True)
@click.option("--port", type=int, default=STUB_PORT, show_default=True)
@click.option("--api-key", default=STUB_API_KEY, show_default=True, help="appid the stub accepts.")
def stub(host: str, port: int, api_key: str) -> None:
    """Serve the offline OpenWeather stub."""
    import uvicorn

    from .stub import create_stub_app

    logger.info("Serving stub on http://%s:%d/data/2.5", host, port)
    uvicorn.run(create_stub_app(api_key=api_key), host=host, port=port)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
