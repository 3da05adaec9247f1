"""CLI entry point for tapcheck."""
from __future__ import annotations

import logging
import sys
from typing import Optional, Tuple

import click

from tapcheck import __version__, api, bootstrap
from tapcheck.config import REPORT_FORMATS, HarnessConfig, RunOptions, find_default_config, load_config
from tapcheck.core.errors import HarnessError
from tapcheck.discovery import discover, load_test_module
from tapcheck.reporting import JsonReporter, Sink, TapSink, TerminalReporter


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


class CliState:
    """Holds global CLI state."""

    def __init__(self, verbose: bool) -> None:
        self.verbose = verbose


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"tapcheck {__version__}")
    raise click.exceptions.Exit()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--verbose", is_flag=True, help="Enable verbose logging output (stderr).")
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the tapcheck version and exit.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Top level CLI group for tapcheck."""

    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = CliState(verbose=verbose)


@cli.command()
@click.argument("patterns", nargs=-1)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML config file (defaults to ./tapcheck.yaml when present).",
)
@click.option("-r", "--require", "requires", multiple=True, help="Module to import before loading tests.")
@click.option("--timeout", type=float, help="Seconds a test may take to complete.")
@click.option("--no-timeout", is_flag=True, help="Wait for every test indefinitely.")
@click.option(
    "--report",
    "report_format",
    type=click.Choice(REPORT_FORMATS),
    help="Report format (tap by default).",
)
@click.option("--report-path", type=str, help="When --report json, write to this path.")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors in terminal output.")
@click.pass_obj
def run(
    state: CliState,
    patterns: Tuple[str, ...],
    config_path: Optional[str],
    requires: Tuple[str, ...],
    timeout: Optional[float],
    no_timeout: bool,
    report_format: Optional[str],
    report_path: Optional[str],
    no_color: bool,
) -> None:
    """Load test files matching PATTERNS and run them, emitting TAP."""

    options = RunOptions(
        patterns=patterns,
        requires=requires,
        timeout=timeout,
        no_timeout=no_timeout,
        report=report_format,
        report_path=report_path,
        color=False if no_color else None,
    )
    try:
        config = _load_config(config_path)
        settings = options.apply(config)
        if not settings.patterns:
            raise click.UsageError("No test file patterns given (pass PATTERNS or set 'patterns' in the config)")
        files = discover(settings.patterns)
        if not files:
            click.echo("No test files matched the provided patterns.", err=True)
            raise click.exceptions.Exit(1)
        runner = api.reset(timeout=settings.timeout)
        runner.context.attach(_build_sink(settings))
        bootstrap(settings.requires)
        for path in files:
            load_test_module(path)
        exit_code = runner.run_sync()
    except (click.ClickException, click.exceptions.Exit):
        raise
    except (HarnessError, ValueError, ImportError, OSError) as exc:
        # Partially loaded cases must not run at interpreter exit.
        api.reset()
        raise click.ClickException(str(exc)) from exc
    raise click.exceptions.Exit(exit_code)


def _load_config(config_path: Optional[str]) -> HarnessConfig:
    if config_path:
        return load_config(config_path)
    default = find_default_config()
    if default is not None:
        return load_config(str(default))
    return HarnessConfig()


def _build_sink(settings: HarnessConfig) -> Sink:
    if settings.report == "json":
        return JsonReporter(settings.report_path)
    if settings.report == "terminal":
        return TerminalReporter(use_color=settings.color)
    return TapSink.console()


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="tapcheck", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
