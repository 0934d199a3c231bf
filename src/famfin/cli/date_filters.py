"""CLI helpers for date range resolution."""

from datetime import date

import click

from famfin.utils.date_parser import PERIODS as PERIOD_OPTIONS, get_date_range, parse_date


def period_options(command):
    """Attach --start-date, --end-date and the period flags to a command."""
    for period in reversed(PERIOD_OPTIONS):
        command = click.option(
            f"--{period}",
            period.replace("-", "_"),
            is_flag=True,
            help=f"Restrict to {period.replace('-', ' ')}",
        )(command)
    command = click.option(
        "--end-date", help="End date (YYYY-MM-DD, DD/MM/YYYY or relative like 'today')"
    )(command)
    command = click.option(
        "--start-date", help="Start date (YYYY-MM-DD, DD/MM/YYYY or relative like 'last month')"
    )(command)
    return command


def pop_period_flags(kwargs: dict) -> dict[str, bool]:
    """Remove the period flags from click kwargs, keyed by period name."""
    return {period: kwargs.pop(period.replace("-", "_"), False) for period in PERIOD_OPTIONS}


def _fail(ctx, message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)


def _parse_bound(ctx, value: str | None, label: str) -> date | None:
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        _fail(ctx, f"Invalid {label} date: {e}")


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Turn the period flags or explicit bounds of a command into dates.

    At most one period flag may be set, and a period excludes explicit
    bounds. ``default_range`` applies when nothing was given.

    Returns:
        Tuple of (start, end); either may be None for an open range
    """
    chosen = [period for period, is_set in period_flags.items() if is_set]
    flag_list = ", ".join(f"--{period}" for period in PERIOD_OPTIONS)

    if len(chosen) > 1:
        _fail(ctx, f"Only one period option ({flag_list}) can be specified at a time.")
    if chosen and (start_date or end_date):
        _fail(ctx, "Period options cannot be combined with --start-date or --end-date.")

    if chosen:
        return get_date_range(chosen[0])

    start = _parse_bound(ctx, start_date, "start")
    end = _parse_bound(ctx, end_date, "end")
    if start is None and end is None and default_range is not None:
        return default_range
    return start, end
