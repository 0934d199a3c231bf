"""Tests for CLI date filter helpers."""

from datetime import date

import click
import pytest

from famfin.cli.date_filters import (
    PERIOD_OPTIONS,
    pop_period_flags,
    resolve_cli_date_range,
)
from famfin.utils.date_parser import get_date_range


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_rejects_multiple_periods(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date=None,
            end_date=None,
            period_flags={"this-month": True, "last-month": True},
        )

    assert excinfo.value.exit_code == 1
    assert "Only one period option" in capsys.readouterr().err


def test_rejects_period_with_explicit_bounds(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date="2024-01-01",
            end_date=None,
            period_flags={"this-month": True},
        )

    assert excinfo.value.exit_code == 1
    assert "cannot be combined" in capsys.readouterr().err


def test_returns_period_range():
    start, end = resolve_cli_date_range(
        _ctx(),
        start_date=None,
        end_date=None,
        period_flags={"last-month": True},
    )

    assert (start, end) == get_date_range("last-month")


def test_parses_explicit_brazilian_dates():
    start, end = resolve_cli_date_range(
        _ctx(),
        start_date="02/01/2024",
        end_date="2024-01-05",
        period_flags={},
    )

    assert start == date(2024, 1, 2)
    assert end == date(2024, 1, 5)


def test_open_ended_range():
    start, end = resolve_cli_date_range(
        _ctx(), start_date="2024-01-02", end_date=None, period_flags={}
    )

    assert start == date(2024, 1, 2)
    assert end is None


def test_applies_default_range():
    default_range = (date(2020, 1, 1), date(2020, 1, 31))

    result = resolve_cli_date_range(
        _ctx(),
        start_date=None,
        end_date=None,
        period_flags={},
        default_range=default_range,
    )

    assert result == default_range


def test_no_default_range():
    assert resolve_cli_date_range(
        _ctx(), start_date=None, end_date=None, period_flags={}
    ) == (None, None)


def test_invalid_end_date(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(), start_date=None, end_date="not-a-date", period_flags={}
        )

    assert excinfo.value.exit_code == 1
    assert "Invalid end date" in capsys.readouterr().err


def test_pop_period_flags_removes_flags_from_kwargs():
    kwargs = {"this_month": True, "last_week": False, "start_date": None}

    flags = pop_period_flags(kwargs)

    assert set(flags) == set(PERIOD_OPTIONS)
    assert flags["this-month"] is True
    assert flags["this-year"] is False
    assert kwargs == {"start_date": None}
