from datetime import date

import pytest
import typer

from gym_cli.utils.date_ranges import parse_date, validate_date


def test_validate_date_valid() -> None:
    assert validate_date("2026-01-15") == "2026-01-15"
    assert validate_date(None) is None


def test_validate_date_bad_format() -> None:
    with pytest.raises(typer.BadParameter, match="Invalid date"):
        validate_date("01-15-2026")


def test_validate_date_bad_day() -> None:
    with pytest.raises(typer.BadParameter, match="Invalid date"):
        validate_date("2026-02-30")


def test_validate_date_not_a_date() -> None:
    with pytest.raises(typer.BadParameter, match="Invalid date"):
        validate_date("not-a-date")


def test_parse_date() -> None:
    assert parse_date("2026-02-14") == date(2026, 2, 14)
