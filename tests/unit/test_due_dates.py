"""Unit tests for due-date rules."""

from datetime import date

import pytest

from doctriage.domain.due_dates import (
    NATIONAL_HOLIDAYS,
    AdjustedDay,
    Direction,
    FixedDay,
    LastBusinessDay,
    NthBusinessDay,
    compute_due_date,
    compute_due_dates,
    default_rules,
    evaluate_rule,
    is_business_day,
    parse_competence,
)
from doctriage.domain.models import Competence


class TestParseCompetence:
    """Tests for parse_competence."""

    def test_valid(self) -> None:
        assert parse_competence("03/2024") == Competence(month=3, year=2024)

    def test_surrounding_whitespace(self) -> None:
        assert parse_competence(" 12/2023 ") == Competence(month=12, year=2023)

    @pytest.mark.parametrize("text", ["", None, "13/2024", "00/2024", "3/2024", "2024-03", "03/24"])
    def test_invalid(self, text: str | None) -> None:
        assert parse_competence(text) is None


class TestCompetence:
    """Tests for Competence."""

    def test_next_month(self) -> None:
        assert Competence(3, 2024).next_month() == Competence(4, 2024)

    def test_next_month_wraps_year(self) -> None:
        assert Competence(12, 2023).next_month() == Competence(1, 2024)

    def test_str(self) -> None:
        assert str(Competence(4, 2024)) == "04/2024"


class TestIsBusinessDay:
    """Tests for is_business_day."""

    def test_weekday(self) -> None:
        assert is_business_day(date(2024, 1, 2)) is True

    def test_weekend(self) -> None:
        assert is_business_day(date(2024, 1, 6)) is False
        assert is_business_day(date(2024, 1, 7)) is False

    def test_fixed_holidays(self) -> None:
        assert is_business_day(date(2024, 12, 25)) is False
        assert is_business_day(date(2024, 5, 1)) is False
        assert is_business_day(date(2025, 4, 21)) is False

    def test_holiday_table_has_eight_dates(self) -> None:
        assert len(NATIONAL_HOLIDAYS) == 8

    def test_custom_holiday_table(self) -> None:
        assert is_business_day(date(2024, 12, 25), holidays=set()) is True
        assert is_business_day(date(2024, 11, 20), holidays={(11, 20)}) is False


class TestAdjustedDay:
    """Tests for the day-with-adjustment rule."""

    def test_saturday_backward_to_friday(self) -> None:
        # 12/2023 -> January 2024, the 20th is a Saturday
        rule = AdjustedDay(20, Direction.BACKWARD)
        assert compute_due_date(rule, Competence(12, 2023)) == date(2024, 1, 19)

    def test_saturday_forward_to_monday(self) -> None:
        rule = AdjustedDay(20, Direction.FORWARD)
        assert compute_due_date(rule, Competence(12, 2023)) == date(2024, 1, 22)

    def test_business_day_unchanged(self) -> None:
        rule = AdjustedDay(10, Direction.FORWARD)
        assert compute_due_date(rule, Competence(3, 2024)) == date(2024, 4, 10)

    def test_holiday_and_weekend_backward(self) -> None:
        # Tiradentes 2025 is a Monday
        rule = AdjustedDay(21, Direction.BACKWARD)
        assert compute_due_date(rule, Competence(3, 2025)) == date(2025, 4, 18)

    def test_day_past_month_end_is_clamped(self) -> None:
        rule = AdjustedDay(31, Direction.BACKWARD)
        assert compute_due_date(rule, Competence(1, 2024)) == date(2024, 2, 29)


class TestNthBusinessDay:
    """Tests for the nth-business-day rule."""

    def test_fifth_business_day_skips_may_first(self) -> None:
        # May 2024: 1st is a holiday; 2, 3, 6, 7, 8
        rule = NthBusinessDay(5)
        assert compute_due_date(rule, Competence(4, 2024)) == date(2024, 5, 8)

    def test_first_business_day_after_new_year(self) -> None:
        assert compute_due_date(NthBusinessDay(1), Competence(12, 2023)) == date(2024, 1, 2)

    def test_n_beyond_month_returns_last_business_day(self) -> None:
        assert evaluate_rule(NthBusinessDay(23), 2025, 2) == date(2025, 2, 28)


class TestLastBusinessDay:
    """Tests for the last-business-day rule."""

    def test_month_ending_on_weekend(self) -> None:
        # June 30, 2024 is a Sunday
        assert compute_due_date(LastBusinessDay(), Competence(5, 2024)) == date(2024, 6, 28)

    def test_skips_weekend_and_holiday(self) -> None:
        holidays = NATIONAL_HOLIDAYS | {(6, 28)}
        due = compute_due_date(LastBusinessDay(), Competence(5, 2024), holidays)
        assert due == date(2024, 6, 27)

    def test_month_ending_on_weekday(self) -> None:
        assert compute_due_date(LastBusinessDay(), Competence(3, 2024)) == date(2024, 4, 30)


class TestFixedDay:
    """Tests for the fixed-day rule."""

    def test_no_adjustment(self) -> None:
        # June 1, 2024 is a Saturday
        assert compute_due_date(FixedDay(1), Competence(5, 2024)) == date(2024, 6, 1)

    def test_clamped(self) -> None:
        assert compute_due_date(FixedDay(31), Competence(1, 2023)) == date(2023, 2, 28)


class TestComputeDueDates:
    """Tests for compute_due_dates."""

    def test_default_bindings(self) -> None:
        assert compute_due_dates("03/2024") == {
            "Contracheque": "05/04/2024",
            "Folha de Pagamento": "05/04/2024",
            "FGTS": "19/04/2024",
            "INSS": "19/04/2024",
            "Simples Nacional": "22/04/2024",
            "Parcelamento": "30/04/2024",
            "Honorários": "10/04/2024",
            "Notas Fiscais": "01/04/2024",
        }

    def test_invalid_competence_returns_empty(self) -> None:
        assert compute_due_dates("2024/03") == {}
        assert compute_due_dates("") == {}
        assert compute_due_dates("13/2024") == {}

    def test_custom_rules(self) -> None:
        rules = {"Férias": AdjustedDay(15, Direction.FORWARD)}
        # June 15, 2024 is a Saturday
        assert compute_due_dates("05/2024", rules) == {"Férias": "17/06/2024"}

    def test_idempotent(self) -> None:
        assert compute_due_dates("12/2023") == compute_due_dates("12/2023")

    def test_default_rules_are_fresh_copies(self) -> None:
        rules = default_rules()
        rules.clear()
        assert default_rules()
