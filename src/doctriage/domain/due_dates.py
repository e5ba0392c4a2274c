"""Due-date rules for accounting obligations.

Obligations for a competence (month/year) fall due in the following month.
Each category is bound to one rule, evaluated against a table of fixed
national holidays.
"""

import calendar
import logging
import re
from collections.abc import Collection, Mapping
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from .models import Competence

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d/%m/%Y"
COMPETENCE_PATTERN = re.compile(r"^\s*(\d{2})/(\d{4})\s*$")

# (month, day)
NATIONAL_HOLIDAYS: frozenset[tuple[int, int]] = frozenset(
    {
        (1, 1),  # Confraternização Universal
        (4, 21),  # Tiradentes
        (5, 1),  # Dia do Trabalho
        (9, 7),  # Independência
        (10, 12),  # Nossa Senhora Aparecida
        (11, 2),  # Finados
        (11, 15),  # Proclamação da República
        (12, 25),  # Natal
    }
)


class Direction(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass(frozen=True)
class FixedDay:
    """Calendar day of the target month, no adjustment."""

    day: int


@dataclass(frozen=True)
class NthBusinessDay:
    n: int


@dataclass(frozen=True)
class AdjustedDay:
    """Calendar day moved to the nearest business day in a direction."""

    day: int
    direction: Direction


@dataclass(frozen=True)
class LastBusinessDay:
    pass


DueDateRule = FixedDay | NthBusinessDay | AdjustedDay | LastBusinessDay


def default_rules() -> dict[str, DueDateRule]:
    """Category bindings used by the accounting office."""
    return {
        "Contracheque": NthBusinessDay(5),
        "Folha de Pagamento": NthBusinessDay(5),
        "FGTS": AdjustedDay(20, Direction.BACKWARD),
        "INSS": AdjustedDay(20, Direction.BACKWARD),
        "Simples Nacional": AdjustedDay(20, Direction.FORWARD),
        "Parcelamento": LastBusinessDay(),
        "Honorários": AdjustedDay(10, Direction.FORWARD),
        "Notas Fiscais": FixedDay(1),
    }


def parse_competence(text: str | None) -> Competence | None:
    """Parse "MM/YYYY"; returns None when malformed."""
    if not text:
        return None
    match = COMPETENCE_PATTERN.match(text)
    if not match:
        return None
    month, year = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        return None
    return Competence(month=month, year=year)


def is_business_day(
    day: date, holidays: Collection[tuple[int, int]] = NATIONAL_HOLIDAYS
) -> bool:
    if day.weekday() >= 5:
        return False
    return (day.month, day.day) not in holidays


def _clamped(year: int, month: int, day: int) -> date:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last))


def evaluate_rule(
    rule: DueDateRule,
    year: int,
    month: int,
    holidays: Collection[tuple[int, int]] = NATIONAL_HOLIDAYS,
) -> date:
    """Evaluate a rule against a target month (already the month after competence)."""
    if isinstance(rule, FixedDay):
        return _clamped(year, month, rule.day)

    if isinstance(rule, NthBusinessDay):
        found = 0
        current = date(year, month, 1)
        last = current
        while current.month == month:
            if is_business_day(current, holidays):
                found += 1
                last = current
                if found == rule.n:
                    return current
            current += timedelta(days=1)
        # Fewer business days than n in the month: last one found
        return last

    if isinstance(rule, AdjustedDay):
        current = _clamped(year, month, rule.day)
        step = timedelta(days=1 if rule.direction is Direction.FORWARD else -1)
        while not is_business_day(current, holidays):
            current += step
        return current

    if isinstance(rule, LastBusinessDay):
        current = _clamped(year, month, 31)
        while not is_business_day(current, holidays):
            current -= timedelta(days=1)
        return current

    raise TypeError(f"Unknown due-date rule: {rule!r}")


def compute_due_date(
    rule: DueDateRule,
    competence: Competence,
    holidays: Collection[tuple[int, int]] = NATIONAL_HOLIDAYS,
) -> date:
    target = competence.next_month()
    return evaluate_rule(rule, target.year, target.month, holidays)


def compute_due_date_map(
    competence: Competence,
    rules: Mapping[str, DueDateRule],
    holidays: Collection[tuple[int, int]] = NATIONAL_HOLIDAYS,
) -> dict[str, date]:
    return {
        category: compute_due_date(rule, competence, holidays)
        for category, rule in rules.items()
    }


def compute_due_dates(
    competence: str,
    rules: Mapping[str, DueDateRule] | None = None,
    holidays: Collection[tuple[int, int]] = NATIONAL_HOLIDAYS,
) -> dict[str, str]:
    """Compute the due date of every bound category for a competence.

    Returns {category: "DD/MM/YYYY"}, or an empty mapping when the
    competence is not a valid "MM/YYYY" string.
    """
    parsed = parse_competence(competence)
    if parsed is None:
        logger.warning(f"Invalid competence: {competence!r}")
        return {}

    if rules is None:
        rules = default_rules()

    return {
        category: due.strftime(DATE_FORMAT)
        for category, due in compute_due_date_map(parsed, rules, holidays).items()
    }
