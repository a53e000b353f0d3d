"""Sanitising and quality checks for daily bar sequences."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Iterable

from tickerlens.models.bar import DailyBar

_DATE_RE = re.compile(r"^\d{8}$")


@dataclass
class ValidationCheck:
    """Outcome of one named check."""

    name: str
    passed: bool
    message: str = ""


@dataclass
class ValidationResult:
    """All checks run over one bar sequence."""

    checks: list[ValidationCheck] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(c.passed for c in self.checks)

    @property
    def failed_checks(self) -> list[ValidationCheck]:
        return [c for c in self.checks if not c.passed]


def clean_daily_bars(bars: Iterable[DailyBar]) -> list[DailyBar]:
    """Sort ascending by date, drop malformed rows and duplicate dates.

    Rows with an empty date or a non-positive (or non-finite) close are
    discarded. For a duplicated date the last row seen wins.
    """
    by_date: dict[str, DailyBar] = {}
    for bar in bars:
        if not bar.date:
            continue
        if not math.isfinite(bar.close) or bar.close <= 0:
            continue
        by_date[bar.date] = bar
    return [by_date[d] for d in sorted(by_date)]


def _check(name: str, failures: int, message: str) -> ValidationCheck:
    if failures:
        return ValidationCheck(name, False, f"{failures} {message}")
    return ValidationCheck(name, True)


def validate_bars(bars: list[DailyBar]) -> ValidationResult:
    """Run quality checks on a cleaned daily bar sequence.

    Checks:
        1. not_empty: at least one bar
        2. finite_prices: no NaN/Inf in OHLC
        3. date_format: every date is ``YYYYMMDD``
        4. date_order: strictly ascending dates
        5. volume_sanity: non-negative volume
        6. ohlc_consistency: low <= open/close <= high
    """
    if not bars:
        return ValidationResult([ValidationCheck("not_empty", False, "No bars provided")])

    result = ValidationResult([ValidationCheck("not_empty", True, f"{len(bars)} bars")])
    result.checks.append(_check(
        "finite_prices",
        sum(1 for b in bars if not all(math.isfinite(v) for v in (b.open, b.high, b.low, b.close))),
        "bars with NaN/Inf prices",
    ))
    result.checks.append(_check(
        "date_format",
        sum(1 for b in bars if not _DATE_RE.match(b.date)),
        "bars with a malformed date",
    ))
    result.checks.append(_check(
        "date_order",
        sum(1 for prev, cur in zip(bars, bars[1:]) if cur.date <= prev.date),
        "bars out of order",
    ))
    result.checks.append(_check(
        "volume_sanity",
        sum(1 for b in bars if b.volume < 0),
        "bars with negative volume",
    ))
    result.checks.append(_check(
        "ohlc_consistency",
        sum(1 for b in bars if not (b.low <= min(b.open, b.close) and max(b.open, b.close) <= b.high)),
        "bars outside their high/low range",
    ))
    return result
