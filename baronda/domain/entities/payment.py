"""Dues payments and the month/year period they settle."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from baronda.domain.errors import InvalidPeriodKey

# English and Indonesian month names; the dues screens label periods as "Juli 2024".
_MONTHS: dict[str, int] = {
    "january": 1, "januari": 1, "jan": 1,
    "february": 2, "februari": 2, "feb": 2, "pebruari": 2,
    "march": 3, "maret": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5, "mei": 5,
    "june": 6, "juni": 6, "jun": 6,
    "july": 7, "juli": 7, "jul": 7,
    "august": 8, "agustus": 8, "aug": 8, "agu": 8, "agt": 8,
    "september": 9, "sep": 9, "sept": 9,
    "october": 10, "oktober": 10, "oct": 10, "okt": 10,
    "november": 11, "nopember": 11, "nov": 11,
    "december": 12, "desember": 12, "dec": 12, "des": 12,
}
_ISO_PERIOD = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{1,2})$")
_NAMED_PERIOD = re.compile(r"^(?P<month>[A-Za-z]+)\s+(?P<year>\d{4})$")

_MONTH_LABELS = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)


@dataclass(frozen=True)
class PeriodKey:
    """A dues period identified by month (1-12) and year."""

    month: int
    year: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12 or self.year < 1900:
            raise InvalidPeriodKey(f"{self.month}/{self.year}")

    @classmethod
    def parse(cls, raw: str) -> "PeriodKey":
        """Parse ``"July 2024"``, ``"Juli 2024"``, ``"Jul 2024"`` or ``"2024-07"``."""

        text = (raw or "").strip()
        match = _ISO_PERIOD.match(text)
        if match:
            return cls(month=int(match.group("month")), year=int(match.group("year")))
        match = _NAMED_PERIOD.match(text)
        if match:
            month = _MONTHS.get(match.group("month").lower())
            if month is not None:
                return cls(month=month, year=int(match.group("year")))
        raise InvalidPeriodKey(raw)

    @property
    def label(self) -> str:
        return f"{_MONTH_LABELS[self.month - 1]} {self.year}"

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass
class Payment:
    """A dues payment recorded by a treasurer or officer."""

    id: int | None
    recipient_id: str
    month: int
    year: int
    amount: int
    paid_at: datetime | None = None
    recorded_by: str | None = None


__all__ = ["Payment", "PeriodKey"]
