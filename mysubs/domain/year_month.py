"""
YearMonth value type - calendar month/year used for subscription periods

The only stable text form is "MM-YYYY" (e.g. "07-2025"). Values are
normalized to the first instant of the month, so day and time never leak
into comparisons or persisted data. An empty string parses to the unset
sentinel, which validators reject as a missing field.
"""
import re
from datetime import date, datetime
from functools import total_ordering

from mysubs.domain.errors import DecodeError

YEAR_MONTH_FORMAT = "MM-YYYY"

_PATTERN = re.compile(r"([0-9]{2})-([0-9]{4})")


class YearMonthDecodeError(DecodeError):
    pass


@total_ordering
class YearMonth:
    """
    Month granularity point in time

    Example:
        >>> YearMonth.parse("07-2025") < YearMonth.parse("08-2025")
        True
        >>> str(YearMonth(datetime(2025, 7, 15, 13, 30)))
        '07-2025'
    """

    __slots__ = ("_instant",)

    def __init__(self, instant: date | datetime | None = None):
        if instant is None:
            self._instant = None
        else:
            self._instant = datetime(instant.year, instant.month, 1)

    @classmethod
    def unset(cls) -> "YearMonth":
        return cls(None)

    @classmethod
    def of(cls, year: int, month: int) -> "YearMonth":
        if not 1 <= month <= 12:
            raise YearMonthDecodeError(f"month out of range: {month}")
        return cls(datetime(year, month, 1))

    @classmethod
    def from_date(cls, value: date | datetime) -> "YearMonth":
        return cls(value)

    @classmethod
    def parse(cls, text: str) -> "YearMonth":
        """
        Parse "MM-YYYY"

        Args:
            text: Month and four-digit year separated by a dash

        Returns:
            Normalized YearMonth; unset value for an empty string

        Raises:
            YearMonthDecodeError: text does not match MM-YYYY or month not in 1..12
        """
        if text == "":
            return cls.unset()

        match = _PATTERN.fullmatch(text)
        if not match:
            raise YearMonthDecodeError(f'invalid month "{text}": expected {YEAR_MONTH_FORMAT}')

        month, year = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12 or year < 1:
            raise YearMonthDecodeError(f'invalid month "{text}": expected {YEAR_MONTH_FORMAT}')

        return cls(datetime(year, month, 1))

    @property
    def is_unset(self) -> bool:
        return self._instant is None

    @property
    def year(self) -> int:
        return self._instant.year if self._instant else 0

    @property
    def month(self) -> int:
        return self._instant.month if self._instant else 0

    def format(self) -> str:
        if self._instant is None:
            return ""
        return f"{self._instant.month:02d}-{self._instant.year:04d}"

    def to_datetime(self) -> datetime | None:
        return self._instant

    def to_date(self) -> date | None:
        if self._instant is None:
            return None
        return self._instant.date()

    def _key(self) -> tuple[int, int]:
        # unset sorts before any real month
        return (self.year, self.month)

    def __eq__(self, other):
        if not isinstance(other, YearMonth):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other):
        if not isinstance(other, YearMonth):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self):
        return hash(self._key())

    def __str__(self):
        return self.format()

    def __repr__(self):
        if self._instant is None:
            return "YearMonth.unset()"
        return f"YearMonth({self.format()!r})"
