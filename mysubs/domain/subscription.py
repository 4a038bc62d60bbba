"""
Subscription domain entity
"""
from dataclasses import dataclass, field

from mysubs.domain.year_month import YearMonth


@dataclass
class Subscription:
    """
    Subscription record

    id is assigned by the repository on create and never changes afterwards.
    Update replaces every other field at once.
    """
    service_name: str
    price: int
    user_id: str
    start_date: YearMonth = field(default_factory=YearMonth.unset)
    end_date: YearMonth = field(default_factory=YearMonth.unset)
    id: str = ""

    def overlaps(self, start: YearMonth, end: YearMonth) -> bool:
        """Inclusive overlap with the period [start, end]"""
        return self.start_date <= end and self.end_date >= start
