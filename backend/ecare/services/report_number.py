"""Report number generation.

Format: letter prefix followed by a five-digit counter.
- ``A00001`` … ``A99999``, then ``B00001`` … ``Z99999``
- after ``Z99999`` the prefix grows to two letters: ``AA00001`` … ``AZ99999``, ``BA00001`` …
"""

import re
import string

from sqlalchemy.orm import Session

from ecare.repositories.complaint_repository import ComplaintRepository

REPORT_NUMBER_PATTERN = re.compile(r"^([A-Z]+)(\d+)$")
COUNTER_DIGITS = 5
MAX_COUNTER = 10**COUNTER_DIGITS - 1
FIRST_REPORT_NUMBER = f"A{1:0{COUNTER_DIGITS}d}"


def _increment_prefix(letters: str) -> str:
    """Next letter prefix in length-then-alphabetical order (``Z`` → ``AA``)."""
    chars = list(letters)
    for position in range(len(chars) - 1, -1, -1):
        if chars[position] != "Z":
            chars[position] = string.ascii_uppercase[
                string.ascii_uppercase.index(chars[position]) + 1
            ]
            return "".join(chars)
        chars[position] = "A"
    return "A" + "".join(chars)


def next_report_number(last: str | None) -> str:
    """Compute the report number that follows ``last``.

    Args:
        last: Highest report number issued so far, or None for an empty table.

    Returns:
        str: The next report number (e.g. ``"A00043"`` after ``"A00042"``).
    """
    if not last:
        return FIRST_REPORT_NUMBER

    match = REPORT_NUMBER_PATTERN.match(last)
    if not match:
        return FIRST_REPORT_NUMBER

    letters, digits = match.group(1), int(match.group(2))
    if digits < MAX_COUNTER:
        return f"{letters}{digits + 1:0{COUNTER_DIGITS}d}"
    return f"{_increment_prefix(letters)}{1:0{COUNTER_DIGITS}d}"


class ReportNumberGenerator:
    """Issues report numbers following the highest one stored."""

    def __init__(self, db: Session):
        self.complaint_repo = ComplaintRepository(db)

    def generate(self) -> str:
        return next_report_number(self.complaint_repo.get_latest_report_number())
