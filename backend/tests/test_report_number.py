"""Tests for report number generation."""

import pytest

from ecare.models.complaint import Complaint
from ecare.services.report_number import (
    FIRST_REPORT_NUMBER,
    ReportNumberGenerator,
    _increment_prefix,
    next_report_number,
)
from tests.conftest import USER_ID, complaint_data


class TestNextReportNumber:
    @pytest.mark.parametrize(
        ("last", "expected"),
        [
            (None, "A00001"),
            ("", "A00001"),
            ("A00001", "A00002"),
            ("A00042", "A00043"),
            ("A99999", "B00001"),
            ("Y99999", "Z00001"),
            ("Z99999", "AA00001"),
            ("AA00009", "AA00010"),
            ("AZ99999", "BA00001"),
            ("ZZ99999", "AAA00001"),
        ],
    )
    def test_sequence(self, last, expected):
        assert next_report_number(last) == expected

    def test_unrecognised_value_restarts(self):
        assert next_report_number("legacy-17") == FIRST_REPORT_NUMBER

    def test_increment_prefix(self):
        assert _increment_prefix("A") == "B"
        assert _increment_prefix("Z") == "AA"
        assert _increment_prefix("AZ") == "BA"


class TestReportNumberGenerator:
    def _insert(self, db_session, report_number):
        data = complaint_data()
        db_session.add(
            Complaint(
                report_number=report_number,
                user_id=USER_ID,
                subcategory=data.subcategory,
                complaint_type=data.complaint_type.value,
                brand_name=data.brand_name,
                state=data.state,
                details=data.details,
            )
        )
        db_session.commit()

    def test_first_number_on_empty_table(self, db_session):
        assert ReportNumberGenerator(db_session).generate() == "A00001"

    def test_follows_highest_stored_number(self, db_session):
        self._insert(db_session, "A00002")
        self._insert(db_session, "A00010")
        assert ReportNumberGenerator(db_session).generate() == "A00011"

    def test_longer_prefix_ranks_highest(self, db_session):
        self._insert(db_session, "Z99999")
        self._insert(db_session, "AA00003")
        assert ReportNumberGenerator(db_session).generate() == "AA00004"
