"""Tests for the per-complaint remark ceiling and remark ownership."""

import pytest

from ecare.core.errors import NotFound, RemarkLimitReached
from ecare.models.remark import AdminRemark, RemarkKind, TechnicianRemark
from ecare.repositories.complaint_repository import ComplaintRepository
from ecare.schemas.remark import RemarkCreate
from ecare.services.remark_ledger import MAX_REMARKS_PER_COMPLAINT, RemarkLedger
from tests.conftest import ADMIN_ID, TECH_ID, USER_ID, complaint_data


@pytest.fixture
def ledger(db_session):
    return RemarkLedger(db_session)


@pytest.fixture
def complaint(db_session):
    return ComplaintRepository(db_session).create(complaint_data(), USER_ID, "A00001")


def _append(ledger, db_session, kind, complaint_id, author_id, **fields):
    remark = ledger.append(kind, complaint_id, author_id, RemarkCreate(**fields))
    db_session.commit()
    return remark


class TestRemarkLedger:
    def test_append_stages_remark_of_each_kind(self, ledger, db_session, complaint):
        admin_remark = _append(
            ledger, db_session, RemarkKind.ADMIN, complaint.id, ADMIN_ID, remark="Check stock"
        )
        tech_remark = _append(
            ledger, db_session, RemarkKind.TECHNICIAN, complaint.id, TECH_ID, checking="Fan OK"
        )
        assert isinstance(admin_remark, AdminRemark)
        assert isinstance(tech_remark, TechnicianRemark)
        assert ledger.count_for(complaint.id) == 2
        assert [r.remark for r in ledger.list_for(complaint.id, RemarkKind.ADMIN)] == [
            "Check stock"
        ]
        assert [r.checking for r in ledger.list_for(complaint.id, RemarkKind.TECHNICIAN)] == [
            "Fan OK"
        ]

    def test_append_does_not_commit(self, ledger, db_session, complaint):
        ledger.append(RemarkKind.ADMIN, complaint.id, ADMIN_ID, RemarkCreate(remark="Draft"))
        db_session.rollback()
        assert ledger.count_for(complaint.id) == 0

    def test_ceiling_spans_both_kinds(self, ledger, db_session, complaint):
        _append(ledger, db_session, RemarkKind.ADMIN, complaint.id, ADMIN_ID, remark="1")
        _append(ledger, db_session, RemarkKind.TECHNICIAN, complaint.id, TECH_ID, remark="2")
        _append(ledger, db_session, RemarkKind.ADMIN, complaint.id, ADMIN_ID, remark="3")

        with pytest.raises(RemarkLimitReached, match="Maximum 3 remarks"):
            ledger.append(RemarkKind.TECHNICIAN, complaint.id, TECH_ID, RemarkCreate(remark="4"))
        assert ledger.count_for(complaint.id) == MAX_REMARKS_PER_COMPLAINT

    def test_count_never_exceeds_ceiling(self, ledger, db_session, complaint):
        accepted = 0
        for attempt in range(MAX_REMARKS_PER_COMPLAINT + 3):
            kind = RemarkKind.ADMIN if attempt % 2 else RemarkKind.TECHNICIAN
            author = ADMIN_ID if kind == RemarkKind.ADMIN else TECH_ID
            try:
                _append(ledger, db_session, kind, complaint.id, author, remark=str(attempt))
                accepted += 1
            except RemarkLimitReached:
                pass
            assert ledger.count_for(complaint.id) <= MAX_REMARKS_PER_COMPLAINT
        assert accepted == MAX_REMARKS_PER_COMPLAINT

    def test_ceiling_is_per_complaint(self, ledger, db_session, complaint):
        other = ComplaintRepository(db_session).create(complaint_data(), USER_ID, "A00002")
        for n in range(MAX_REMARKS_PER_COMPLAINT):
            _append(ledger, db_session, RemarkKind.ADMIN, complaint.id, ADMIN_ID, remark=str(n))
        _append(ledger, db_session, RemarkKind.ADMIN, other.id, ADMIN_ID, remark="fresh")
        assert ledger.count_for(other.id) == 1

    def test_append_to_missing_complaint(self, ledger):
        with pytest.raises(NotFound, match="Complaint 999 not found"):
            ledger.append(RemarkKind.ADMIN, 999, ADMIN_ID, RemarkCreate(remark="x"))

    def test_owner_of(self, ledger, db_session, complaint):
        remark = _append(
            ledger, db_session, RemarkKind.TECHNICIAN, complaint.id, TECH_ID, remark="mine"
        )
        assert ledger.owner_of(remark.id) == TECH_ID

    def test_owner_of_missing_remark(self, ledger):
        with pytest.raises(NotFound, match="Remark 999 not found"):
            ledger.owner_of(999)

    def test_update_replaces_every_field(self, ledger, db_session, complaint):
        remark = _append(
            ledger,
            db_session,
            RemarkKind.TECHNICIAN,
            complaint.id,
            TECH_ID,
            note_transport="Pickup Monday",
            checking="Compressor",
        )
        ledger.update(remark, RemarkCreate(remark="Replaced part"))
        db_session.commit()

        stored = ledger.get_technician_remark(remark.id)
        assert stored.note_transport is None
        assert stored.checking is None
        assert stored.remark == "Replaced part"

    def test_delete_frees_a_slot(self, ledger, db_session, complaint):
        remarks = [
            _append(ledger, db_session, RemarkKind.TECHNICIAN, complaint.id, TECH_ID, remark=str(n))
            for n in range(MAX_REMARKS_PER_COMPLAINT)
        ]
        ledger.delete(remarks[0])
        _append(ledger, db_session, RemarkKind.ADMIN, complaint.id, ADMIN_ID, remark="again")
        assert ledger.count_for(complaint.id) == MAX_REMARKS_PER_COMPLAINT
