"""Repositories for the account lookup tables."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ecare.models.account import Admin, Technician, User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: UUID) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def search_ids(self, term: str) -> list[UUID]:
        """Ids of users whose IC number or full name contains ``term``."""
        pattern = f"%{term}%"
        rows = (
            self.db.query(User.id)
            .filter(or_(User.ic_number.ilike(pattern), User.full_name.ilike(pattern)))
            .all()
        )
        return [row[0] for row in rows]


class AdminRepository:
    """Admin roster; the default ``AdminDirectory`` for notification fan-out."""

    def __init__(self, db: Session):
        self.db = db

    def list_active(self) -> list[UUID]:
        """Ids of every admin account, oldest first."""
        rows = self.db.query(Admin.id).order_by(Admin.created_at.asc(), Admin.id.asc()).all()
        return [row[0] for row in rows]


class TechnicianRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, technician_id: UUID) -> Technician | None:
        return self.db.query(Technician).filter(Technician.id == technician_id).first()

    def get_active_by_id(self, technician_id: UUID) -> Technician | None:
        return (
            self.db.query(Technician)
            .filter(Technician.id == technician_id, Technician.is_active == True)  # noqa: E712
            .first()
        )
