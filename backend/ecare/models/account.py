"""Account lookup tables: customers, admin staff and technicians."""

import uuid
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, String, Uuid, func

from ecare.core.database import Base


class ActorRole(str, Enum):
    USER = "user"
    ADMIN = "admin"
    TECHNICIAN = "technician"


class UserStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    SUSPENDED = "Suspended"


def generate_uuid() -> uuid.UUID:
    """Generate a new UUID."""
    return uuid.uuid4()


class User(Base):
    """Customer who registers complaints."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=generate_uuid)
    full_name = Column(String(255), nullable=False)
    ic_number = Column(String(20), unique=True, index=True, nullable=False)
    email = Column(String(255), nullable=True)
    contact_no = Column(String(30), nullable=True)
    state = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default=UserStatus.ACTIVE.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Admin(Base):
    """Admin staff account. Every admin receives complaint broadcasts."""

    __tablename__ = "admins"

    id = Column(Uuid, primary_key=True, default=generate_uuid)
    username = Column(String(100), unique=True, index=True, nullable=False)
    admin_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Technician(Base):
    """Technician account that complaints are forwarded to."""

    __tablename__ = "technicians"

    id = Column(Uuid, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    username = Column(String(100), unique=True, index=True, nullable=False)
    department = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
