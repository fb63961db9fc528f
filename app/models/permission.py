"""ORM models for permissions and roles."""

import uuid

from sqlalchemy import Column, String, Uuid

from app.models.base import Base


class Permission(Base):
    """A single grantable capability, e.g. code CREATE_USER, name 'create user'."""

    __tablename__ = "permissions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    code = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)


class Role(Base):
    """A named label assigned to users, e.g. code ADMIN, name 'admin'."""

    __tablename__ = "roles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    code = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)


def normalize_code(code: str) -> str:
    """Codes are uppercase with spaces replaced by underscores."""
    return code.strip().upper().replace(" ", "_")


def normalize_name(name: str) -> str:
    return name.strip().lower()
