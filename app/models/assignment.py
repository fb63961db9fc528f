"""Join rows assigning permissions and roles. Cascade-deleted with either side."""

import uuid

from sqlalchemy import Column, ForeignKey, UniqueConstraint, Uuid

from app.models.base import Base


class PermissionUser(Base):
    __tablename__ = "permission_user"
    __table_args__ = (UniqueConstraint("permission_id", "user_id"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    permission_id = Column(
        Uuid, ForeignKey("permissions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)


class RoleUser(Base):
    __tablename__ = "role_user"
    __table_args__ = (UniqueConstraint("role_id", "user_id"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    role_id = Column(Uuid, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)


class PermissionRole(Base):
    """Administrative bulk association; not consulted during authentication."""

    __tablename__ = "permission_role"
    __table_args__ = (UniqueConstraint("permission_id", "role_id"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    permission_id = Column(
        Uuid, ForeignKey("permissions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role_id = Column(Uuid, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True)
