"""ORM model for application users."""

import uuid

from sqlalchemy import Column, DateTime, String, Uuid, func

from app.models.base import Base


class User(Base):
    """
    User account. Permissions and roles are assigned through permission_user and
    role_user, independently of each other.

    email and username are stored lowercase; deleted_at marks a soft-deleted
    account, which is excluded from authentication and listing.
    """

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    profile_photo_id = Column(String(255), nullable=True)
    email_verified_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)
