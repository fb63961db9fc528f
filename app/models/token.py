"""ORM model for issued bearer tokens."""

from sqlalchemy import Column, DateTime, ForeignKey, Uuid

from app.models.base import Base


class Token(Base):
    """
    Issued bearer token. The id itself is the secret presented by the client
    (encoded by app.core.token_codec); expired_at is NULL for tokens that live
    until logout.
    """

    __tablename__ = "tokens"

    id = Column(Uuid, primary_key=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expired_at = Column(DateTime(timezone=True), nullable=True, index=True)
