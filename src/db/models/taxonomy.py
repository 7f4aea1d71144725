import uuid

from sqlalchemy import BigInteger, Column, DateTime, String, Uuid

from ..database import Base
from ._utils import utcnow


class Category(Base):
    __tablename__ = "categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(64), nullable=False)
    slug = Column(String(64), nullable=False, unique=True, index=True)
    description = Column(String(255))
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, slug={self.slug!r})>"


class Media(Base):
    """Uploaded file metadata; binary storage lives outside the database."""

    __tablename__ = "media"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    filename = Column(String(128), nullable=False)
    content_type = Column(String(255), nullable=False)
    size = Column(BigInteger, nullable=False, default=0)
    alt_text = Column(String(128))
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Media(id={self.id}, filename={self.filename!r})>"
