import uuid

from sqlalchemy import Column, DateTime, String, Uuid
from sqlalchemy.orm import relationship

from ..database import Base
from ._utils import utcnow

NAME_MAX_LENGTH = 128
SLUG_MAX_LENGTH = 128


class PostType(Base):
    """Content type definition that a post belongs to."""

    __tablename__ = "post_types"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    slug = Column(String(SLUG_MAX_LENGTH), nullable=False, unique=True, index=True)
    description = Column(String(255))
    route = Column(String(255), doc="Default route for posts of this type")
    view = Column(String(255), doc="Default view for posts of this type")
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    posts = relationship("Post", back_populates="post_type", lazy="noload")

    def __repr__(self) -> str:
        return f"<PostType(id={self.id}, slug={self.slug!r})>"
