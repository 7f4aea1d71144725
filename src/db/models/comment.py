import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from ..database import Base
from ._utils import utcnow


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id = Column(
        Uuid,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author = Column(String(128), nullable=False)
    email = Column(String(128))
    body = Column(Text, nullable=False)
    is_approved = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    post = relationship("Post", back_populates="comments", lazy="noload")

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, post_id={self.post_id}, author={self.author!r})>"
