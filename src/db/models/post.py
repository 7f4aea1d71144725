import uuid

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
    Uuid,
    and_,
)
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import relationship

from ..database import Base
from ._utils import utcnow

TITLE_MAX_LENGTH = 128
KEYWORDS_MAX_LENGTH = 128
DESCRIPTION_MAX_LENGTH = 255
ROUTE_MAX_LENGTH = 255
VIEW_MAX_LENGTH = 255
EXCERPT_MAX_LENGTH = 512
SLUG_MAX_LENGTH = 128
DEFAULT_EXCERPT_LENGTH = 200

post_attachments = Table(
    "post_attachments",
    Base.metadata,
    Column("post_id", Uuid, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("media_id", Uuid, ForeignKey("media.id", ondelete="CASCADE"), primary_key=True),
)

post_categories = Table(
    "post_categories",
    Base.metadata,
    Column("post_id", Uuid, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Uuid, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)

POST_TABLE_ARGS = (
    # Storage-level guard for the type+slug rule checked during validation
    UniqueConstraint("type_id", "slug", name="uq_post_type_slug"),
    # Listing posts of a type by publish date
    Index("ix_post_type_published", "type_id", "published"),
)


class Post(Base):
    """Content item that is not positioned in the site structure.

    Attributes:
        id (UUID): Identity, assigned when the post is constructed.
        type_id (UUID): Content type the post belongs to.
        slug (str): URL segment, unique per content type.
        title (str): Required title, max 128 characters.
        keywords (str | None): Meta keywords, max 128 characters.
        description (str | None): Meta description, max 255 characters.
        route (str | None): Optional custom route, max 255 characters.
        view (str | None): Optional custom view, max 255 characters.
        excerpt (str | None): Optional excerpt, max 512 characters.
        body (str | None): Main post body (unbounded text).
        comment_count (int): Number of available comments.
        published (datetime | None): Publish timestamp; None for drafts.
        attachments (list[Media]): Attached media.
        categories (list[Category]): Selected categories.
        comments (list[Comment]): Comments, oldest first.
        post_type (PostType): Owning content type; not loaded unless requested.
    """

    __tablename__ = "posts"
    __table_args__ = POST_TABLE_ARGS

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    type_id = Column(
        Uuid,
        ForeignKey("post_types.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    slug = Column(String(SLUG_MAX_LENGTH), nullable=False)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    keywords = Column(String(KEYWORDS_MAX_LENGTH))
    description = Column(String(DESCRIPTION_MAX_LENGTH))
    route = Column(String(ROUTE_MAX_LENGTH))
    view = Column(String(VIEW_MAX_LENGTH))
    excerpt = Column(String(EXCERPT_MAX_LENGTH))
    body = Column(Text)
    comment_count = Column(Integer, default=0, nullable=False)
    published = Column(DateTime, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    attachments = relationship(
        "Media",
        secondary=post_attachments,
        order_by="Media.created_at",
        lazy="selectin",
    )
    categories = relationship(
        "Category",
        secondary=post_categories,
        order_by="Category.name",
        lazy="selectin",
    )
    post_type = relationship("PostType", back_populates="posts", lazy="noload")
    comments = relationship(
        "Comment",
        back_populates="post",
        order_by="Comment.created_at",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("id", uuid.uuid4())
        kwargs.setdefault("comment_count", 0)
        kwargs.setdefault("attachments", [])
        kwargs.setdefault("categories", [])
        kwargs.setdefault("comments", [])
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        title = self.title or ""
        title_repr = title[:30] + "..." if len(title) > 30 else title
        return f"<Post(id={self.id}, type_id={self.type_id}, slug={self.slug!r}, title={title_repr!r})>"

    def __str__(self) -> str:
        status = "Published" if self.is_published else "Draft"
        return f"Post '{self.title or ''}' ({status})"

    @hybrid_property
    def is_published(self) -> bool:
        return self.published is not None and self.published <= utcnow()

    @is_published.inplace.expression
    @classmethod
    def _is_published_expression(cls):
        return and_(cls.published.is_not(None), cls.published <= utcnow())

    def get_excerpt(self, length: int = DEFAULT_EXCERPT_LENGTH) -> str:
        """Return the excerpt, or a shortened body when no excerpt is set."""
        if self.excerpt:
            return self.excerpt
        body = self.body or ""
        if len(body) <= length:
            return body
        return body[:length] + "..."
