from datetime import datetime
import uuid

from pydantic import BaseModel, Field, field_validator

from .taxonomy import CategoryOut, MediaOut

MAX_SLUG_LENGTH = 128
MAX_TITLE_LENGTH = 128
MAX_KEYWORDS_LENGTH = 128
MAX_META_LENGTH = 255
MAX_EXCERPT_LENGTH = 512
SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
WORDS_PER_MINUTE = 200


def clean_whitespace(text: str) -> str:
    return " ".join(text.split())


def count_words(text: str | None) -> int:
    return len(text.split()) if text else 0


class TitleCleanupMixin:
    @field_validator("title", check_fields=False)
    @classmethod
    def clean_title(cls, title: str | None) -> str | None:
        return clean_whitespace(title) if title is not None else None


class PostFields(TitleCleanupMixin, BaseModel):
    """Editable post fields.

    Length limits mirror the model rules so malformed requests fail early;
    the model validator remains the authority (including slug uniqueness).
    """

    title: str = Field(..., max_length=MAX_TITLE_LENGTH, description="Post title")
    slug: str | None = Field(
        None,
        max_length=MAX_SLUG_LENGTH,
        pattern=SLUG_PATTERN,
        description="URL slug, generated from the title when omitted",
    )
    keywords: str | None = Field(None, max_length=MAX_KEYWORDS_LENGTH)
    description: str | None = Field(None, max_length=MAX_META_LENGTH)
    route: str | None = Field(None, max_length=MAX_META_LENGTH)
    view: str | None = Field(None, max_length=MAX_META_LENGTH)
    excerpt: str | None = Field(None, max_length=MAX_EXCERPT_LENGTH)
    body: str | None = Field(None, description="Main post body")


class PostCreate(PostFields):
    type_id: uuid.UUID = Field(..., description="Content type id")
    category_ids: list[uuid.UUID] = Field(default_factory=list)
    attachment_ids: list[uuid.UUID] = Field(default_factory=list)
    published: datetime | None = Field(None, description="Publish timestamp; omit for a draft")


class PostUpdate(TitleCleanupMixin, BaseModel):
    title: str | None = Field(None, max_length=MAX_TITLE_LENGTH)
    slug: str | None = Field(None, max_length=MAX_SLUG_LENGTH, pattern=SLUG_PATTERN)
    keywords: str | None = Field(None, max_length=MAX_KEYWORDS_LENGTH)
    description: str | None = Field(None, max_length=MAX_META_LENGTH)
    route: str | None = Field(None, max_length=MAX_META_LENGTH)
    view: str | None = Field(None, max_length=MAX_META_LENGTH)
    excerpt: str | None = Field(None, max_length=MAX_EXCERPT_LENGTH)
    body: str | None = None
    category_ids: list[uuid.UUID] | None = None
    attachment_ids: list[uuid.UUID] | None = None


class PostOut(BaseModel):
    id: uuid.UUID
    type_id: uuid.UUID
    slug: str
    title: str
    keywords: str | None = None
    description: str | None = None
    route: str | None = None
    view: str | None = None
    excerpt: str | None = None
    body: str | None = None
    comment_count: int = 0
    published: datetime | None = None
    is_published: bool = False
    created_at: datetime
    updated_at: datetime
    categories: list[CategoryOut] = Field(default_factory=list)
    attachments: list[MediaOut] = Field(default_factory=list)
    word_count: int | None = Field(None, description="Number of words in the body")
    reading_time: int | None = Field(None, description="Estimated reading time in minutes")

    model_config = {"from_attributes": True}

    def model_post_init(self, __context):
        self.word_count = count_words(self.body)
        self.reading_time = max(1, round(self.word_count / WORDS_PER_MINUTE))


class PostQuery(BaseModel):
    type_id: uuid.UUID | None = None
    category_id: uuid.UUID | None = None
    published_only: bool = False
