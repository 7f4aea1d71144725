"""Validation rules applied to a post before it is saved.

Field rules are declared on ``PostFieldRules`` and checked against the ORM
instance's attributes. The type+slug uniqueness rule needs storage access and
is answered by an injected ``PostSlugReader``; all failures are collected.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol
import uuid

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from db.models.post import (
    DESCRIPTION_MAX_LENGTH,
    EXCERPT_MAX_LENGTH,
    KEYWORDS_MAX_LENGTH,
    ROUTE_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    VIEW_MAX_LENGTH,
)

if TYPE_CHECKING:  # pragma: no cover
    from db.models.post import Post

logger = logging.getLogger(__name__)

SLUG_NOT_UNIQUE_MESSAGE = "TypeId and Slug combination should be unique"


class PostSlugReader(Protocol):
    async def count_slug_conflicts(self, type_id: uuid.UUID, slug: str, exclude_id: uuid.UUID | None) -> int:
        """Count posts of ``type_id`` using ``slug`` whose id differs from ``exclude_id``."""
        ...


class RuleViolation(BaseModel):
    field: str
    message: str


class ValidationResult(BaseModel):
    violations: list[RuleViolation] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def add(self, field: str, message: str) -> None:
        self.violations.append(RuleViolation(field=field, message=message))


class PostFieldRules(BaseModel):
    """Length and presence rules for post fields."""

    model_config = ConfigDict(from_attributes=True)

    title: str | None = Field(None, max_length=TITLE_MAX_LENGTH)
    keywords: str | None = Field(None, max_length=KEYWORDS_MAX_LENGTH)
    description: str | None = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    route: str | None = Field(None, max_length=ROUTE_MAX_LENGTH)
    view: str | None = Field(None, max_length=VIEW_MAX_LENGTH)
    excerpt: str | None = Field(None, max_length=EXCERPT_MAX_LENGTH)

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, title: str | None) -> str | None:
        if title is None or not title.strip():
            raise ValueError("Title must not be empty")
        return title


def check_field_rules(post: Post, result: ValidationResult) -> None:
    try:
        PostFieldRules.model_validate(post)
    except PydanticValidationError as e:
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else "__root__"
            result.add(field, error["msg"])


async def check_slug_unique(post: Post, reader: PostSlugReader, result: ValidationResult) -> None:
    conflicts = await reader.count_slug_conflicts(post.type_id, post.slug, post.id)
    if conflicts:
        result.add("slug", SLUG_NOT_UNIQUE_MESSAGE)


async def validate_post(post: Post, reader: PostSlugReader) -> ValidationResult:
    """Run every post rule and return the collected result."""
    result = ValidationResult()
    check_field_rules(post, result)
    await check_slug_unique(post, reader, result)
    if not result.is_valid:
        logger.info(
            "Post %s failed validation: %s",
            post.id,
            "; ".join(f"{v.field}: {v.message}" for v in result.violations),
        )
    return result
