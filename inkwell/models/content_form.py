import re
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from inkwell.models.document import DocumentNode, NodeType
from inkwell.services.normalizer import generate_slug

TITLE_MAX_LENGTH = 70
SLUG_MAX_LENGTH = 100
EXCERPT_MAX_LENGTH = 5000

_SLUG_RE = re.compile(r"^[a-z0-9-]+$")


class ContentForm(BaseModel):
    """Fields shared by every editor form that carries a rich-text document."""

    title: str = Field(default="", validate_default=True)
    slug: str = Field(
        default="",
        validate_default=True,
        description="Derived from the title when left empty.",
    )
    json_content: DocumentNode = Field(default=None, validate_default=True)

    @field_validator("title")
    @classmethod
    def _check_title(cls, value: str) -> str:
        if not value:
            raise ValueError("Title is required")
        if len(value) > TITLE_MAX_LENGTH:
            raise ValueError(f"Title must not exceed {TITLE_MAX_LENGTH} characters")
        return value

    @field_validator("slug", mode="before")
    @classmethod
    def _normalize_slug(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("slug")
    @classmethod
    def _check_slug(cls, value: str, info: ValidationInfo) -> str:
        if not value:
            title = info.data.get("title")
            if title is None:
                # Title already failed; its error is the one to report
                return value
            value = generate_slug(title)
            if not value:
                raise ValueError("Slug is required")
        if len(value) > SLUG_MAX_LENGTH:
            raise ValueError(f"Slug must not exceed {SLUG_MAX_LENGTH} characters")
        if not _SLUG_RE.match(value):
            raise ValueError("Slug can only contain lowercase letters, numbers, and hyphens")
        return value

    @field_validator("json_content", mode="before")
    @classmethod
    def _require_content(cls, value):
        if not isinstance(value, (dict, DocumentNode)):
            raise ValueError("Content is required")
        return value

    @field_validator("json_content")
    @classmethod
    def _require_doc_root(cls, value: DocumentNode) -> DocumentNode:
        if value.type != NodeType.DOC:
            raise ValueError("Content must be a document with a 'doc' root node")
        return value


class PostForm(ContentForm):
    sub_title: Optional[str] = None
    excerpt: Optional[str] = Field(default=None, max_length=EXCERPT_MAX_LENGTH)
    author: Optional[str] = None
    published_at: Optional[datetime] = None
    category_id: Optional[str] = None
    image_id: Optional[str] = None
    tag_ids: List[str] = []
    post_status: Literal["DRAFT", "PUBLISHED", "TRASH"] = "DRAFT"


class PageForm(ContentForm):
    image_id: Optional[str] = None
    is_visible: bool = True


class PreparedPost(PostForm):
    """A validated post ready for storage: the document and its sanitized HTML."""

    html_content: str


class PreparedPage(PageForm):
    """A validated page ready for storage: the document and its sanitized HTML."""

    html_content: str


class SlugRequest(BaseModel):
    text: str = Field(max_length=1000)


class SlugResponse(BaseModel):
    slug: str
