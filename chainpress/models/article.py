"""Article metadata and standalone post models."""

from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator

from chainpress.size_policy import MAX_POST_CHARS


class ArticleMetadata(BaseModel):
    """Metadata carried by an article's root record: title, abstract, tags, tip account."""

    title: str = Field(min_length=1, max_length=64, description="Article title")
    abstract: str = Field(default="", max_length=200, description="Short summary")
    cw: str = Field(default="", max_length=64, description="Content warning")
    reply_to: str = Field(default="", max_length=64, description="Address of the article being replied to")
    quote: str = Field(default="", max_length=64, description="Address of the article being cited")
    tags: str = Field(default="", max_length=128, description="Tags")
    lang: str = Field(default="en", min_length=2, max_length=2, description="Language code")
    tip_account: str = Field(default="", max_length=128, description="Account that receives tips")

    @field_validator("title", "abstract", "cw", "tip_account", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    def to_fields(self) -> Dict[str, Any]:
        """Registry field names for the root record (hyphenated as stored on the wire)."""
        return {
            "title": self.title,
            "abstract": self.abstract,
            "cw": self.cw,
            "reply-to": self.reply_to,
            "quote": self.quote,
            "tags": self.tags,
            "lang": self.lang,
            "tip-account": self.tip_account,
        }

    @classmethod
    def from_fields(cls, fields: Dict[str, Any]) -> Optional["ArticleMetadata"]:
        """Rebuild metadata from a root record's metadata; None if the title is missing."""
        if not fields.get("title"):
            return None
        return cls(
            title=fields["title"],
            abstract=fields.get("abstract", ""),
            cw=fields.get("cw", ""),
            reply_to=fields.get("reply-to", ""),
            quote=fields.get("quote", ""),
            tags=fields.get("tags", ""),
            lang=fields.get("lang") or "en",
            tip_account=fields.get("tip-account", ""),
        )


class PostData(BaseModel):
    """A short standalone post stored in a single record."""

    text: str = Field(max_length=MAX_POST_CHARS, description="Post content")
    cw: str = Field(default="", max_length=64, description="Content warning")
    reply_to: str = Field(default="", max_length=64, description="Address of the post being replied to")
    quote: str = Field(default="", max_length=64, description="Address of the post being quoted")
    tags: str = Field(default="", max_length=128, description="Tags")
    lang: str = Field(default="en", min_length=2, max_length=2, description="Language code")

    @field_validator("text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Post cannot be empty")
        return value

    def to_fields(self) -> Dict[str, Any]:
        """Registry metadata fields for the post record (text excluded)."""
        return {
            "cw": self.cw,
            "reply-to": self.reply_to,
            "quote": self.quote,
            "repost": "",
            "tags": self.tags,
            "lang": self.lang,
        }
