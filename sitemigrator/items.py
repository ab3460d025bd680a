"""Pydantic models for extracted metadata, output items and the export aggregate."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from sitemigrator import settings

# ---------------------------------------------------------------------------
# Per-document metadata
# ---------------------------------------------------------------------------

class Metadata(BaseModel):
    """Generic page metadata, extracted once per document."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    meta_description: str = ""
    header_text: str = ""
    permalink: str | None = None


# ---------------------------------------------------------------------------
# Output units
# ---------------------------------------------------------------------------

class ContentItem(BaseModel):
    """One generated document: front matter block plus markdown body."""

    slug: str
    filename: str
    frontmatter: str
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    def render(self) -> str:
        return f"{self.frontmatter}\n\n{self.content}\n"


class ReviewRecord(BaseModel):
    """A customer review, accumulated across every product that quotes it."""

    name: str
    body: str
    products: list[str] = Field(default_factory=list)

    def add_product(self, ref: str) -> None:
        if ref not in self.products:
            self.products.append(ref)


class ExportMetadata(BaseModel):
    exported_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    format_version: str = settings.FORMAT_VERSION


class ExportCollection(BaseModel):
    """Every item produced by a run, grouped by output collection.

    Built once by the pipeline driver and handed to each step that adds to
    it; writers serialise it at the end of the run.
    """

    pages: list[ContentItem] = Field(default_factory=list)
    news: list[ContentItem] = Field(default_factory=list)
    products: list[ContentItem] = Field(default_factory=list)
    categories: list[ContentItem] = Field(default_factory=list)
    reviews: list[ContentItem] = Field(default_factory=list)
    home: dict[str, Any] | None = None
    metadata: ExportMetadata = Field(default_factory=ExportMetadata)

    COLLECTIONS: ClassVar[tuple[str, ...]] = ("pages", "news", "products", "categories", "reviews")

    def add(self, collection: str, item: ContentItem) -> None:
        if collection not in self.COLLECTIONS:
            raise KeyError(f"Unknown collection: {collection!r}")
        getattr(self, collection).append(item)

    def collection(self, name: str) -> list[ContentItem]:
        return getattr(self, name)

    def iter_items(self):
        for name in self.COLLECTIONS:
            for item in getattr(self, name):
                yield name, item

    def total(self) -> int:
        return sum(len(getattr(self, name)) for name in self.COLLECTIONS)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()


# ---------------------------------------------------------------------------
# Batch accounting
# ---------------------------------------------------------------------------

class BatchResult(BaseModel):
    successful: int = 0
    failed: int = 0
    total: int = 0

    def __add__(self, other: BatchResult) -> BatchResult:
        return BatchResult(
            successful=self.successful + other.successful,
            failed=self.failed + other.failed,
            total=self.total + other.total,
        )
