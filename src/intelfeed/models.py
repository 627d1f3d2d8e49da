"""Pure data models for the normalization pipeline.

All Pydantic models and enums live here. No I/O, no business logic.
Normalizers, parsers and the classifier import from this module; this
module only imports from stdlib and third-party packages.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Priority(StrEnum):
    """Four-level urgency, ordered low < medium < high < critical."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _PRIORITY_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if isinstance(other, Priority):
            return self.rank < other.rank
        return NotImplemented

    def __le__(self, other: object) -> bool:
        if isinstance(other, Priority):
            return self.rank <= other.rank
        return NotImplemented

    def __gt__(self, other: object) -> bool:
        if isinstance(other, Priority):
            return self.rank > other.rank
        return NotImplemented

    def __ge__(self, other: object) -> bool:
        if isinstance(other, Priority):
            return self.rank >= other.rank
        return NotImplemented


_PRIORITY_ORDER = [Priority.LOW, Priority.MEDIUM, Priority.HIGH, Priority.CRITICAL]


class VerificationStatus(StrEnum):
    """How the origin of a record has been established."""

    OFFICIAL = "OFFICIAL"
    VERIFIED = "VERIFIED"
    UNVERIFIED = "UNVERIFIED"


class TimestampConfidence(StrEnum):
    """Whether ``published_at`` came from the payload or the clock."""

    EXACT = "exact"
    APPROXIMATE = "approximate"


# ---------------------------------------------------------------------------
# Canonical record
# ---------------------------------------------------------------------------


class NormalizedDataItem(BaseModel):
    """Source-agnostic intelligence record -- the canonical model.

    Every normalizer produces these. Downstream filtering, ticker and
    export code operates entirely on ``NormalizedDataItem[]`` and never
    knows which upstream shape produced an item.

    Records are frozen: enrichment and classification build new values
    with ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    summary: str = ""
    url: str = Field(min_length=1)
    published_at: datetime = Field(alias="publishedAt")
    timestamp_confidence: TimestampConfidence = Field(
        default=TimestampConfidence.EXACT, alias="timestampConfidence"
    )
    source: str = Field(min_length=1)
    category: str
    tags: list[str] = Field(default_factory=list)
    priority: Priority = Priority.LOW
    trust_rating: int = Field(default=50, ge=0, le=100, alias="trustRating")
    verification_status: VerificationStatus = Field(
        default=VerificationStatus.UNVERIFIED, alias="verificationStatus"
    )
    data_quality: int = Field(default=50, ge=0, le=100, alias="dataQuality")
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", "title", "url", "source")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        seen: set[str] = set()
        tags: list[str] = []
        for tag in value:
            folded = str(tag).strip().lower()
            if folded and folded not in seen:
                seen.add(folded)
                tags.append(folded)
        return tags

    @field_validator("published_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        try:
            return value.astimezone(UTC)
        except OverflowError as exc:
            raise ValueError("timestamp out of range after UTC conversion") from exc


# ---------------------------------------------------------------------------
# Intermediate shapes
# ---------------------------------------------------------------------------


class Enclosure(BaseModel):
    """Media attachment on a feed item."""

    url: str = ""
    type: str = ""
    length: str = ""


class FeedItem(BaseModel):
    """Homogeneous intermediate item produced from RSS, Atom or rss2json JSON."""

    title: str = ""
    link: str = ""
    description: str = ""
    pub_date: str = ""
    categories: list[str] = Field(default_factory=list)
    enclosure: Enclosure | None = None
    author: str = ""
    guid: str = ""
    comments: str = ""
    raw: dict[str, Any] = Field(default_factory=dict)


class ParsedFeed(BaseModel):
    """Result of parsing a raw RSS/Atom document."""

    title: str = ""
    items: list[FeedItem] = Field(default_factory=list)


class StoryCard(BaseModel):
    """One story scraped from an HTML listing or a Markdown link list."""

    title: str = ""
    url: str = ""
    summary: str = ""
    date_text: str = ""
    categories: list[str] = Field(default_factory=list)
    thumbnail: str = ""
    read_time: str = ""


class CardSelectors(BaseModel):
    """CSS selectors locating story cards on a scraped listing page."""

    base_url: str
    card: str
    title: str
    summary: str = ""
    meta: str = ""
    thumbnail: str = "img"


class ItemContext(BaseModel):
    """What priority mappers, tag hooks and metadata enrichers inspect."""

    title: str = ""
    summary: str = ""
    categories: list[str] = Field(default_factory=list)
    link: str = ""
    raw: dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str:
        """Title, summary and categories joined for keyword matching."""
        return " ".join([self.title, self.summary, *self.categories])


class UrlTransform(BaseModel):
    """Replacement URL plus any tags/metadata the rewrite contributes."""

    url: str
    tags: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


PriorityMapper = Callable[[ItemContext], Priority]
TagHook = Callable[[ItemContext], list[str]]
MetadataHook = Callable[[ItemContext], dict[str, Any]]
TextHook = Callable[[str, ItemContext], str]
UrlHook = Callable[[str, ItemContext], UrlTransform | None]


class RSSNormalizerConfig(BaseModel):
    """Per-source configuration for the generic RSS normalizer."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    source_fallback: str
    category: str
    id_prefix: str = ""
    base_tags: list[str] = Field(default_factory=list)
    trust_rating: int = Field(default=70, ge=0, le=100)
    verification_status: VerificationStatus = VerificationStatus.VERIFIED
    data_quality: int = Field(default=80, ge=0, le=100)
    priority_mapper: PriorityMapper | None = None
    additional_tags: TagHook | None = None
    metadata_enricher: MetadataHook | None = None
    transform_title: TextHook | None = None
    transform_summary: TextHook | None = None
    transform_url: UrlHook | None = None


class ScrapedSourceConfig(BaseModel):
    """Per-source configuration for listing pages scraped into records."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    source: str
    category: str
    id_prefix: str
    path_segment: str
    selectors: CardSelectors
    base_tags: list[str] = Field(default_factory=list)
    trust_rating: int = Field(default=85, ge=0, le=100)
    verification_status: VerificationStatus = VerificationStatus.VERIFIED
    data_quality: int = Field(default=80, ge=0, le=100)
    priority_mapper: PriorityMapper | None = None


class ValidationResult(BaseModel):
    """Advisory outcome of a plugin schema check."""

    ok: bool
    errors: list[str] = Field(default_factory=list)
