"""SQLAlchemy table definitions."""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator


class UTCDateTime(TypeDecorator[datetime]):
    """Timezone-aware UTC datetimes on every backend.

    SQLite has no timezone support, so values are stored there as naive UTC
    and re-tagged as UTC when read.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        value = value.astimezone(UTC)
        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


class Base(DeclarativeBase):
    pass


class StoryRow(Base):
    __tablename__ = "stories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    category: Mapped[str] = mapped_column(String(32))
    dateline: Mapped[datetime] = mapped_column(UTCDateTime())
    synopsis: Mapped[str] = mapped_column(Text)
    source_references: Mapped[list[str]] = mapped_column(JSON)
    interest_tier: Mapped[str] = mapped_column(String(32), index=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), index=True)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime())

    countries: Mapped[list["StoryCountryRow"]] = relationship(
        cascade="all, delete-orphan", lazy="selectin"
    )
    perspectives: Mapped[list["PerspectiveRow"]] = relationship(
        cascade="all, delete-orphan", lazy="selectin", order_by="PerspectiveRow.created_at"
    )


class StoryCountryRow(Base):
    __tablename__ = "story_countries"

    story_id: Mapped[str] = mapped_column(
        ForeignKey("stories.id", ondelete="CASCADE"), primary_key=True
    )
    country: Mapped[str] = mapped_column(String(16), primary_key=True, index=True)


class PerspectiveRow(Base):
    __tablename__ = "perspectives"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    story_id: Mapped[str] = mapped_column(ForeignKey("stories.id", ondelete="CASCADE"), index=True)
    holistic_digest: Mapped[str] = mapped_column(Text)
    stance: Mapped[str | None] = mapped_column(String(32))
    discourse_type: Mapped[str | None] = mapped_column(String(32))
    created_at: Mapped[datetime] = mapped_column(UTCDateTime())
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime())


class ArticleRow(Base):
    __tablename__ = "articles"
    __table_args__ = (Index("ix_articles_locale_created", "country", "language", "created_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    headline: Mapped[str] = mapped_column(Text)
    body: Mapped[str] = mapped_column(Text)
    summary: Mapped[str] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(32))
    country: Mapped[str] = mapped_column(String(16))
    language: Mapped[str] = mapped_column(String(8))
    is_fake: Mapped[bool] = mapped_column(Boolean, default=False)
    fake_reason: Mapped[str | None] = mapped_column(Text)
    publication_tier: Mapped[str] = mapped_column(String(32), index=True)
    variants: Mapped[list[dict[str, str]]] = mapped_column(JSON, default=list)
    published_at: Mapped[datetime] = mapped_column(UTCDateTime())
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), index=True)

    story_links: Mapped[list["ArticleStoryRow"]] = relationship(
        cascade="all, delete-orphan", lazy="selectin"
    )


class ArticleStoryRow(Base):
    """Weak link from an article to the story it came from.

    No foreign key to ``stories``: removing a story leaves its articles intact.
    """

    __tablename__ = "article_stories"

    article_id: Mapped[str] = mapped_column(
        ForeignKey("articles.id", ondelete="CASCADE"), primary_key=True
    )
    story_id: Mapped[str] = mapped_column(String(36), primary_key=True, index=True)
