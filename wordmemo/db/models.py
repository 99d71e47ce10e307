"""
Table models for persisted word lists.

Rows mirror the domain entities in ``wordmemo.core.models``; the store maps
between the two. Lemma links are stored as a nullable self reference on the
derivative row; the reverse side is rebuilt into the relationship graph on
load.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Float, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class WordListRow(Base):
    """A word list."""

    __tablename__ = "word_lists"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    last_used_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    schema_version: Mapped[int] = mapped_column(Integer, default=1)

    # Relationships
    entries: Mapped[list[WordEntryRow]] = relationship(
        back_populates="word_list",
        cascade="all, delete-orphan",
        order_by="WordEntryRow.position",
    )


class WordEntryRow(Base):
    """A vocabulary entry inside a list."""

    __tablename__ = "word_entries"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    list_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("word_lists.id", ondelete="CASCADE"), index=True
    )
    lemma_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("word_entries.id", ondelete="SET NULL"), index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0)
    term: Mapped[str] = mapped_column(Text, nullable=False)
    pronunciation: Mapped[str] = mapped_column(Text, default="")
    part_of_speech: Mapped[str] = mapped_column(Text, default="")
    definition: Mapped[str] = mapped_column(Text, default="")
    proficiency: Mapped[float] = mapped_column(Float, default=0.0)
    modified_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    last_reviewed_at: Mapped[datetime | None] = mapped_column(DateTime)

    # Relationships
    word_list: Mapped[WordListRow | None] = relationship(back_populates="entries")
