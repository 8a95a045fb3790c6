"""
DevHelper Backend — Snippet Models
====================================

What:  ORM models for the `snippets` and `snippet_tags` tables.
Who:   Used by SnippetService for every CRUD operation.

Table design:
    snippets      one row per snippet, owned by exactly one user (user_id FK)
    snippet_tags  one row per tag, keeping the order the user typed them in

    Tags live in their own table so "snippets carrying tag X" is a plain
    indexed query on both PostgreSQL and SQLite:

        SELECT ... FROM snippets
        WHERE user_id = :uid
          AND EXISTS (SELECT 1 FROM snippet_tags
                      WHERE snippet_id = snippets.id AND tag = :tag)
        ORDER BY created_at DESC

Lifecycle:
    Created by the create operation, overwritten in place by edit (created_at
    never changes), deleted together with its tag rows.
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from devhelper.database import Base

# Longest tag a snippet_tags row can hold; forms reject anything longer
TAG_MAX_LENGTH = 100


class Snippet(Base):
    __tablename__ = "snippets"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(300), nullable=False, default="")
    language: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        comment="When the snippet was created (UTC); not touched by edits",
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # selectin: tags are loaded with the snippets in one extra query, which
    # async sessions need since they cannot lazy-load on attribute access
    tag_rows: Mapped[List["SnippetTag"]] = relationship(
        back_populates="snippet",
        cascade="all, delete-orphan",
        order_by="SnippetTag.position",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_snippets_user_created_at", "user_id", "created_at"),
    )

    @property
    def tags(self) -> List[str]:
        return [row.tag for row in self.tag_rows]

    @tags.setter
    def tags(self, values: List[str]) -> None:
        self.tag_rows = [
            SnippetTag(position=position, tag=tag)
            for position, tag in enumerate(values)
        ]

    def __repr__(self) -> str:
        return f"<Snippet(id={self.id}, title='{self.title}', user_id={self.user_id})>"


class SnippetTag(Base):
    __tablename__ = "snippet_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    snippet_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("snippets.id", ondelete="CASCADE"),
        nullable=False,
    )

    position: Mapped[int] = mapped_column(Integer, nullable=False)

    # Always lower-case; normalised before it reaches the model
    tag: Mapped[str] = mapped_column(String(TAG_MAX_LENGTH), nullable=False)

    snippet: Mapped[Snippet] = relationship(back_populates="tag_rows")

    __table_args__ = (
        Index("idx_snippet_tags_tag", "tag"),
        Index("idx_snippet_tags_snippet_id", "snippet_id"),
    )

    def __repr__(self) -> str:
        return f"<SnippetTag(snippet_id={self.snippet_id}, tag='{self.tag}')>"
