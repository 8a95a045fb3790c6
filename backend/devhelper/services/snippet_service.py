"""
DevHelper Backend — Snippet Service
=====================================

What:  Per-user snippet CRUD: list (with tag filter), fetch for edit, create,
       update, delete.
Who:   Called by the routes in routes/snippets.py, always with the user id
       resolved by the session guard.

Ownership:
    Every read-for-edit and every mutation checks snippet.user_id against the
    caller. A foreign snippet is reported exactly like a missing one
    (NotFoundError → 404) for reads and updates. Delete keeps its
    "missing id is success" contract, but refuses a foreign snippet with 404.

Error Handling Strategy:
    SQLAlchemyError → DatabaseError carrying the operation's message
    ("Error in saving the snippet", ...). NotFoundError propagates as-is.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from devhelper.exceptions import DatabaseError, NotFoundError
from devhelper.models.snippet import Snippet, SnippetTag
from devhelper.schemas.forms import SnippetForm

logger = logging.getLogger(__name__)


def parse_snippet_id(raw: str) -> Optional[uuid.UUID]:
    """Return the UUID for a path segment, or None when it is malformed."""
    try:
        return uuid.UUID(raw)
    except (ValueError, TypeError):
        return None


class SnippetService:

    async def list_snippets(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        tag: Optional[str] = None,
    ) -> List[Snippet]:
        """
        Snippets owned by `user_id`, newest first.

        When `tag` is given (any case), only snippets whose tags contain
        tag.lower() are returned. An empty list is a normal result.
        """
        query = select(Snippet).where(Snippet.user_id == user_id)
        if tag:
            query = query.where(Snippet.tag_rows.any(SnippetTag.tag == tag.strip().lower()))
        query = query.order_by(desc(Snippet.created_at))

        try:
            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing snippets for %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error in fetching snippets",
                context={"user_id": str(user_id), "tag": tag},
            )

    async def get_owned(
        self,
        db: AsyncSession,
        snippet_id: str,
        user_id: uuid.UUID,
        error_message: str = "Error in fetching the snippet",
    ) -> Snippet:
        """
        Fetch a snippet that belongs to `user_id`.

        Raises:
            NotFoundError: malformed id, no such snippet, or someone else's
            DatabaseError: the lookup failed (message from `error_message`)
        """
        parsed = parse_snippet_id(snippet_id)
        if parsed is None:
            raise NotFoundError(resource="snippet", resource_id=snippet_id)

        try:
            snippet = await db.get(Snippet, parsed)
        except SQLAlchemyError as e:
            logger.error("Database error fetching snippet %s: %s", snippet_id, str(e))
            raise DatabaseError(message=error_message, context={"snippet_id": snippet_id})

        if snippet is None or snippet.user_id != user_id:
            raise NotFoundError(
                resource="snippet",
                resource_id=snippet_id,
                context={"foreign": snippet is not None},
            )
        return snippet

    async def create_snippet(
        self,
        db: AsyncSession,
        form: SnippetForm,
        user_id: uuid.UUID,
    ) -> Snippet:
        """Persist a new snippet owned by `user_id`."""
        snippet = Snippet(
            title=form.title,
            language=form.language,
            content=form.content,
            user_id=user_id,
        )
        snippet.tags = form.tags

        try:
            db.add(snippet)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error saving snippet for %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error in saving the snippet",
                context={"user_id": str(user_id)},
            )

        logger.info("Snippet %s created by %s (%d tags)", snippet.id, user_id, len(form.tags))
        return snippet

    async def update_snippet(
        self,
        db: AsyncSession,
        snippet_id: str,
        form: SnippetForm,
        user_id: uuid.UUID,
    ) -> Snippet:
        """Overwrite title, language, content and tags. created_at is kept."""
        snippet = await self.get_owned(
            db, snippet_id, user_id, error_message="Error in updating the snippet"
        )

        snippet.title = form.title
        snippet.language = form.language
        snippet.content = form.content
        snippet.tags = form.tags

        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error updating snippet %s: %s", snippet_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error in updating the snippet",
                context={"snippet_id": snippet_id},
            )

        logger.info("Snippet %s updated by %s", snippet.id, user_id)
        return snippet

    async def delete_snippet(
        self,
        db: AsyncSession,
        snippet_id: str,
        user_id: uuid.UUID,
    ) -> bool:
        """
        Delete a snippet owned by `user_id`.

        Returns:
            True if a row was deleted, False if the id did not exist.

        Raises:
            NotFoundError: the snippet exists but belongs to another user
        """
        parsed = parse_snippet_id(snippet_id)
        if parsed is None:
            return False

        try:
            snippet = await db.get(Snippet, parsed)
            if snippet is None:
                return False
            if snippet.user_id != user_id:
                raise NotFoundError(
                    resource="snippet",
                    resource_id=snippet_id,
                    context={"foreign": True},
                )
            await db.delete(snippet)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error deleting snippet %s: %s", snippet_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error in deleting the snippet",
                context={"snippet_id": snippet_id},
            )

        logger.info("Snippet %s deleted by %s", snippet_id, user_id)
        return True


snippet_service = SnippetService()
