"""ORM models. Importing this package registers every table with Base.metadata."""

from devhelper.models.user import User
from devhelper.models.snippet import Snippet, SnippetTag
from devhelper.models.session import UserSession

__all__ = ["User", "Snippet", "SnippetTag", "UserSession"]
