"""
DevHelper Backend — Form Schemas
==================================

What:  Pydantic models for the HTML form submissions (credentials, snippets,
       generation prompt) plus the tag normaliser.
How:   Routes read raw `Form` fields and call `<Model>.from_form(...)`. Pydantic
       errors are translated into the application's ValidationError so that a
       bad form yields a 400 with a short message rather than FastAPI's 422.
"""

from typing import List

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from devhelper.exceptions import ValidationError
from devhelper.models.snippet import TAG_MAX_LENGTH
from devhelper.models.user import USERNAME_MAX_LENGTH


def normalize_tags(raw: str) -> List[str]:
    """
    Split a comma-separated tag string into clean tags.

    Each entry is trimmed and lower-cased; blank entries are dropped and the
    original order is kept:

        >>> normalize_tags(" Foo, BAR ")
        ['foo', 'bar']
        >>> normalize_tags("")
        []
    """
    tags = [part.strip().lower() for part in (raw or "").split(",")]
    return [tag for tag in tags if tag]


def _raise_first(exc: PydanticValidationError) -> None:
    error = exc.errors()[0]
    field = str(error["loc"][0]) if error.get("loc") else None
    message = str(error.get("msg", "Invalid input"))
    # pydantic prefixes custom ValueError messages
    message = message.removeprefix("Value error, ")
    raise ValidationError(message=message, field=field) from None


class CredentialsForm(BaseModel):
    """Username/password pair submitted by the login and register forms."""

    username: str
    password: str

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required")
        if len(v) > USERNAME_MAX_LENGTH:
            raise ValueError(f"Username must be at most {USERNAME_MAX_LENGTH} characters")
        return v

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v

    @classmethod
    def from_form(cls, username: str, password: str) -> "CredentialsForm":
        try:
            return cls(username=username, password=password)
        except PydanticValidationError as e:
            _raise_first(e)


class SnippetForm(BaseModel):
    """
    Fields of the add / save / edit snippet forms.

    `tags` arrives as the raw comma-separated string and leaves as a list of
    normalised tags.
    """

    title: str = Field(max_length=300)
    language: str = Field(default="", max_length=100)
    content: str
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", "language", mode="before")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content is required")
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        if isinstance(v, str):
            return normalize_tags(v)
        return v

    @field_validator("tags")
    @classmethod
    def tags_fit_column(cls, v: List[str]) -> List[str]:
        for tag in v:
            if len(tag) > TAG_MAX_LENGTH:
                raise ValueError(f"Tags must be at most {TAG_MAX_LENGTH} characters")
        return v

    @classmethod
    def from_form(cls, title: str, language: str, content: str, tags: str) -> "SnippetForm":
        try:
            return cls(title=title, language=language, content=content, tags=tags)
        except PydanticValidationError as e:
            _raise_first(e)


class PromptForm(BaseModel):
    """Prompt submitted to the generate page. Forwarded verbatim, never trimmed."""

    prompt: str

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Prompt cannot be empty")
        return v

    @classmethod
    def from_form(cls, prompt: str) -> "PromptForm":
        try:
            return cls(prompt=prompt)
        except PydanticValidationError as e:
            _raise_first(e)
