"""Message models decoded from the mail backend's JSON API.

Wire field names are fixed by the backend (`ID`, `from`, `to`, `html`), so
each model maps them onto readable attribute names through aliases. The
backend itself emits the identifier as `id`; both spellings are accepted.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

NO_SUBJECT = "(No subject)"


class MessageSummary(BaseModel):
    """Listing representation of a captured message (no body)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("ID", "id"))
    subject: Optional[str] = None
    sender: str = Field(default="", validation_alias=AliasChoices("from", "sender"))
    received_at: datetime = Field(validation_alias=AliasChoices("timestamp", "received_at"))

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        # Some backends hand out numeric ids
        if isinstance(value, int):
            return str(value)
        return value

    @property
    def display_subject(self) -> str:
        return display_subject(self.subject)


class MessageDetail(BaseModel):
    """Full representation of a captured message."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("ID", "id"))
    subject: Optional[str] = None
    sender: str = Field(default="", validation_alias=AliasChoices("from", "sender"))
    recipients: List[str] = Field(
        default_factory=list, validation_alias=AliasChoices("to", "recipients")
    )
    received_at: datetime = Field(validation_alias=AliasChoices("timestamp", "received_at"))
    is_html: bool = Field(default=False, validation_alias=AliasChoices("html", "is_html"))
    body: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("recipients", mode="before")
    @classmethod
    def _null_recipients(cls, value):
        return [] if value is None else value

    @field_validator("body", mode="before")
    @classmethod
    def _null_body(cls, value):
        return "" if value is None else value

    @property
    def display_subject(self) -> str:
        return display_subject(self.subject)


def display_subject(subject: Optional[str]) -> str:
    """Return the subject, or the placeholder when it is absent or empty."""
    return subject if subject else NO_SUBJECT


def format_timestamp(value: datetime) -> str:
    """Render a timestamp in the local time zone using the locale's format."""
    return value.astimezone().strftime("%x %X")
