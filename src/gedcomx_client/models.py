from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .links import Link, coerce_links


class HypermediaEnabledData(BaseModel):
    """
    Base model for GEDCOM X data that carries hypermedia links.
    We keep everything except `links` loosely typed: the full data model is large and
    states only need the links to navigate.
    """

    id: Optional[str] = None
    links: Dict[str, Link] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @field_validator("links", mode="before")
    @classmethod
    def _normalize_links(cls, value: Any) -> Dict[str, Link]:
        return coerce_links(value)

    def get_link(self, rel: str) -> Optional[Link]:
        return self.links.get(rel)

    def link_href(self, rel: str) -> Optional[str]:
        link = self.get_link(rel)
        return link.href if link else None


class ResultConfidence(str, Enum):
    ONE = "1"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"


class Note(HypermediaEnabledData):
    lang: Optional[str] = None
    subject: Optional[str] = None
    text: Optional[str] = None
    attribution: Optional[Dict[str, Any]] = None


class Collection(HypermediaEnabledData):
    lang: Optional[str] = None
    title: Optional[str] = None
    size: Optional[int] = None


class Person(HypermediaEnabledData):
    private: Optional[bool] = None
    living: Optional[bool] = None


class SourceDescription(HypermediaEnabledData):
    about: Optional[str] = None
    resource_type: Optional[str] = Field(default=None, alias="resourceType")


class Gedcomx(HypermediaEnabledData):
    """A GEDCOM X document (`application/x-gedcomx-v1+json`)."""

    lang: Optional[str] = None
    description: Optional[str] = None
    persons: List[Person] = Field(default_factory=list)
    relationships: List[HypermediaEnabledData] = Field(default_factory=list)
    source_descriptions: List[SourceDescription] = Field(
        default_factory=list, alias="sourceDescriptions"
    )
    collections: List[Collection] = Field(default_factory=list)
    notes: List[Note] = Field(default_factory=list)


class Entry(HypermediaEnabledData):
    title: Optional[str] = None
    score: Optional[float] = None
    confidence: Optional[ResultConfidence] = None
    content: Optional[Dict[str, Any]] = None

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence_as_str(cls, value: Any) -> Any:
        # some servers send the confidence level as a bare integer
        return str(value) if isinstance(value, int) else value


class Feed(HypermediaEnabledData):
    """An Atom feed (`application/x-gedcomx-atom+json`), e.g. search results."""

    title: Optional[str] = None
    results: Optional[int] = None
    index: Optional[int] = None
    entries: List[Entry] = Field(default_factory=list)


class TokenResponse(BaseModel):
    """OAuth2 token response. `token` is the field name used by older protocol drafts."""

    access_token: Optional[str] = None
    token: Optional[str] = None
    # Loosely typed: only access_token or token decides the outcome.
    token_type: Any = None
    expires_in: Any = None
    refresh_token: Any = None
    scope: Any = None

    model_config = ConfigDict(extra="ignore")

    @property
    def bearer(self) -> Optional[str]:
        return self.access_token or self.token


__all__ = [
    "HypermediaEnabledData",
    "ResultConfidence",
    "Note",
    "Collection",
    "Person",
    "SourceDescription",
    "Gedcomx",
    "Entry",
    "Feed",
    "TokenResponse",
]
